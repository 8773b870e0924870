import pytest

from tab_practice.chords import CHORD_RULES, classify_chord, find_rule, pitch_classes


@pytest.mark.parametrize(
    "pitches, expected",
    [
        ([60, 64, 67], "C"),
        ([60, 63, 67], "Cm"),
        ([60, 64, 67, 70], "C7"),
        ([60, 63, 66], "Cdim"),
        ([60, 64, 68], "Caug"),
        ([60, 65, 67], "Csus4"),
        ([60, 62, 67], "Csus2"),
        ([60, 67], "C5"),
        ([40, 47, 52], "E5"),
        ([45, 52, 57, 60, 64], "Am"),
        ([40, 47, 52, 56, 59, 64], "E"),
        ([43, 47, 50, 55, 59, 67], "G"),
    ],
)
def test_templates(pitches, expected):
    assert classify_chord(pitches) == expected


def test_empty_input_has_no_label():
    assert classify_chord([]) is None


def test_single_pitch_class_is_note_name():
    assert classify_chord([64]) == "E"
    assert classify_chord([52, 64, 76]) == "E"


def test_root_is_lowest_note_not_lowest_pitch_class():
    # C major in first inversion: E in the bass, intervals 0, 3, 8 match nothing
    assert classify_chord([64, 67, 72]) == "E"
    # G in the bass over C and E: intervals 0, 5, 9 match nothing
    assert classify_chord([55, 60, 64]) == "G"


def test_earlier_rules_shadow_sevenths():
    # minor only excludes the major third, so a minor seventh chord stays minor
    assert classify_chord([60, 63, 67, 70]) == "Cm"
    # major only excludes the minor third and minor seventh
    assert classify_chord([60, 64, 67, 71]) == "C"


def test_unmatched_falls_back_to_root_name():
    # C and C#
    assert classify_chord([60, 61]) == "C"


def test_major_with_minor_seventh_is_dominant():
    assert find_rule([60, 64, 67, 70]).quality == "dominant7"


def test_deterministic():
    pitches = [50, 57, 62, 66]
    assert {classify_chord(pitches) for _ in range(10)} == {"D"}
    assert classify_chord(list(reversed(pitches))) == "D"


def test_pitch_classes():
    assert pitch_classes([60, 72, 64]) == frozenset({0, 4})


def test_rule_order():
    qualities = [rule.quality for rule in CHORD_RULES]
    assert qualities[:3] == ["major", "minor", "dominant7"]
    assert qualities[-1] == "power"
