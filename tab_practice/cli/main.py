"""Main entry point for the tab_practice CLI."""

import click

from ..chords import classify_chord
from ..core.config import ConfigManager
from ..core.factory import ComponentFactory
from ..core.scheduler import DeferredScheduler
from ..fretboard import FretboardLayout, display_row
from ..logger import get_logger
from ..logging_config import setup_logging
from ..mock_player import MockPlayer
from ..note_types import Bar, Beat, Score, TabNote
from ..note_utils import midi_to_note_name, note_name_to_midi
from ..ticks import bar_for_tick

logger = get_logger(__name__)

TICKS_PER_BAR = 3840  # 4/4 at 960 ticks per quarter


def _parse_pitches(values):
    pitches = []
    for value in values:
        midi = note_name_to_midi(value)
        if midi is None:
            raise click.BadParameter(f"not a MIDI number or note name: {value}")
        pitches.append(midi)
    return pitches


def _parse_position(value):
    try:
        string, fret = value.split(":")
        return TabNote(int(string), int(fret))
    except ValueError:
        raise click.BadParameter(f"expected STRING:FRET, got {value}")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory with practice.json / fretboard.json overrides",
)
@click.pass_context
def cli(ctx, debug, config_dir):
    """Practice loops and chord/fret inference for tablature playback."""
    setup_logging(level="DEBUG" if debug else "WARNING")
    ctx.obj = ComponentFactory(ConfigManager(config_dir))


@cli.command()
@click.argument("notes", nargs=-1, required=True)
def chord(notes):
    """Name the chord formed by NOTES (MIDI numbers or names such as E2)."""
    pitches = _parse_pitches(notes)
    click.echo(classify_chord(pitches))


@cli.command()
@click.argument("positions", nargs=-1, required=True)
@click.option("--tuning", default=None, help="Open strings, lowest first, e.g. 'E2 A2 D3 G3 B3 E4'")
@click.pass_obj
def frets(factory, positions, tuning):
    """Show where POSITIONS (STRING:FRET, string 1 = lowest) sit and which chord they form."""
    notes = [_parse_position(p) for p in positions]
    overrides = {}
    if tuning:
        overrides["tuning"] = _parse_pitches(tuning.replace(",", " ").split())

    player = MockPlayer()
    engine = factory.create_inference_engine(player, **overrides)
    layout = FretboardLayout.for_tuning(
        engine.tuning, factory.config_manager.get_config("fretboard")["num_frets"]
    )
    with engine:
        player.sound([Beat(notes=notes)])

    for position, (x, y) in zip(engine.active_notes, layout.note_coordinates(engine.active_notes)):
        pitch_index = position.string - 1
        name = (
            midi_to_note_name(engine.tuning[pitch_index] + position.fret)
            if 0 <= pitch_index < len(engine.tuning)
            else "?"
        )
        click.echo(
            f"{position}  {name:<4} row {display_row(position.string, engine.num_strings)}"
            f"  at ({x:.0f}, {y:.0f})"
        )
    chord_name = engine.active_chord.name if engine.active_chord else "-"
    click.echo(f"Chord: {chord_name}")


@cli.command()
@click.option("--bars", default=16, show_default=True, help="Bars in the simulated score")
@click.option("--start", "start_bar", default=None, type=int, help="First bar of the loop")
@click.option("--end", "end_bar", default=None, type=int, help="Last bar of the loop")
@click.option("--tempo", default=None, type=float, help="Loop tempo multiplier")
@click.option("--ramp", is_flag=True, help="Increase the tempo after every pass")
@click.option("--increment", default=None, type=float, help="Tempo increase per pass")
@click.option("--max-tempo", default=None, type=float, help="Upper bound for the ramp")
@click.option("--count-in", is_flag=True, help="Play a count-in before each loop")
@click.option("--loops", default=4, show_default=True, help="Passes to simulate")
@click.pass_obj
def loop(factory, bars, start_bar, end_bar, tempo, ramp, increment, max_tempo, count_in, loops):
    """Simulate a practice session against a stand-in player."""
    overrides = {
        "start_bar": start_bar,
        "end_bar": end_bar,
        "loop_tempo": tempo,
        "gradual_increase": ramp or None,
        "tempo_increment": increment,
        "max_tempo": max_tempo,
        "count_in": count_in or None,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}

    score = Score([Bar(i * TICKS_PER_BAR, TICKS_PER_BAR) for i in range(bars)])
    player = MockPlayer()
    scheduler = DeferredScheduler()
    controller = factory.create_loop_controller(player, score, scheduler, **overrides)

    controller.activate()
    if not controller.start_loop():
        click.echo("Nothing to loop: the score has no bars.")
        controller.deactivate()
        return
    scheduler.run_until_idle()

    playback_range = player.playback_range
    click.echo(
        f"Looping bars {controller.bar_range.start_bar}-{controller.bar_range.end_bar} "
        f"(ticks {playback_range.start_tick}-{playback_range.end_tick}, "
        f"starts in bar {bar_for_tick(score.bars, playback_range.start_tick)}) "
        f"at {controller.loop_tempo:.0%}"
    )
    for _ in range(loops):
        player.finish_pass()
        click.echo(f"Pass {controller.loop_count}: next tempo {controller.loop_tempo:.0%}")

    controller.deactivate()
    click.echo(f"Stopped, tempo restored to {player.tempo:.0%}")
    logger.info("Simulated %d passes", loops)


def main():
    cli()


if __name__ == "__main__":
    main()
