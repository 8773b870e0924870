"""Factory for creating tab_practice components."""

from typing import Optional, Dict, Type

from ..logger import get_logger
from ..live_inference import LiveInferenceEngine
from ..note_types import BarRange, Score, TempoRampPolicy
from ..practice_loop import PracticeLoopController
from .config import ConfigManager
from .interfaces import IPlayer, IScheduler

logger = get_logger(__name__)


class ComponentFactory:
    """Factory for creating tab_practice components from configuration."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

        # Register default component implementations
        self.loop_controller_classes: Dict[str, Type[PracticeLoopController]] = {
            "default": PracticeLoopController,
        }

        self.inference_engine_classes: Dict[str, Type[LiveInferenceEngine]] = {
            "default": LiveInferenceEngine,
        }

    def create_loop_controller(
        self,
        player: IPlayer,
        score: Optional[Score] = None,
        scheduler: Optional[IScheduler] = None,
        implementation: str = "default",
        **kwargs,
    ) -> PracticeLoopController:
        """Create a practice loop controller.

        Args:
            player: Playback engine the controller drives
            score: Currently loaded score
            scheduler: Scheduler for the deferred play command
            implementation: Name of the implementation to use
            **kwargs: Overrides for the "practice" configuration section

        Returns:
            Loop controller instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.loop_controller_classes:
            raise ValueError(f"Unknown loop controller implementation: {implementation}")

        config = self.config_manager.get_config("practice")
        config.update(kwargs)

        cls = self.loop_controller_classes[implementation]
        instance = cls(
            player,
            score=score,
            scheduler=scheduler,
            policy=TempoRampPolicy(
                loop_tempo=config["loop_tempo"],
                gradual_increase=config["gradual_increase"],
                increment=config["tempo_increment"],
                max_tempo=config["max_tempo"],
            ),
            bar_range=BarRange(config["start_bar"], config["end_bar"]),
            count_in=config["count_in"],
            start_delay=config["start_delay"],
        )

        logger.info(f"Created loop controller: {implementation}")
        return instance

    def create_inference_engine(
        self,
        player: Optional[IPlayer] = None,
        implementation: str = "default",
        **kwargs,
    ) -> LiveInferenceEngine:
        """Create a live inference engine, attached to player when one is given.

        Args:
            player: Playback engine whose active beats are followed
            implementation: Name of the implementation to use
            **kwargs: Overrides for the "fretboard" configuration section

        Returns:
            Inference engine instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.inference_engine_classes:
            raise ValueError(f"Unknown inference engine implementation: {implementation}")

        config = self.config_manager.get_config("fretboard")
        config.update(kwargs)

        cls = self.inference_engine_classes[implementation]
        instance = cls(tuning=config["tuning"])
        if player is not None:
            instance.attach(player)

        logger.info(f"Created inference engine: {implementation}")
        return instance
