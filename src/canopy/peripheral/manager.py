from functools import cached_property
from typing import Any

from reactivex.subject import BehaviorSubject, Subject

from canopy.plant.commands import PlantCommand
from canopy.utilities.logging import get_logger

logger = get_logger(__name__)


class PeripheralManager:
    """Hub for the streams that drive the simulation.

    The game loop pushes the pygame clock and one ``game_tick`` per frame;
    input controllers push :data:`PlantCommand` values onto ``commands``.
    """

    @cached_property
    def game_tick(self) -> Subject[Any]:
        return BehaviorSubject[Any](None)

    @cached_property
    def clock(self) -> Subject[Any]:
        return BehaviorSubject[Any](None)

    @cached_property
    def commands(self) -> Subject[PlantCommand]:
        return Subject()

    def send(self, command: PlantCommand) -> None:
        logger.debug("Dispatching %s", command)
        self.commands.on_next(command)
