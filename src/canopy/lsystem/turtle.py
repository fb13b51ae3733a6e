from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace

from canopy.errors import PlantConfigurationError
from canopy.lsystem.segment import PlantPartType, Point, Segment
from canopy.utilities.logging import get_logger

logger = get_logger(__name__)

BRANCH_WIDTH_FACTOR = 0.8
LENGTH_INCREASE_FACTOR = 1.1
LEAF_LENGTH_FACTOR = 0.5
LEAF_WIDTH_FACTOR = 2.0
# Screen space: y grows downward, so "up" is -pi/2.
UP = -math.pi / 2


@dataclass(frozen=True)
class TurtleGlyphs:
    draw: str = "F"
    draw_root: str = "R"
    draw_leaf: str = "L"
    turn_right: str = "+"
    turn_left: str = "-"
    push: str = "["
    pop: str = "]"
    lengthen: str = ">"
    shorten: str = "<"
    stem: str = "S"
    branch: str = "B"
    root: str = "T"

    def __post_init__(self) -> None:
        symbols = [getattr(self, field.name) for field in fields(self)]
        if any(len(symbol) != 1 for symbol in symbols):
            raise PlantConfigurationError("Turtle glyphs must be single characters")
        if len(set(symbols)) != len(symbols):
            raise PlantConfigurationError("Turtle glyphs must be distinct")


DEFAULT_GLYPHS = TurtleGlyphs()


@dataclass(frozen=True)
class TurtleState:
    position: Point
    heading: float
    length: float
    width: float
    part_type: PlantPartType = PlantPartType.STEM
    generation: int = 0

    def step(self, length: float) -> Point:
        return (
            self.position[0] + math.cos(self.heading) * length,
            self.position[1] + math.sin(self.heading) * length,
        )


class LSystemInterpreter:
    """Turns an instruction string into plant segments with a 2D turtle."""

    def __init__(
        self,
        angle: float,
        initial_length: float,
        length_reduction: float,
        initial_width: float,
        origin: Point = (0.0, 0.0),
        glyphs: TurtleGlyphs = DEFAULT_GLYPHS,
    ) -> None:
        for name, value in (
            ("angle", angle),
            ("initial_length", initial_length),
            ("length_reduction", length_reduction),
            ("initial_width", initial_width),
            ("origin.x", origin[0]),
            ("origin.y", origin[1]),
        ):
            if not math.isfinite(value):
                raise PlantConfigurationError(f"{name} must be finite, got {value}")
        if initial_length <= 0 or initial_width <= 0:
            raise PlantConfigurationError("initial_length and initial_width must be positive")
        if not 0 < length_reduction <= 1:
            raise PlantConfigurationError("length_reduction must be in (0, 1]")

        self.angle = angle
        self.initial_length = initial_length
        self.length_reduction = length_reduction
        self.initial_width = initial_width
        self.origin = origin
        self.glyphs = glyphs

    def initial_state(self) -> TurtleState:
        return TurtleState(
            position=self.origin,
            heading=UP,
            length=self.initial_length,
            width=self.initial_width,
        )

    def interpret(self, instructions: str) -> list[Segment]:
        segments, _ = self.run(instructions)
        return segments

    def run(self, instructions: str) -> tuple[list[Segment], TurtleState]:
        """Interpret ``instructions`` and also return the final cursor state."""

        glyphs = self.glyphs
        turtle = self.initial_state()
        stack: list[TurtleState] = []
        segments: list[Segment] = []

        for index, symbol in enumerate(instructions):
            if symbol == glyphs.draw or symbol == glyphs.draw_root:
                end = turtle.step(turtle.length)
                part_type = (
                    PlantPartType.ROOT if symbol == glyphs.draw_root else turtle.part_type
                )
                segments.append(
                    Segment(
                        start=turtle.position,
                        end=end,
                        width=turtle.width,
                        part_type=part_type,
                        generation=turtle.generation,
                    )
                )
                turtle = replace(turtle, position=end)
            elif symbol == glyphs.draw_leaf:
                segments.append(
                    Segment(
                        start=turtle.position,
                        end=turtle.step(turtle.length * LEAF_LENGTH_FACTOR),
                        width=turtle.width * LEAF_WIDTH_FACTOR,
                        part_type=PlantPartType.LEAF,
                        generation=turtle.generation,
                    )
                )
            elif symbol == glyphs.turn_right:
                turtle = replace(turtle, heading=turtle.heading + self.angle)
            elif symbol == glyphs.turn_left:
                turtle = replace(turtle, heading=turtle.heading - self.angle)
            elif symbol == glyphs.push:
                stack.append(turtle)
                turtle = replace(
                    turtle,
                    part_type=PlantPartType.BRANCH,
                    width=turtle.width * BRANCH_WIDTH_FACTOR,
                    generation=turtle.generation + 1,
                )
            elif symbol == glyphs.pop:
                if stack:
                    turtle = stack.pop()
                else:
                    logger.warning(
                        "Unmatched '%s' at position %d; resetting turtle", symbol, index
                    )
                    turtle = self.initial_state()
            elif symbol == glyphs.lengthen:
                turtle = replace(turtle, length=turtle.length * LENGTH_INCREASE_FACTOR)
            elif symbol == glyphs.shorten:
                turtle = replace(
                    turtle,
                    length=turtle.length * self.length_reduction,
                    width=turtle.width * self.length_reduction,
                )
            elif symbol == glyphs.stem:
                turtle = replace(turtle, part_type=PlantPartType.STEM)
            elif symbol == glyphs.branch:
                turtle = replace(turtle, part_type=PlantPartType.BRANCH)
            elif symbol == glyphs.root:
                turtle = replace(turtle, part_type=PlantPartType.ROOT)

        if stack:
            logger.debug("%d unclosed branch(es) left on the turtle stack", len(stack))
        return segments, turtle
