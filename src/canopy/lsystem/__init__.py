from canopy.lsystem.grammar import LSystem, generate  # noqa: F401
from canopy.lsystem.segment import PlantPartType, Point, Segment  # noqa: F401
from canopy.lsystem.turtle import (DEFAULT_GLYPHS,  # noqa: F401
                                   LSystemInterpreter, TurtleGlyphs,
                                   TurtleState)
