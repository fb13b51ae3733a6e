"""Context-free L-system rewriting."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Mapping

from canopy.errors import GrammarOverflowError, PlantConfigurationError
from canopy.utilities.env.growth import DEFAULT_MAX_INSTRUCTION_LENGTH


def validate_rules(rules: Mapping[str, str]) -> None:
    for symbol, replacement in rules.items():
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise PlantConfigurationError(
                f"Rule keys must be single characters, got {symbol!r}"
            )
        if not isinstance(replacement, str):
            raise PlantConfigurationError(
                f"Rule for {symbol!r} must map to a string"
            )


def _next_length(counts: Counter[str], rules: Mapping[str, str]) -> int:
    return sum(
        count * len(rules.get(symbol, symbol)) for symbol, count in counts.items()
    )


def generate(
    axiom: str,
    rules: Mapping[str, str],
    iterations: int,
    *,
    max_length: int = DEFAULT_MAX_INSTRUCTION_LENGTH,
) -> str:
    """Rewrite ``axiom`` ``iterations`` times.

    Every character is replaced by its rule, or copied through when it has
    none. The size of each round is predicted from symbol counts before the
    string is built, so runaway rules such as ``F -> FF`` fail with
    :class:`GrammarOverflowError` instead of exhausting memory.
    """

    if iterations < 0:
        raise PlantConfigurationError(
            f"iterations must be non-negative, got {iterations}"
        )
    validate_rules(rules)
    if len(axiom) > max_length:
        raise GrammarOverflowError(
            f"Axiom length {len(axiom)} exceeds the limit of {max_length}"
        )

    current = axiom
    for round_index in range(iterations):
        counts = Counter(current)
        predicted = _next_length(counts, rules)
        if predicted > max_length:
            raise GrammarOverflowError(
                f"Round {round_index + 1} would produce {predicted} symbols "
                f"(limit {max_length})"
            )
        current = "".join(rules.get(symbol, symbol) for symbol in current)
    return current


@dataclass(frozen=True)
class LSystem:
    axiom: str
    rules: Mapping[str, str] = field(default_factory=dict)
    iterations: int = 0
    max_length: int = DEFAULT_MAX_INSTRUCTION_LENGTH

    def __post_init__(self) -> None:
        if self.iterations < 0:
            raise PlantConfigurationError(
                f"iterations must be non-negative, got {self.iterations}"
            )
        if self.max_length < 1:
            raise PlantConfigurationError("max_length must be positive")
        validate_rules(self.rules)

    def generate(self) -> str:
        return generate(
            self.axiom,
            self.rules,
            self.iterations,
            max_length=self.max_length,
        )
