import os

from canopy.utilities.env.enums import BranchOverlapStrategy
from canopy.utilities.env.parsing import (_env_float, _env_int,
                                          _env_optional_int)

DEFAULT_ITERATIONS = 3
MAX_ITERATIONS = 6
DEFAULT_TICK_INTERVAL_MS = 500.0
DEFAULT_MAX_INSTRUCTION_LENGTH = 1_000_000


class GrowthConfiguration:
    @classmethod
    def iterations(cls) -> int:
        return _env_int(
            "CANOPY_ITERATIONS",
            default=DEFAULT_ITERATIONS,
            minimum=0,
            maximum=MAX_ITERATIONS,
        )

    @classmethod
    def max_iterations(cls) -> int:
        return MAX_ITERATIONS

    @classmethod
    def seed(cls) -> int | None:
        return _env_optional_int("CANOPY_SEED")

    @classmethod
    def tick_interval_ms(cls) -> float:
        return _env_float(
            "CANOPY_TICK_INTERVAL_MS",
            default=DEFAULT_TICK_INTERVAL_MS,
            minimum=1.0,
        )

    @classmethod
    def max_instruction_length(cls) -> int:
        return _env_int(
            "CANOPY_MAX_INSTRUCTION_LENGTH",
            default=DEFAULT_MAX_INSTRUCTION_LENGTH,
            minimum=1,
        )

    @classmethod
    def branch_overlap_strategy(cls) -> BranchOverlapStrategy:
        strategy = os.environ.get(
            "CANOPY_BRANCH_OVERLAP_STRATEGY", BranchOverlapStrategy.AFTER_WARMUP
        ).strip().lower()
        try:
            return BranchOverlapStrategy(strategy)
        except ValueError as exc:
            raise ValueError(
                "CANOPY_BRANCH_OVERLAP_STRATEGY must be 'off', 'always', or 'after_warmup'"
            ) from exc
