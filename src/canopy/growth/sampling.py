import random

DEFAULT_SELECTION_WINDOW = 5
DEFAULT_SELECTION_EXPONENT = 2.0


def biased_index(
    rng: random.Random,
    count: int,
    *,
    window: int = DEFAULT_SELECTION_WINDOW,
    exponent: float = DEFAULT_SELECTION_EXPONENT,
) -> int:
    """Pick an index into a best-first list, favouring the front.

    Only the first ``window`` entries are eligible. A uniform draw raised to
    ``exponent`` pushes the pick toward index 0.
    """

    if count <= 0:
        raise ValueError("count must be positive")
    span = min(window, count)
    index = int((rng.random() ** exponent) * span)
    return min(index, span - 1)
