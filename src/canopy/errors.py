class PlantConfigurationError(ValueError):
    """Raised when a plant configuration cannot produce a valid plant."""


class GrammarOverflowError(PlantConfigurationError):
    """Raised when grammar expansion would exceed the instruction length limit."""
