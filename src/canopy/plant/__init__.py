from canopy.plant.commands import (ActivateGrowth,  # noqa: F401
                                   PlantCommand, RegenerateWithIteration)
from canopy.plant.config import PlantConfig  # noqa: F401
from canopy.plant.state import GrowthChannel, PlantState  # noqa: F401
