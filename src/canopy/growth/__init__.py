from canopy.growth.engine import (GrowthEngine, GrowthResult,  # noqa: F401
                                  GrowthSettings, KindSettings)
from canopy.growth.growth_map import GrowthMap  # noqa: F401
from canopy.growth.phase import (TICK_ORDER, GrowthKind,  # noqa: F401
                                 GrowthPhase, GrowthStatus)
from canopy.growth.scene import SceneGeometry  # noqa: F401
