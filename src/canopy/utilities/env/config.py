from canopy.utilities.env.growth import GrowthConfiguration
from canopy.utilities.env.scene import SceneConfiguration


class Configuration(
    GrowthConfiguration,
    SceneConfiguration,
):
    """Aggregate environment configuration helpers."""
