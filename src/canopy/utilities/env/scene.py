from canopy.utilities.env.parsing import _env_int

DEFAULT_SCENE_WIDTH = 1280
DEFAULT_SCENE_HEIGHT = 720
DEFAULT_MAX_FPS = 60


class SceneConfiguration:
    @classmethod
    def scene_width(cls) -> int:
        return _env_int("CANOPY_SCENE_WIDTH", default=DEFAULT_SCENE_WIDTH, minimum=1)

    @classmethod
    def scene_height(cls) -> int:
        return _env_int(
            "CANOPY_SCENE_HEIGHT", default=DEFAULT_SCENE_HEIGHT, minimum=1
        )

    @classmethod
    def max_fps(cls) -> int:
        return _env_int("CANOPY_MAX_FPS", default=DEFAULT_MAX_FPS, minimum=1)
