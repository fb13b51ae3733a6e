import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import random
from typing import Annotated, Optional

import typer

from canopy.errors import PlantConfigurationError
from canopy.growth.engine import GrowthEngine
from canopy.growth.phase import GrowthKind
from canopy.lsystem.segment import PlantPartType
from canopy.plant.config import PlantConfig
from canopy.plant.state import PlantState
from canopy.utilities.env import Configuration
from canopy.utilities.env.growth import MAX_ITERATIONS
from canopy.utilities.logging import get_logger

logger = get_logger(__name__)

app = typer.Typer(help="Grow L-system plants.")

DEFAULT_GROW_TICKS = 5


def _load_config(iterations: int | None) -> PlantConfig:
    overrides = {} if iterations is None else {"iterations": iterations}
    try:
        return PlantConfig.from_env(**overrides)
    except (PlantConfigurationError, ValueError) as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2) from exc


@app.command(name="run")
def run_command(
    iterations: Annotated[
        Optional[int],
        typer.Option(
            "--iterations", "-n", min=0, max=MAX_ITERATIONS, help="Grammar iterations."
        ),
    ] = None,
    seed: Annotated[
        Optional[int], typer.Option("--seed", help="Seed for the growth RNG.")
    ] = None,
    max_fps: Annotated[
        Optional[int], typer.Option("--max-fps", min=1, help="Frame rate cap.")
    ] = None,
) -> None:
    """Open the interactive plant window."""

    from canopy.runtime.container import build_runtime_container
    from canopy.runtime.game_loop import GameLoop

    config = _load_config(iterations)
    resolver = build_runtime_container(config, seed=seed)
    GameLoop(resolver, max_fps=max_fps).start()


@app.command(name="grow")
def grow_command(
    iterations: Annotated[
        Optional[int],
        typer.Option(
            "--iterations", "-n", min=0, max=MAX_ITERATIONS, help="Grammar iterations."
        ),
    ] = None,
    seed: Annotated[
        Optional[int], typer.Option("--seed", help="Seed for the growth RNG.")
    ] = None,
    kinds: Annotated[
        Optional[list[GrowthKind]],
        typer.Option("--kind", "-k", help="Growth kind to activate (repeatable)."),
    ] = None,
    ticks: Annotated[
        int, typer.Option("--ticks", min=0, help="Growth ticks to run.")
    ] = DEFAULT_GROW_TICKS,
) -> None:
    """Generate a plant, run growth ticks headlessly and print a summary."""

    config = _load_config(iterations)
    seed = seed if seed is not None else Configuration.seed()
    engine = GrowthEngine(config.scene, rng=random.Random(seed))

    state = PlantState.generate(config)
    for kind in kinds or ():
        state = state.activate(kind)
    for _ in range(ticks):
        if not state.any_growing:
            break
        state = state.tick(engine)

    typer.echo(f"iterations: {config.iterations}")
    typer.echo(f"growth cycles: {state.growth_cycle}")
    for part_type in PlantPartType:
        typer.echo(f"{part_type}: {state.count(part_type)}")
    typer.echo(f"total: {len(state.segments)}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
