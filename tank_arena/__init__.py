"""Top-level package for the Tank Arena battle simulation."""

__version__ = "1.0.0"

from tank_arena.core import (
    AiRegistry,
    AiWrapper,
    NullRenderer,
    Simulation,
    SimulationSettings,
    Tank,
    TankControl,
    TankController,
    TankState,
)
from tank_arena.bots import create_registry

__all__ = [
    "AiRegistry",
    "AiWrapper",
    "NullRenderer",
    "Simulation",
    "SimulationSettings",
    "Tank",
    "TankControl",
    "TankController",
    "TankState",
    "create_registry",
]

__all__.append("__version__")

try:
    from tank_arena.pygame import PygameArena, run_pygame  # type: ignore[misc]
except (ImportError, RuntimeError):
    PygameArena = None

    def run_pygame(*_args, **_kwargs):  # type: ignore[override]
        raise RuntimeError(
            "The pygame front-end requires the optional pygame dependency. "
            "Install pygame to enable graphical battles."
        )

    __all__.extend(["PygameArena", "run_pygame"])
else:
    __all__.extend(["PygameArena", "run_pygame"])
