"""Core battle engine for Tank Arena, independent of rendering."""

from tank_arena.core.ai import (
    AiInfo,
    AiRegistry,
    AiState,
    AiWrapper,
    TankControl,
    TankController,
    TankState,
)
from tank_arena.core.battlefield import Battlefield, StartSlot
from tank_arena.core.bullet import Bullet, BulletSnapshot
from tank_arena.core.collision import CollisionResolver
from tank_arena.core.errors import (
    AiActivationError,
    AiError,
    AiStateError,
    AiStepError,
    NoFreeSlotError,
    NotInitializedError,
    SimulationError,
)
from tank_arena.core.renderer import NullRenderer, Renderer
from tank_arena.core.rng import RandomStream
from tank_arena.core.simulation import EngineState, Simulation, SimulationSettings
from tank_arena.core.tank import RadarContact, Tank, TankSnapshot

__all__ = [
    "AiActivationError",
    "AiError",
    "AiInfo",
    "AiRegistry",
    "AiState",
    "AiStateError",
    "AiStepError",
    "AiWrapper",
    "Battlefield",
    "Bullet",
    "BulletSnapshot",
    "CollisionResolver",
    "EngineState",
    "NoFreeSlotError",
    "NotInitializedError",
    "NullRenderer",
    "RadarContact",
    "RandomStream",
    "Renderer",
    "Simulation",
    "SimulationError",
    "SimulationSettings",
    "StartSlot",
    "Tank",
    "TankControl",
    "TankController",
    "TankSnapshot",
    "TankState",
]
