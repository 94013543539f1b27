"""Scheduling adapter between a tank and its external decision source."""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterator, Optional, Tuple

from tank_arena.core.battlefield import Battlefield
from tank_arena.core.errors import AiActivationError, AiStateError, AiStepError
from tank_arena.core.rng import RandomStream
from tank_arena.core.tank import RadarContact, Tank

logger = logging.getLogger(__name__)


class AiState(Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    DEACTIVATED = "deactivated"


@dataclass(frozen=True)
class AiInfo:
    """Static facts handed to a controller when it is activated."""

    tank_id: int
    name: str
    battlefield_width: float
    battlefield_height: float
    seed: int
    rng: RandomStream


@dataclass(frozen=True)
class TankState:
    """What a controller sees about its own tank on each tick."""

    x: float
    y: float
    angle: float
    gun_angle: float
    energy: float
    speed: float
    gun_reload: int
    wall_hit: bool
    enemy_hit: bool
    hit_by_bullet: bool
    radar: Optional[RadarContact]

    @classmethod
    def from_tank(cls, tank: Tank) -> "TankState":
        return cls(
            x=tank.x,
            y=tank.y,
            angle=tank.angle,
            gun_angle=tank.gun_angle,
            energy=tank.energy,
            speed=tank.speed,
            gun_reload=tank.gun_reload,
            wall_hit=tank.wall_hit,
            enemy_hit=tank.enemy_hit,
            hit_by_bullet=tank.hit_by_bullet,
            radar=tank.enemy_spot,
        )


@dataclass
class TankControl:
    """Decision record filled in by a controller; clamped when applied."""

    throttle: float = 0.0
    turn: float = 0.0
    gun_turn: float = 0.0
    shoot: float = 0.0


class TankController:
    """Base class for decision sources.

    Both hooks may be plain functions or coroutines.
    """

    def activate(self, info: AiInfo) -> Optional[Awaitable[None]]:
        return None

    def step(self, state: TankState, control: TankControl) -> Optional[Awaitable[None]]:
        raise NotImplementedError


ControllerFactory = Callable[[], TankController]


class AiRegistry:
    """Map AI identifiers to controller factories."""

    def __init__(self, factories: Optional[Dict[str, ControllerFactory]] = None) -> None:
        self._factories: Dict[str, ControllerFactory] = dict(factories or {})

    def register(self, name: str, factory: ControllerFactory) -> None:
        self._factories[name] = factory

    def create(self, name: str) -> TankController:
        try:
            factory = self._factories[name]
        except KeyError:
            raise AiActivationError(f"Unknown AI '{name}'") from None
        return factory()

    def names(self) -> Tuple[str, ...]:
        return tuple(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)


class AiWrapper:
    """Pair one tank with one decision source and schedule its calls."""

    def __init__(
        self,
        tank: Tank,
        battlefield: Battlefield,
        rng: RandomStream,
        *,
        registry: Optional[AiRegistry] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.tank = tank
        self._battlefield = battlefield
        self._rng = rng
        self._registry = registry or AiRegistry()
        self._timeout = timeout
        self._controller: Optional[TankController] = None
        self.state = AiState.INACTIVE
        self.step_count = 0

    @property
    def ai_name(self) -> str:
        return self.tank.name

    @property
    def is_active(self) -> bool:
        return self.state is AiState.ACTIVE

    @property
    def controller(self) -> Optional[TankController]:
        return self._controller

    def configure(self, controller: TankController) -> None:
        """Use ``controller`` instead of looking the AI name up in the registry."""

        if self.state is not AiState.INACTIVE:
            raise AiStateError(
                f"Cannot configure AI '{self.ai_name}' in state {self.state.value}"
            )
        self._controller = controller

    async def _await(self, result: Any, what: str) -> None:
        if not inspect.isawaitable(result):
            return
        if self._timeout is None:
            await result
            return
        try:
            await asyncio.wait_for(result, self._timeout)
        except asyncio.TimeoutError:
            raise TimeoutError(
                f"{what} did not complete within {self._timeout:.3f}s"
            ) from None

    async def activate(self, seed: int) -> None:
        if self.state is not AiState.INACTIVE:
            return
        info = AiInfo(
            tank_id=self.tank.id,
            name=self.ai_name,
            battlefield_width=self._battlefield.width,
            battlefield_height=self._battlefield.height,
            seed=seed,
            rng=self._rng,
        )
        try:
            if self._controller is None:
                self._controller = self._registry.create(self.ai_name)
            await self._await(self._controller.activate(info), "activation")
        except AiActivationError:
            raise
        except Exception as exc:
            raise AiActivationError(
                f"Activation of AI '{self.ai_name}' (tank #{self.tank.id}) failed: {exc}"
            ) from exc
        self.state = AiState.ACTIVE
        logger.debug("AI '%s' activated for tank #%d", self.ai_name, self.tank.id)

    async def simulation_step(self) -> None:
        if self.state is not AiState.ACTIVE:
            return
        assert self._controller is not None
        control = TankControl()
        state = TankState.from_tank(self.tank)
        self.step_count += 1
        try:
            await self._await(self._controller.step(state, control), "decision")
        except Exception as exc:
            raise AiStepError(
                f"AI '{self.ai_name}' (tank #{self.tank.id}) failed: {exc}"
            ) from exc
        self.tank.set_throttle(control.throttle)
        self.tank.set_turn(control.turn)
        self.tank.set_gun_turn(control.gun_turn)
        self.tank.set_shoot(control.shoot)

    def deactivate(self) -> None:
        if self.state is AiState.DEACTIVATED:
            return
        self.state = AiState.DEACTIVATED
        logger.debug("AI '%s' deactivated for tank #%d", self.ai_name, self.tank.id)


__all__ = [
    "AiInfo",
    "AiRegistry",
    "AiState",
    "AiWrapper",
    "ControllerFactory",
    "TankControl",
    "TankController",
    "TankState",
]
