"""Fixed-step battle engine driving tanks, bullets and their AIs."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Coroutine, Dict, List, Optional, Sequence, Set

from tank_arena.core.ai import AiRegistry, AiWrapper
from tank_arena.core.battlefield import Battlefield
from tank_arena.core.bullet import Bullet
from tank_arena.core.collision import CollisionResolver
from tank_arena.core.errors import (
    AiError,
    NoFreeSlotError,
    NotInitializedError,
    SimulationError,
)
from tank_arena.core.events import EventHook
from tank_arena.core.renderer import Renderer
from tank_arena.core.rng import RandomStream
from tank_arena.core.tank import Tank

logger = logging.getLogger(__name__)

MIN_SPEED_MULTIPLIER = 0.1


class EngineState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class SimulationSettings:
    """Tunable engine parameters. Durations are in milliseconds."""

    step_duration: int = 17
    render_interval: int = 30
    time_limit: int = 30_000
    slot_margin: float = 50.0
    slot_spacing: float = 100.0
    ai_timeout: Optional[float] = None  # seconds, None waits forever
    seed: Optional[int] = None


class Simulation:
    """Own every entity of a battle and advance it in fixed steps.

    The engine runs on the current asyncio loop. Two activities are
    scheduled independently: a periodic view refresh and the simulation
    step itself, whose wall-clock pacing is scaled by the speed multiplier.
    AI decisions are always awaited one after another in roster order so
    that the shared random stream is consumed deterministically.
    """

    def __init__(
        self,
        renderer: Renderer,
        settings: Optional[SimulationSettings] = None,
        *,
        registry: Optional[AiRegistry] = None,
    ) -> None:
        self.settings = settings or SimulationSettings()
        seed = self.settings.seed
        if seed is None:
            seed = int(time.time() * 1000)
        self._rng_seed = seed
        self._rng = RandomStream(seed)
        self._renderer = renderer
        self._registry = registry or AiRegistry()
        self._battlefield = Battlefield(
            self._rng,
            slot_margin=self.settings.slot_margin,
            slot_spacing=self.settings.slot_spacing,
        )
        self._collision_resolver = CollisionResolver()

        self._tanks: Dict[int, Tank] = {}
        self._all_tanks: List[Tank] = []
        self._ais: Dict[int, AiWrapper] = {}
        self._bullets: Dict[int, Bullet] = {}
        self._exploded_tanks: List[Tank] = []
        self._exploded_bullets: List[Bullet] = []
        self._next_tank_id = 1
        self._next_bullet_id = 1

        self._step_duration = self.settings.step_duration
        self._render_interval = self.settings.render_interval
        self._time_elapsed = 0
        self._time_limit = self.settings.time_limit
        self._speed_multiplier = 1.0

        self._state = EngineState.IDLE
        self._is_running = False
        self._finished = False
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._step_handle: Optional[asyncio.TimerHandle] = None
        self._render_task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()
        self._done: Optional[asyncio.Future] = None

        self._on_step: EventHook[Callable[[], object]] = EventHook("step")
        self._on_render: EventHook[Callable[[], object]] = EventHook("render")
        self._on_finish: EventHook[Callable[[], object]] = EventHook("finish")
        self._on_error: EventHook[Callable[[str], object]] = EventHook("error")

    # ------------------------------------------------------------------
    # Configuration
    def initialize(self, width: float, height: float) -> None:
        if self._all_tanks:
            raise SimulationError("Battlefield cannot be resized once tanks have joined")
        self._battlefield.set_size(width, height)
        self._renderer.initialize(self._battlefield)
        self._collision_resolver.update_battlefield(self._battlefield)

    def set_speed(self, value: float) -> None:
        self._speed_multiplier = max(MIN_SPEED_MULTIPLIER, float(value))

    def on_step(self, callback: Callable[[], object]) -> None:
        self._on_step.subscribe(callback)

    def on_render(self, callback: Callable[[], object]) -> None:
        self._on_render.subscribe(callback)

    def on_finish(self, callback: Callable[[], object]) -> None:
        self._on_finish.subscribe(callback)

    def on_error(self, callback: Callable[[str], object]) -> None:
        self._on_error.subscribe(callback)

    # ------------------------------------------------------------------
    # Properties
    @property
    def renderer(self) -> Renderer:
        return self._renderer

    @property
    def battlefield(self) -> Battlefield:
        return self._battlefield

    @property
    def collision_resolver(self) -> CollisionResolver:
        return self._collision_resolver

    @property
    def tank_list(self) -> Sequence[Tank]:
        """Every tank that ever joined, in joining order."""

        return tuple(self._all_tanks)

    @property
    def tanks(self) -> Sequence[Tank]:
        return tuple(self._tanks.values())

    @property
    def bullets(self) -> Sequence[Bullet]:
        return tuple(self._bullets.values())

    @property
    def ai_list(self) -> Sequence[AiWrapper]:
        return tuple(self._ais.values())

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def rng_seed(self) -> int:
        return self._rng_seed

    @property
    def rng(self) -> RandomStream:
        return self._rng

    @property
    def speed_multiplier(self) -> float:
        return self._speed_multiplier

    @property
    def time_elapsed(self) -> int:
        return self._time_elapsed

    @property
    def time_limit(self) -> int:
        return self._time_limit

    @time_limit.setter
    def time_limit(self, value: int) -> None:
        if value < self._time_elapsed:
            raise ValueError(
                f"Time limit {value}ms is below the elapsed time {self._time_elapsed}ms"
            )
        self._time_limit = value

    # ------------------------------------------------------------------
    # Roster
    def add_tank(self, ai_name: str) -> AiWrapper:
        """Place a new tank on a free slot and return its AI handle."""

        if not self._battlefield.is_initialized:
            raise NotInitializedError("Simulation not initialized")
        slot = self._battlefield.get_start_slot()
        if slot is None:
            raise NoFreeSlotError("No free space in the battlefield")
        tank = self._create_tank(ai_name)
        tank.randomize(self._rng)
        tank.move_to(slot.x, slot.y)
        self._tanks[tank.id] = tank
        self._all_tanks.append(tank)
        self._collision_resolver.add_tank(tank)

        ai = self._create_ai_wrapper(tank)
        self._ais[tank.id] = ai

        self._update_view()
        return ai

    # ------------------------------------------------------------------
    # Lifecycle
    def start(self) -> None:
        """Begin the view refresh cadence, activate every AI, then step."""

        if self._state is EngineState.RUNNING:
            return
        if self._state is EngineState.STOPPED:
            logger.warning("Ignoring start(): simulation has already stopped")
            return
        loop = asyncio.get_running_loop()
        self._loop = loop
        self._done = loop.create_future()
        self._state = EngineState.RUNNING
        self._is_running = True
        logger.info(
            "Starting simulation: %d tanks, seed=%d, limit=%dms, speed=%.1fx",
            len(self._tanks),
            self._rng_seed,
            self._time_limit,
            self._speed_multiplier,
        )
        self._render_task = self._spawn(self._render_loop())
        self._spawn(self._begin())

    async def run(self) -> None:
        """Start the simulation and wait until it stops for any reason."""

        self.start()
        if self._done is not None:
            await self._done

    def stop(self) -> None:
        self._halt()
        self._resolve_done()

    def _halt(self) -> None:
        self._is_running = False
        if self._state is not EngineState.STOPPED:
            self._state = EngineState.STOPPED
            logger.info("Simulation stopped at %dms", self._time_elapsed)
        if self._step_handle is not None:
            self._step_handle.cancel()
            self._step_handle = None
        if self._render_task is not None:
            self._render_task.cancel()
            self._render_task = None
        for ai in list(self._ais.values()):
            ai.deactivate()

    def _resolve_done(self) -> None:
        if self._done is not None and not self._done.done():
            self._done.set_result(None)

    def _spawn(self, coro: Coroutine[object, object, None]) -> asyncio.Task:
        assert self._loop is not None
        task = self._loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return
        logger.error("Simulation crashed", exc_info=exc)
        if self._done is not None and not self._done.done():
            self._done.set_exception(exc)
        self.stop()

    async def _render_loop(self) -> None:
        while True:
            await asyncio.sleep(self._render_interval / 1000.0)
            self._update_view()

    async def _begin(self) -> None:
        try:
            await self._activate_ai()
        except AiError as exc:
            logger.error("AI activation failed: %s", exc, exc_info=True)
            self._halt()
            self._report_error(exc)
            self._resolve_done()
            return
        if not self._is_running:
            return
        if self._step_handle is not None:
            self._step_handle.cancel()
            self._step_handle = None
        await self._simulation_step()

    def _launch_step(self) -> None:
        self._step_handle = None
        self._spawn(self._simulation_step())

    async def _simulation_step(self) -> None:
        start_time = time.perf_counter()
        self._update_model()
        try:
            await self._update_ai()
        except AiError as exc:
            logger.error("AI step failed: %s", exc, exc_info=True)
            self._halt()
            self._report_error(exc)
            self._resolve_done()
            return
        if not self._is_running:
            return

        if self._get_tanks_left() <= 1 or self._time_elapsed >= self._time_limit:
            self._halt()
            self._update_view()
            self._finish()
            self._resolve_done()
            return

        processing_time = (time.perf_counter() - start_time) * 1000.0
        delay = max(1.0, self._step_duration - processing_time)
        delay /= self._speed_multiplier

        self._on_step.emit()
        self._time_elapsed = min(self._time_elapsed + self._step_duration, self._time_limit)
        assert self._loop is not None
        self._step_handle = self._loop.call_later(delay / 1000.0, self._launch_step)

    def _finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        survivors = ", ".join(tank.name for tank in self._tanks.values()) or "nobody"
        logger.info(
            "Battle finished after %dms; survivors: %s", self._time_elapsed, survivors
        )
        self._on_finish.emit()

    def _report_error(self, exc: Exception) -> None:
        message = str(exc) or "Error during simulation"
        self._on_error.emit(message)

    # ------------------------------------------------------------------
    # AI scheduling
    async def _activate_ai(self) -> None:
        for ai in list(self._ais.values()):
            await ai.activate(self._rng_seed)

    async def _update_ai(self) -> None:
        for ai in list(self._ais.values()):
            await ai.simulation_step()

    # ------------------------------------------------------------------
    # Model
    def _update_model(self) -> None:
        resolver = self._collision_resolver
        roster = list(self._tanks.values())

        for tank in roster:
            tank.simulation_step(resolver)

        kill_count = 0
        for tank in roster:
            if tank.energy <= 0:
                kill_count += 1
                del self._tanks[tank.id]
                tank.exploded = True
                self._exploded_tanks.append(tank)
                resolver.remove_tank(tank)
                logger.debug("Tank #%d (%s) destroyed", tank.id, tank.name)

        for tank_id, ai in list(self._ais.items()):
            if ai.tank.energy <= 0:
                del self._ais[tank_id]
                ai.deactivate()

        for tank in list(self._tanks.values()):
            if tank.is_shooting:
                power = tank.handle_shoot()
                bullet = self._create_bullet(tank, power)
                self._bullets[bullet.id] = bullet
                resolver.add_bullet(bullet)

        for tank in self._tanks.values():
            for _ in range(kill_count):
                tank.on_survive_score()

        for bullet in list(self._bullets.values()):
            if bullet.exploded:
                self._explode_bullet(bullet)
                continue
            bullet.simulation_step()
            if resolver.hit_test_bullet(bullet):
                self._explode_bullet(bullet)
        # bullets knocked out by a bullet that was processed after them
        for bullet in list(self._bullets.values()):
            if bullet.exploded:
                self._explode_bullet(bullet)

    def _explode_bullet(self, bullet: Bullet) -> None:
        bullet.exploded = True
        del self._bullets[bullet.id]
        self._exploded_bullets.append(bullet)
        self._collision_resolver.remove_bullet(bullet)

    def _update_view(self) -> None:
        renderer = self._renderer
        renderer.pre_render()
        renderer.render_clock(self._time_elapsed, self._time_limit)
        for tank in self._tanks.values():
            renderer.render_tank(tank.snapshot())
        for bullet in self._bullets.values():
            renderer.render_bullet(bullet.snapshot())
        while self._exploded_tanks:
            renderer.render_tank(self._exploded_tanks.pop().snapshot())
        while self._exploded_bullets:
            renderer.render_bullet(self._exploded_bullets.pop().snapshot())
        renderer.render_tank_stats([tank.snapshot() for tank in self._all_tanks])
        renderer.post_render()
        self._on_render.emit()

    def _get_tanks_left(self) -> int:
        return len(self._tanks)

    # ------------------------------------------------------------------
    # Factories
    def _create_ai_wrapper(self, tank: Tank) -> AiWrapper:
        return AiWrapper(
            tank,
            self._battlefield,
            self._rng,
            registry=self._registry,
            timeout=self.settings.ai_timeout,
        )

    def _create_tank(self, ai_name: str) -> Tank:
        tank = Tank(id=self._next_tank_id, name=ai_name)
        self._next_tank_id += 1
        return tank

    def _create_bullet(self, owner: Tank, power: float) -> Bullet:
        bullet = Bullet(id=self._next_bullet_id, owner=owner, power=power)
        self._next_bullet_id += 1
        return bullet


__all__ = ["EngineState", "MIN_SPEED_MULTIPLIER", "Simulation", "SimulationSettings"]
