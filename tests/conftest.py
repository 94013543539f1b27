import asyncio
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import pytest

from tank_arena.core.ai import AiInfo, TankControl, TankController, TankState
from tank_arena.core.battlefield import Battlefield
from tank_arena.core.bullet import BulletSnapshot
from tank_arena.core.rng import RandomStream
from tank_arena.core.simulation import Simulation, SimulationSettings
from tank_arena.core.tank import TankSnapshot

Script = Callable[[TankState, TankControl, Optional[AiInfo]], None]


@dataclass
class Frame:
    """Everything drawn between one pre_render/post_render pair."""

    clock: Optional[Tuple[int, int]] = None
    tanks: List[TankSnapshot] = field(default_factory=list)
    bullets: List[BulletSnapshot] = field(default_factory=list)
    stats: List[TankSnapshot] = field(default_factory=list)


class RecordingRenderer:
    """Renderer double that keeps every completed frame."""

    def __init__(self) -> None:
        self.battlefield: Optional[Battlefield] = None
        self.frames: List[Frame] = []
        self._current: Optional[Frame] = None

    def initialize(self, battlefield: Battlefield) -> None:
        self.battlefield = battlefield

    def pre_render(self) -> None:
        self._current = Frame()

    def post_render(self) -> None:
        assert self._current is not None
        self.frames.append(self._current)
        self._current = None

    def render_clock(self, elapsed: int, limit: int) -> None:
        assert self._current is not None
        self._current.clock = (elapsed, limit)

    def render_tank(self, tank: TankSnapshot) -> None:
        assert self._current is not None
        self._current.tanks.append(tank)

    def render_bullet(self, bullet: BulletSnapshot) -> None:
        assert self._current is not None
        self._current.bullets.append(bullet)

    def render_tank_stats(self, tanks) -> None:
        assert self._current is not None
        self._current.stats = list(tanks)


class ScriptedController(TankController):
    """Controller double driven by an optional plain function."""

    def __init__(
        self,
        script: Optional[Script] = None,
        *,
        fail_on_activate: bool = False,
        fail_on_step: Optional[int] = None,
    ) -> None:
        self.script = script
        self.fail_on_activate = fail_on_activate
        self.fail_on_step = fail_on_step
        self.info: Optional[AiInfo] = None
        self.steps = 0

    def activate(self, info: AiInfo) -> None:
        if self.fail_on_activate:
            raise RuntimeError("controller refused to boot")
        self.info = info

    def step(self, state: TankState, control: TankControl) -> None:
        self.steps += 1
        if self.fail_on_step is not None and self.steps >= self.fail_on_step:
            raise RuntimeError("decision source crashed")
        if self.script is not None:
            self.script(state, control, self.info)


def fast_settings(**overrides) -> SimulationSettings:
    values = dict(seed=1234, time_limit=17 * 60, render_interval=5)
    values.update(overrides)
    return SimulationSettings(**values)


def run_to_completion(simulation: Simulation, timeout: float = 30.0) -> None:
    asyncio.run(asyncio.wait_for(simulation.run(), timeout))


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def simulation(renderer: RecordingRenderer) -> Simulation:
    """An 800x600 battle running at high speed with a fixed seed."""

    sim = Simulation(renderer, fast_settings())
    sim.initialize(800, 600)
    sim.set_speed(1000)
    return sim


@pytest.fixture
def battlefield() -> Battlefield:
    field_ = Battlefield(RandomStream(42))
    field_.set_size(800, 600)
    return field_
