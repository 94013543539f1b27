import asyncio

import pytest

from conftest import ScriptedController
from tank_arena.core.ai import AiRegistry, AiState, AiWrapper, TankControl, TankController, TankState
from tank_arena.core.errors import AiActivationError, AiStateError, AiStepError
from tank_arena.core.rng import RandomStream
from tank_arena.core.tank import Tank


class SlowController(TankController):
    async def activate(self, info) -> None:
        await asyncio.sleep(0)

    async def step(self, state: TankState, control: TankControl) -> None:
        await asyncio.sleep(1.0)


class AsyncController(TankController):
    def __init__(self) -> None:
        self.seen = []

    async def step(self, state: TankState, control: TankControl) -> None:
        await asyncio.sleep(0)
        self.seen.append((state.x, state.y))
        control.throttle = 0.5


def _wrapper(battlefield, registry=None, **kwargs) -> AiWrapper:
    tank = Tank(id=1, name="scripted", x=400, y=300)
    return AiWrapper(tank, battlefield, RandomStream(9), registry=registry, **kwargs)


def test_activation_resolves_name_from_registry(battlefield):
    registry = AiRegistry({"scripted": ScriptedController})
    ai = _wrapper(battlefield, registry)

    asyncio.run(ai.activate(1234))

    assert ai.state is AiState.ACTIVE
    controller = ai.controller
    assert isinstance(controller, ScriptedController)
    assert controller.info.seed == 1234
    assert controller.info.tank_id == 1
    assert controller.info.battlefield_width == 800


def test_unknown_ai_fails_activation(battlefield):
    ai = _wrapper(battlefield, AiRegistry())

    with pytest.raises(AiActivationError, match="Unknown AI 'scripted'"):
        asyncio.run(ai.activate(1))
    assert ai.state is AiState.INACTIVE


def test_activation_failure_is_wrapped(battlefield):
    ai = _wrapper(battlefield)
    ai.configure(ScriptedController(fail_on_activate=True))

    with pytest.raises(AiActivationError) as excinfo:
        asyncio.run(ai.activate(1))

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert "refused to boot" in str(excinfo.value)


def test_step_applies_clamped_control(battlefield):
    def full_send(state, control, info):
        control.throttle = 5
        control.turn = -3
        control.gun_turn = 0.25
        control.shoot = 7

    ai = _wrapper(battlefield)
    ai.configure(ScriptedController(full_send))

    async def scenario():
        await ai.activate(1)
        await ai.simulation_step()

    asyncio.run(scenario())

    tank = ai.tank
    assert (tank.throttle, tank.turn, tank.gun_turn) == (1.0, -1.0, 0.25)
    assert tank.shoot_power == 1.0
    assert ai.step_count == 1


def test_coroutine_controllers_are_awaited(battlefield):
    controller = AsyncController()
    ai = _wrapper(battlefield)
    ai.configure(controller)

    async def scenario():
        await ai.activate(1)
        await ai.simulation_step()

    asyncio.run(scenario())

    assert controller.seen == [(400, 300)]
    assert ai.tank.throttle == 0.5


def test_step_failure_is_wrapped(battlefield):
    ai = _wrapper(battlefield)
    ai.configure(ScriptedController(fail_on_step=1))

    async def scenario():
        await ai.activate(1)
        await ai.simulation_step()

    with pytest.raises(AiStepError, match="decision source crashed"):
        asyncio.run(scenario())


def test_slow_decision_times_out(battlefield):
    ai = _wrapper(battlefield, timeout=0.01)
    ai.configure(SlowController())

    async def scenario():
        await ai.activate(1)
        await ai.simulation_step()

    with pytest.raises(AiStepError, match="did not complete"):
        asyncio.run(scenario())


def test_inactive_and_deactivated_wrappers_are_not_stepped(battlefield):
    controller = ScriptedController()
    ai = _wrapper(battlefield)
    ai.configure(controller)

    async def scenario():
        await ai.simulation_step()
        await ai.activate(1)
        ai.deactivate()
        ai.deactivate()
        await ai.simulation_step()
        await ai.activate(1)

    asyncio.run(scenario())

    assert controller.steps == 0
    assert ai.state is AiState.DEACTIVATED


def test_configure_after_activation_is_rejected(battlefield):
    ai = _wrapper(battlefield)
    ai.configure(ScriptedController())
    asyncio.run(ai.activate(1))

    with pytest.raises(AiStateError):
        ai.configure(ScriptedController())


def test_registry_lists_names():
    registry = AiRegistry()
    registry.register("idle", ScriptedController)

    assert "idle" in registry
    assert registry.names() == ("idle",)
    assert list(registry) == ["idle"]
