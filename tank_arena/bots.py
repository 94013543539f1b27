"""Built-in tank controllers used by the CLI and for quick matches."""

from __future__ import annotations

import math
from typing import Optional

from tank_arena.core.ai import AiInfo, AiRegistry, TankControl, TankController, TankState
from tank_arena.core.rng import RandomStream
from tank_arena.core.tank import MAX_GUN_TURN, MAX_TURN, RadarContact, normalize_angle


def bearing_to(state: TankState, x: float, y: float) -> float:
    return math.degrees(math.atan2(y - state.y, x - state.x))


def aim_gun(state: TankState, contact: RadarContact, control: TankControl, jitter: float = 0.0) -> float:
    """Turn the gun towards ``contact`` and return the remaining aim error."""

    heading = normalize_angle(state.angle + state.gun_angle)
    error = normalize_angle(bearing_to(state, contact.x, contact.y) + jitter - heading)
    control.gun_turn = max(-1.0, min(1.0, error / MAX_GUN_TURN))
    return error


def power_for_distance(distance: float) -> float:
    return max(0.1, min(1.0, 120.0 / max(distance, 1.0)))


class IdleBot(TankController):
    """Sits still and never fires."""

    def step(self, state: TankState, control: TankControl) -> None:
        return None


class CrawlerBot(TankController):
    """Drive forward, bounce off walls in a random direction, fire at contacts."""

    def __init__(self) -> None:
        self._rng: Optional[RandomStream] = None
        self._turn_ticks = 0
        self._turn_direction = 1.0

    def activate(self, info: AiInfo) -> None:
        self._rng = info.rng

    def step(self, state: TankState, control: TankControl) -> None:
        assert self._rng is not None
        control.throttle = 1.0
        if state.wall_hit or state.enemy_hit:
            self._turn_ticks = self._rng.randint(10, 40)
            self._turn_direction = self._rng.choice((-1.0, 1.0))
            control.throttle = -0.5
        if self._turn_ticks > 0:
            self._turn_ticks -= 1
            control.turn = self._turn_direction
        if state.radar is not None:
            error = aim_gun(state, state.radar, control)
            if abs(error) < 5.0:
                control.shoot = 0.5
        else:
            control.gun_turn = 1.0


class SniperBot(TankController):
    """Hold position, sweep the gun and fire with distance-scaled power."""

    def __init__(self, wobble: float = 2.0) -> None:
        self.wobble = wobble
        self._rng: Optional[RandomStream] = None

    def activate(self, info: AiInfo) -> None:
        self._rng = info.rng

    def step(self, state: TankState, control: TankControl) -> None:
        assert self._rng is not None
        contact = state.radar
        if contact is None:
            control.gun_turn = 1.0
            control.turn = 0.5
            return
        jitter = self._rng.uniform(-self.wobble, self.wobble)
        error = aim_gun(state, contact, control, jitter)
        if abs(error) < 3.0:
            control.shoot = power_for_distance(contact.distance)


class ChaserBot(TankController):
    """Close in on the nearest contact and fire at full power."""

    def step(self, state: TankState, control: TankControl) -> None:
        contact = state.radar
        if contact is None:
            control.turn = 1.0
            control.throttle = 0.6
            control.gun_turn = -1.0
            return
        body_error = normalize_angle(bearing_to(state, contact.x, contact.y) - state.angle)
        control.turn = max(-1.0, min(1.0, body_error / MAX_TURN))
        control.throttle = 1.0 if contact.distance > 80 else 0.0
        if abs(aim_gun(state, contact, control)) < 4.0:
            control.shoot = 1.0


def create_registry() -> AiRegistry:
    """Return a registry preloaded with the built-in bots."""

    return AiRegistry(
        {
            "dummy": IdleBot,
            "crawler": CrawlerBot,
            "sniper": SniperBot,
            "chaser": ChaserBot,
        }
    )


__all__ = [
    "ChaserBot",
    "CrawlerBot",
    "IdleBot",
    "SniperBot",
    "aim_gun",
    "bearing_to",
    "create_registry",
    "power_for_distance",
]
