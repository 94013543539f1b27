"""Bullet entity fired by tanks."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from tank_arena.core.tank import BARREL_LENGTH, Tank

BULLET_SPEED = 4.0
BULLET_RADIUS = 3.0
BULLET_RANGE = 1000.0


def bullet_damage(power: float) -> float:
    return 10.0 * power + 6.0 * power * power


@dataclass(frozen=True)
class BulletSnapshot:
    """Read-only view of a bullet handed to renderers."""

    id: int
    owner_id: int
    x: float
    y: float
    angle: float
    power: float
    exploded: bool


@dataclass
class Bullet:
    """Projectile travelling in a straight line from its owner's muzzle."""

    id: int
    owner: Tank
    power: float
    x: float = field(init=False)
    y: float = field(init=False)
    angle: float = field(init=False)
    speed: float = BULLET_SPEED
    range: float = BULLET_RANGE
    damage: float = field(init=False)
    exploded: bool = False

    def __post_init__(self) -> None:
        self.angle = self.owner.gun_heading
        rad = math.radians(self.angle)
        self.x = self.owner.x + math.cos(rad) * BARREL_LENGTH
        self.y = self.owner.y + math.sin(rad) * BARREL_LENGTH
        self.damage = bullet_damage(self.power)

    def simulation_step(self) -> None:
        rad = math.radians(self.angle)
        self.x += math.cos(rad) * self.speed
        self.y += math.sin(rad) * self.speed
        self.range -= self.speed

    def snapshot(self) -> BulletSnapshot:
        return BulletSnapshot(
            id=self.id,
            owner_id=self.owner.id,
            x=self.x,
            y=self.y,
            angle=self.angle,
            power=self.power,
            exploded=self.exploded,
        )
