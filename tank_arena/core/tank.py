"""Tank entity: kinematics, weapon state and score counters."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from tank_arena.core.rng import RandomStream

if TYPE_CHECKING:
    from tank_arena.core.collision import CollisionResolver

TANK_RADIUS = 18.0
BARREL_LENGTH = 25.0
MAX_ENERGY = 100.0
MAX_SPEED = 2.0
MAX_TURN = 2.0
MAX_GUN_TURN = 3.0
MIN_SHOT_POWER = 0.1
MAX_SHOT_POWER = 1.0
RELOAD_BASE = 10
RELOAD_PER_POWER = 40
WALL_DAMAGE = 0.2
COLLISION_DAMAGE = 0.2
RADAR_RANGE = 300.0
SURVIVE_SCORE = 10.0
KILL_SCORE = 20.0


def normalize_angle(angle: float) -> float:
    """Wrap an angle in degrees into [-180, 180)."""

    return (angle + 180.0) % 360.0 - 180.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class RadarContact:
    """Another tank seen by the radar during the last step."""

    id: int
    name: str
    x: float
    y: float
    angle: float
    energy: float
    distance: float


@dataclass(frozen=True)
class TankSnapshot:
    """Read-only view of a tank handed to renderers and observers."""

    id: int
    name: str
    x: float
    y: float
    angle: float
    gun_angle: float
    energy: float
    speed: float
    gun_reload: int
    exploded: bool
    damage_dealt: float
    kills: int
    survival_bonus: float
    score: float


@dataclass
class Tank:
    """A battle tank driven by an external decision source."""

    id: int
    name: str
    x: float = 0.0
    y: float = 0.0
    angle: float = 0.0
    gun_angle: float = 0.0
    energy: float = MAX_ENERGY
    throttle: float = 0.0
    turn: float = 0.0
    gun_turn: float = 0.0
    shoot_power: float = 0.0
    speed: float = 0.0
    gun_reload: int = 0
    exploded: bool = False
    wall_hit: bool = field(default=False, init=False)
    enemy_hit: bool = field(default=False, init=False)
    hit_by_bullet: bool = field(default=False, init=False)
    enemy_spot: Optional[RadarContact] = field(default=None, init=False)
    damage_dealt: float = field(default=0.0, init=False)
    kills: int = field(default=0, init=False)
    survival_bonus: float = field(default=0.0, init=False)

    # ------------------------------------------------------------------
    # Placement
    def randomize(self, rng: RandomStream) -> None:
        self.angle = normalize_angle(rng.uniform(-180.0, 180.0))
        self.gun_angle = normalize_angle(rng.uniform(-180.0, 180.0))

    def move_to(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    # ------------------------------------------------------------------
    # Controls
    def set_throttle(self, value: float) -> None:
        self.throttle = _clamp(value, -1.0, 1.0)

    def set_turn(self, value: float) -> None:
        self.turn = _clamp(value, -1.0, 1.0)

    def set_gun_turn(self, value: float) -> None:
        self.gun_turn = _clamp(value, -1.0, 1.0)

    def set_shoot(self, power: float) -> None:
        if power <= 0:
            self.shoot_power = 0.0
        else:
            self.shoot_power = _clamp(power, MIN_SHOT_POWER, MAX_SHOT_POWER)

    # ------------------------------------------------------------------
    # Simulation
    @property
    def alive(self) -> bool:
        return self.energy > 0

    @property
    def gun_heading(self) -> float:
        return normalize_angle(self.angle + self.gun_angle)

    @property
    def is_shooting(self) -> bool:
        return self.shoot_power > 0 and self.gun_reload <= 0

    @property
    def score(self) -> float:
        return self.damage_dealt + self.kills * KILL_SCORE + self.survival_bonus

    def simulation_step(self, collision_resolver: CollisionResolver) -> None:
        """Advance one tick; wall and tank contact is resolved by the resolver."""

        self.wall_hit = False
        self.enemy_hit = False
        self.hit_by_bullet = False
        if self.gun_reload > 0:
            self.gun_reload -= 1
        self.angle = normalize_angle(self.angle + self.turn * MAX_TURN)
        self.gun_angle = normalize_angle(self.gun_angle + self.gun_turn * MAX_GUN_TURN)
        self.speed = self.throttle * MAX_SPEED
        if self.speed:
            rad = math.radians(self.angle)
            target_x = self.x + math.cos(rad) * self.speed
            target_y = self.y + math.sin(rad) * self.speed
            collision_resolver.move_tank(self, target_x, target_y)
        self.enemy_spot = collision_resolver.scan_enemy(self)

    def handle_shoot(self) -> float:
        """Fire the loaded gun and return the shot power."""

        power = self.shoot_power
        self.gun_reload = RELOAD_BASE + int(round(RELOAD_PER_POWER * power))
        self.shoot_power = 0.0
        return power

    # ------------------------------------------------------------------
    # Damage and scoring
    def on_damage(self, amount: float) -> None:
        self.energy -= max(0.0, amount)

    def on_wall_hit(self) -> None:
        self.wall_hit = True
        self.on_damage(WALL_DAMAGE)

    def on_enemy_collision(self) -> None:
        self.enemy_hit = True
        self.on_damage(COLLISION_DAMAGE)

    def on_bullet_hit(self, damage: float) -> None:
        self.hit_by_bullet = True
        self.on_damage(damage)

    def on_enemy_hit(self, damage: float) -> None:
        self.damage_dealt += damage

    def on_enemy_kill(self) -> None:
        self.kills += 1

    def on_survive_score(self) -> None:
        self.survival_bonus += SURVIVE_SCORE

    def snapshot(self) -> TankSnapshot:
        return TankSnapshot(
            id=self.id,
            name=self.name,
            x=self.x,
            y=self.y,
            angle=self.angle,
            gun_angle=self.gun_angle,
            energy=self.energy,
            speed=self.speed,
            gun_reload=self.gun_reload,
            exploded=self.exploded,
            damage_dealt=self.damage_dealt,
            kills=self.kills,
            survival_bonus=self.survival_bonus,
            score=self.score,
        )

    def info_line(self) -> str:
        return (
            f"{self.name:<12} #{self.id:<3d} Energy:{max(0.0, self.energy):6.1f}"
            f" Dmg:{self.damage_dealt:6.1f} Kills:{self.kills:2d}"
            f" Score:{self.score:7.1f}"
        )
