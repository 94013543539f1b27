"""Spatial bookkeeping: wall contact, tank contact and bullet hits."""

from __future__ import annotations

import math
from typing import Dict, Optional

from tank_arena.core.battlefield import Battlefield
from tank_arena.core.bullet import BULLET_RADIUS, Bullet
from tank_arena.core.errors import NotInitializedError
from tank_arena.core.tank import RADAR_RANGE, TANK_RADIUS, RadarContact, Tank


class CollisionResolver:
    """Keep tracked entities consistent with each other and the arena bounds.

    Entities are tracked in insertion-ordered maps keyed by id, so every
    query walks them in the order they entered the battle.
    """

    def __init__(self) -> None:
        self._battlefield: Optional[Battlefield] = None
        self._tanks: Dict[int, Tank] = {}
        self._bullets: Dict[int, Bullet] = {}

    def update_battlefield(self, battlefield: Battlefield) -> None:
        self._battlefield = battlefield

    def _require_battlefield(self) -> Battlefield:
        if self._battlefield is None or not self._battlefield.is_initialized:
            raise NotInitializedError("Collision resolver has no battlefield bounds")
        return self._battlefield

    # ------------------------------------------------------------------
    # Tracking
    def add_tank(self, tank: Tank) -> None:
        self._tanks[tank.id] = tank

    def remove_tank(self, tank: Tank) -> None:
        del self._tanks[tank.id]

    def add_bullet(self, bullet: Bullet) -> None:
        self._bullets[bullet.id] = bullet

    def remove_bullet(self, bullet: Bullet) -> None:
        del self._bullets[bullet.id]

    def is_tracked(self, entity: object) -> bool:
        if isinstance(entity, Tank):
            return self._tanks.get(entity.id) is entity
        if isinstance(entity, Bullet):
            return self._bullets.get(entity.id) is entity
        return False

    # ------------------------------------------------------------------
    # Tanks
    def move_tank(self, tank: Tank, x: float, y: float) -> bool:
        """Move ``tank`` towards ``(x, y)`` and return whether it moved freely.

        A move leaving the arena is clamped to the bounds and counts as a
        wall hit. A move overlapping another tank is refused and both tanks
        register the collision.
        """

        battlefield = self._require_battlefield()
        free = True
        if not battlefield.contains(x, y, TANK_RADIUS):
            x, y = battlefield.clamp(x, y, TANK_RADIUS)
            tank.on_wall_hit()
            free = False
        for other in self._tanks.values():
            if other is tank:
                continue
            if math.hypot(other.x - x, other.y - y) < TANK_RADIUS * 2:
                tank.on_enemy_collision()
                other.on_enemy_collision()
                return False
        tank.move_to(x, y)
        return free

    def scan_enemy(self, tank: Tank) -> Optional[RadarContact]:
        """Return the closest other tank within radar range."""

        closest: Optional[RadarContact] = None
        for other in self._tanks.values():
            if other is tank:
                continue
            distance = math.hypot(other.x - tank.x, other.y - tank.y)
            if distance > RADAR_RANGE:
                continue
            if closest is None or distance < closest.distance:
                closest = RadarContact(
                    id=other.id,
                    name=other.name,
                    x=other.x,
                    y=other.y,
                    angle=other.angle,
                    energy=other.energy,
                    distance=distance,
                )
        return closest

    # ------------------------------------------------------------------
    # Bullets
    def hit_test_bullet(self, bullet: Bullet) -> bool:
        """Return True when the bullet must explode at its current position.

        Tank hits apply damage and credit the owner. A bullet never hits the
        tank that fired it. Bullet-on-bullet contact flags the other bullet
        as exploded as well.
        """

        battlefield = self._require_battlefield()
        if bullet.exploded:
            return True
        if not battlefield.contains(bullet.x, bullet.y) or bullet.range <= 0:
            return True
        for tank in self._tanks.values():
            if tank is bullet.owner:
                continue
            if math.hypot(tank.x - bullet.x, tank.y - bullet.y) > TANK_RADIUS:
                continue
            was_alive = tank.alive
            tank.on_bullet_hit(bullet.damage)
            bullet.owner.on_enemy_hit(bullet.damage)
            if was_alive and not tank.alive:
                bullet.owner.on_enemy_kill()
            return True
        for other in self._bullets.values():
            if other is bullet or other.exploded:
                continue
            if math.hypot(other.x - bullet.x, other.y - bullet.y) <= BULLET_RADIUS * 2:
                other.exploded = True
                return True
        return False


__all__ = ["CollisionResolver"]
