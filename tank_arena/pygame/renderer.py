"""Pygame implementation of the engine's renderer interface."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

import pygame

from tank_arena.core.battlefield import Battlefield
from tank_arena.core.bullet import BulletSnapshot
from tank_arena.core.tank import BARREL_LENGTH, MAX_ENERGY, TANK_RADIUS, TankSnapshot

TANK_COLORS = [
    pygame.Color(214, 92, 72),
    pygame.Color(82, 148, 214),
    pygame.Color(122, 190, 96),
    pygame.Color(226, 186, 72),
    pygame.Color(170, 112, 210),
    pygame.Color(96, 200, 196),
]


def _scale_color(color: pygame.Color, factor: float) -> pygame.Color:
    return pygame.Color(
        max(0, min(255, int(color.r * factor))),
        max(0, min(255, int(color.g * factor))),
        max(0, min(255, int(color.b * factor))),
    )


def _blend_color(color: pygame.Color, other: pygame.Color, ratio: float) -> pygame.Color:
    clamped = max(0.0, min(1.0, ratio))
    inv = 1.0 - clamped
    return pygame.Color(
        int(color.r * inv + other.r * clamped),
        int(color.g * inv + other.g * clamped),
        int(color.b * inv + other.b * clamped),
    )


def _rotated_rect(
    center: Tuple[float, float], half_w: float, half_h: float, angle_deg: float
) -> List[Tuple[float, float]]:
    rad = math.radians(angle_deg)
    ca, sa = math.cos(rad), math.sin(rad)
    points = []
    for px, py in ((-half_w, -half_h), (half_w, -half_h), (half_w, half_h), (-half_w, half_h)):
        points.append((center[0] + px * ca - py * sa, center[1] + px * sa + py * ca))
    return points


def tank_color(tank_id: int) -> pygame.Color:
    return TANK_COLORS[(tank_id - 1) % len(TANK_COLORS)]


class PygameRenderer:
    """Draw battle frames onto a pygame surface.

    The arena occupies the left part of the surface; tank statistics are
    listed in a side panel ``panel_width`` pixels wide.
    """

    def __init__(
        self,
        surface: pygame.Surface,
        *,
        panel_width: int = 240,
        font: Optional[pygame.font.Font] = None,
        flip: bool = True,
    ) -> None:
        self.surface = surface
        self.panel_width = panel_width
        self.flip = flip
        if font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            font = pygame.font.SysFont("consolas", 15)
        self.font = font
        self.width = 0
        self.height = 0
        self.frames = 0
        self.background = pygame.Color(24, 28, 34)
        self.grid_color = pygame.Color(34, 40, 48)

    def initialize(self, battlefield: Battlefield) -> None:
        self.width = int(battlefield.width)
        self.height = int(battlefield.height)

    def pre_render(self) -> None:
        self.surface.fill(pygame.Color(10, 12, 20))
        arena = pygame.Rect(0, 0, self.width, self.height)
        pygame.draw.rect(self.surface, self.background, arena)
        for x in range(0, self.width, 50):
            pygame.draw.line(self.surface, self.grid_color, (x, 0), (x, self.height))
        for y in range(0, self.height, 50):
            pygame.draw.line(self.surface, self.grid_color, (0, y), (self.width, y))
        pygame.draw.rect(self.surface, pygame.Color(90, 96, 110), arena, width=2)

    def post_render(self) -> None:
        self.frames += 1
        if self.flip:
            pygame.display.flip()

    def render_clock(self, elapsed: int, limit: int) -> None:
        ratio = elapsed / limit if limit else 1.0
        bar = pygame.Rect(self.width + 16, 16, self.panel_width - 32, 10)
        pygame.draw.rect(self.surface, pygame.Color(40, 46, 60), bar)
        filled = bar.copy()
        filled.width = int(bar.width * max(0.0, min(1.0, ratio)))
        pygame.draw.rect(self.surface, pygame.Color(226, 186, 72), filled)
        remaining = max(0, limit - elapsed) / 1000.0
        label = self.font.render(f"Time left: {remaining:5.1f}s", True, pygame.Color(230, 230, 230))
        self.surface.blit(label, (bar.left, bar.bottom + 6))

    def render_tank(self, tank: TankSnapshot) -> None:
        center = (tank.x, tank.y)
        base = tank_color(tank.id)
        if tank.exploded:
            for radius, factor in ((TANK_RADIUS * 1.8, 0.6), (TANK_RADIUS * 1.2, 1.2)):
                flash = _blend_color(base, pygame.Color(255, 220, 120), 0.7)
                pygame.draw.circle(self.surface, _scale_color(flash, factor), center, int(radius))
            return

        track_color = _scale_color(base, 0.45)
        hull_color = _scale_color(base, 1.0)
        turret_color = _scale_color(base, 1.18)
        pygame.draw.polygon(
            self.surface, track_color, _rotated_rect(center, TANK_RADIUS, TANK_RADIUS * 0.85, tank.angle)
        )
        pygame.draw.polygon(
            self.surface, hull_color, _rotated_rect(center, TANK_RADIUS * 0.8, TANK_RADIUS * 0.6, tank.angle)
        )
        heading = math.radians(tank.angle + tank.gun_angle)
        muzzle = (
            tank.x + math.cos(heading) * BARREL_LENGTH,
            tank.y + math.sin(heading) * BARREL_LENGTH,
        )
        pygame.draw.line(self.surface, pygame.Color(32, 36, 42), center, muzzle, 5)
        pygame.draw.circle(self.surface, turret_color, center, int(TANK_RADIUS * 0.45))

        energy_ratio = max(0.0, tank.energy) / MAX_ENERGY
        bar = pygame.Rect(int(tank.x - TANK_RADIUS), int(tank.y - TANK_RADIUS - 8), int(TANK_RADIUS * 2), 4)
        pygame.draw.rect(self.surface, pygame.Color(60, 20, 20), bar)
        bar.width = int(bar.width * energy_ratio)
        pygame.draw.rect(self.surface, pygame.Color(96, 220, 96), bar)

    def render_bullet(self, bullet: BulletSnapshot) -> None:
        center = (bullet.x, bullet.y)
        if bullet.exploded:
            pygame.draw.circle(self.surface, pygame.Color(255, 196, 96), center, 6)
            return
        radius = 2 + int(round(bullet.power * 2))
        pygame.draw.circle(self.surface, pygame.Color(250, 250, 250), center, radius)

    def render_tank_stats(self, tanks: Sequence[TankSnapshot]) -> None:
        top = 56
        ranked = sorted(tanks, key=lambda tank: tank.score, reverse=True)
        for tank in ranked:
            color = tank_color(tank.id)
            if tank.energy <= 0:
                color = _blend_color(color, pygame.Color(90, 90, 90), 0.7)
            pygame.draw.rect(self.surface, color, pygame.Rect(self.width + 16, top + 3, 10, 10))
            name = self.font.render(f"{tank.name} #{tank.id}", True, pygame.Color(230, 230, 230))
            self.surface.blit(name, (self.width + 32, top))
            detail = self.font.render(
                f"E:{max(0.0, tank.energy):5.1f}  S:{tank.score:6.1f}",
                True,
                pygame.Color(180, 188, 200),
            )
            self.surface.blit(detail, (self.width + 32, top + 18))
            top += 44


__all__ = ["PygameRenderer", "tank_color"]
