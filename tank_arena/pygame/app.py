"""Pygame window hosting a live battle."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

try:
    import pygame
except ImportError as exc:  # pragma: no cover - depends on runtime environment
    raise RuntimeError(
        "The pygame package is required to run the graphical version of Tank Arena."
    ) from exc

from tank_arena.bots import create_registry
from tank_arena.core.ai import AiRegistry
from tank_arena.core.simulation import Simulation, SimulationSettings
from tank_arena.pygame.config import load_user_settings, save_user_settings
from tank_arena.pygame.renderer import PygameRenderer

logger = logging.getLogger(__name__)

PANEL_WIDTH = 240
MAX_SPEED_MULTIPLIER = 50.0


class PygameArena:
    """Graphical client wiring a pygame window to a :class:`Simulation`."""

    def __init__(
        self,
        ai_names: Sequence[str] = ("chaser", "sniper", "crawler", "crawler"),
        *,
        width: int = 800,
        height: int = 600,
        seed: Optional[int] = None,
        speed: Optional[float] = None,
        time_limit: Optional[int] = None,
        registry: Optional[AiRegistry] = None,
        linger: float = 3.0,
    ) -> None:
        pygame.init()
        self._user_settings = load_user_settings()
        if speed is None:
            stored_speed = self._user_settings.get("speed")
            speed = float(stored_speed) if isinstance(stored_speed, (int, float)) else 1.0
        if time_limit is None:
            stored_limit = self._user_settings.get("time_limit")
            time_limit = int(stored_limit) if isinstance(stored_limit, int) else 30_000

        self.screen = pygame.display.set_mode((width + PANEL_WIDTH, height))
        pygame.display.set_caption("Tank Arena")
        self.renderer = PygameRenderer(self.screen, panel_width=PANEL_WIDTH)

        settings = SimulationSettings(seed=seed, time_limit=time_limit)
        self.simulation = Simulation(
            self.renderer, settings, registry=registry or create_registry()
        )
        self.simulation.initialize(width, height)
        for name in ai_names:
            self.simulation.add_tank(name)
        self.simulation.set_speed(speed)
        self.simulation.on_render(self._handle_events)
        self.simulation.on_finish(self._on_finish)
        self.simulation.on_error(self._on_error)

        self.linger = linger
        self.running = True
        self.finished = False
        self.errors: List[str] = []

    # ------------------------------------------------------------------
    def change_speed(self, factor: float) -> None:
        speed = min(MAX_SPEED_MULTIPLIER, self.simulation.speed_multiplier * factor)
        self.simulation.set_speed(speed)
        self._user_settings["speed"] = self.simulation.speed_multiplier
        save_user_settings(self._user_settings)
        logger.info("Speed set to %.1fx", self.simulation.speed_multiplier)

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                self.simulation.stop()
            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                    self.change_speed(2.0)
                elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    self.change_speed(0.5)
                elif event.key == pygame.K_ESCAPE:
                    self.running = False
                    self.simulation.stop()

    def _on_finish(self) -> None:
        self.finished = True
        pygame.display.set_caption("Tank Arena - battle finished")

    def _on_error(self, message: str) -> None:
        self.errors.append(message)
        pygame.display.set_caption(f"Tank Arena - error: {message}")

    async def run(self) -> Simulation:
        """Run the battle, then keep the final frame up for ``linger`` seconds."""

        await self.simulation.run()
        waited = 0.0
        while self.running and waited < self.linger:
            self._handle_events()
            await asyncio.sleep(0.05)
            waited += 0.05
        return self.simulation


def run_pygame(**kwargs: object) -> Simulation:
    """Convenience helper for launching the pygame client."""

    try:
        arena = PygameArena(**kwargs)  # type: ignore[arg-type]
        return asyncio.run(arena.run())
    finally:
        pygame.quit()


__all__ = ["PygameArena", "run_pygame"]
