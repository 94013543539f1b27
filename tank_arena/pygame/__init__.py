"""Pygame front-end for Tank Arena."""

from tank_arena.pygame.app import PygameArena, run_pygame
from tank_arena.pygame.renderer import PygameRenderer

__all__ = ["PygameArena", "PygameRenderer", "run_pygame"]
