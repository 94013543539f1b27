"""Interface between the engine and whatever draws the battle."""

from __future__ import annotations

from typing import Protocol, Sequence

from tank_arena.core.battlefield import Battlefield
from tank_arena.core.bullet import BulletSnapshot
from tank_arena.core.tank import TankSnapshot


class Renderer(Protocol):
    """Consumer of read-only frame data.

    One frame is bracketed by ``pre_render``/``post_render``; everything in
    between describes the state at the time of the view refresh.
    """

    def initialize(self, battlefield: Battlefield) -> None: ...

    def pre_render(self) -> None: ...

    def post_render(self) -> None: ...

    def render_clock(self, elapsed: int, limit: int) -> None: ...

    def render_tank(self, tank: TankSnapshot) -> None: ...

    def render_bullet(self, bullet: BulletSnapshot) -> None: ...

    def render_tank_stats(self, tanks: Sequence[TankSnapshot]) -> None: ...


class NullRenderer:
    """Renderer that draws nothing, for headless matches."""

    def initialize(self, battlefield: Battlefield) -> None:
        pass

    def pre_render(self) -> None:
        pass

    def post_render(self) -> None:
        pass

    def render_clock(self, elapsed: int, limit: int) -> None:
        pass

    def render_tank(self, tank: TankSnapshot) -> None:
        pass

    def render_bullet(self, bullet: BulletSnapshot) -> None:
        pass

    def render_tank_stats(self, tanks: Sequence[TankSnapshot]) -> None:
        pass


__all__ = ["NullRenderer", "Renderer"]
