import pytest

from tank_arena.core.collision import CollisionResolver
from tank_arena.core.rng import RandomStream
from tank_arena.core.tank import (
    MAX_ENERGY,
    RELOAD_BASE,
    RELOAD_PER_POWER,
    SURVIVE_SCORE,
    TANK_RADIUS,
    WALL_DAMAGE,
    Tank,
    normalize_angle,
)


@pytest.fixture
def resolver(battlefield) -> CollisionResolver:
    resolver = CollisionResolver()
    resolver.update_battlefield(battlefield)
    return resolver


def test_forward_movement_follows_heading(resolver):
    tank = Tank(id=1, name="Alpha", x=400, y=300, angle=0)
    resolver.add_tank(tank)
    tank.set_throttle(1.0)

    tank.simulation_step(resolver)

    assert tank.x == pytest.approx(402.0)
    assert tank.y == pytest.approx(300.0)
    assert tank.speed == pytest.approx(2.0)
    assert not tank.wall_hit


def test_wall_contact_clamps_position_and_costs_energy(resolver):
    tank = Tank(id=1, name="Alpha", x=TANK_RADIUS + 1, y=300, angle=180)
    resolver.add_tank(tank)
    tank.set_throttle(1.0)

    tank.simulation_step(resolver)

    assert tank.x == pytest.approx(TANK_RADIUS)
    assert tank.wall_hit
    assert tank.energy == pytest.approx(MAX_ENERGY - WALL_DAMAGE)


def test_turning_wraps_heading(resolver):
    tank = Tank(id=1, name="Alpha", x=400, y=300, angle=179, gun_angle=-179)
    resolver.add_tank(tank)
    tank.set_turn(1.0)
    tank.set_gun_turn(-1.0)

    tank.simulation_step(resolver)

    assert tank.angle == pytest.approx(-179.0)
    assert tank.gun_angle == pytest.approx(178.0)


def test_controls_are_clamped():
    tank = Tank(id=1, name="Alpha")

    tank.set_throttle(4)
    tank.set_turn(-9)
    tank.set_shoot(0.01)

    assert tank.throttle == 1.0
    assert tank.turn == -1.0
    assert tank.shoot_power == pytest.approx(0.1)

    tank.set_shoot(0)
    assert tank.shoot_power == 0.0
    assert not tank.is_shooting


def test_handle_shoot_debits_reload(resolver):
    tank = Tank(id=1, name="Alpha", x=400, y=300)
    resolver.add_tank(tank)
    tank.set_shoot(1.0)
    assert tank.is_shooting

    power = tank.handle_shoot()

    assert power == 1.0
    assert tank.gun_reload == RELOAD_BASE + RELOAD_PER_POWER
    assert not tank.is_shooting

    tank.set_shoot(1.0)
    tank.simulation_step(resolver)
    assert tank.gun_reload == RELOAD_BASE + RELOAD_PER_POWER - 1
    assert not tank.is_shooting


def test_energy_never_increases():
    tank = Tank(id=1, name="Alpha")

    tank.on_damage(-25)
    assert tank.energy == MAX_ENERGY

    tank.on_bullet_hit(120)
    assert tank.energy < 0
    assert not tank.alive
    assert tank.hit_by_bullet


def test_score_combines_counters():
    tank = Tank(id=1, name="Alpha")

    tank.on_enemy_hit(12.5)
    tank.on_enemy_kill()
    tank.on_survive_score()

    snapshot = tank.snapshot()
    assert snapshot.damage_dealt == 12.5
    assert snapshot.kills == 1
    assert snapshot.survival_bonus == SURVIVE_SCORE
    assert snapshot.score == tank.score
    assert "Alpha" in tank.info_line()


def test_randomize_uses_stream():
    a = Tank(id=1, name="Alpha")
    b = Tank(id=1, name="Alpha")

    a.randomize(RandomStream(5))
    b.randomize(RandomStream(5))

    assert (a.angle, a.gun_angle) == (b.angle, b.gun_angle)
    assert -180 <= a.angle < 180


def test_normalize_angle():
    assert normalize_angle(190) == pytest.approx(-170)
    assert normalize_angle(-190) == pytest.approx(170)
    assert normalize_angle(360) == pytest.approx(0)
