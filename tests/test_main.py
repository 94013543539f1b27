import main


def _args(*extra):
    return main.build_parser().parse_args(["--headless", "--seed", "3", *extra])


def test_zero_time_limit_and_speed_are_passed_through():
    args = _args("--ai", "dummy", "--ai", "dummy", "--time-limit", "0", "--speed", "0")

    simulation = main.run_headless(args)

    assert simulation.time_limit == 0
    assert simulation.time_elapsed == 0
    assert simulation.speed_multiplier == 0.1


def test_omitted_options_use_defaults():
    args = _args("--ai", "dummy")

    simulation = main.run_headless(args)

    assert simulation.time_limit == main.DEFAULT_TIME_LIMIT
    assert simulation.speed_multiplier == 1.0


def test_headless_battle_prints_results(capsys):
    code = main.main(["--headless", "--seed", "3", "--ai", "dummy", "--ai", "dummy", "--time-limit", "34"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Seed 3, 34ms elapsed" in out


def test_too_many_tanks_is_reported_without_traceback(capsys):
    argv = ["--headless", "--width", "300", "--height", "200"]
    for _ in range(7):
        argv += ["--ai", "dummy"]

    code = main.main(argv)

    out = capsys.readouterr().out
    assert code == 1
    assert "Cannot set up battle: No free space in the battlefield" in out
