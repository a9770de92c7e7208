"""
Tests for the command line entry point and the console front end.
"""

import pytest

import main


@pytest.fixture
def feed_input(monkeypatch):
    """Replace input() with a fixed list of answers, then EOF."""
    def feed(*answers):
        queue = list(answers)

        def fake_input(prompt=""):
            if not queue:
                raise EOFError
            return queue.pop(0)

        monkeypatch.setattr("builtins.input", fake_input)
    return feed


def test_self_play_always_draws(capsys):
    assert main.main(["--self-play", "2"]) == 0
    out = capsys.readouterr().out
    assert "Round 1: Draw!" in out
    assert "Round 2: Draw!" in out
    assert "Draws: 2" in out


def test_self_play_alternates_first_player():
    assert main.run_self_play(2) == 0


def test_self_play_snapshot(tmp_path, capsys):
    path = tmp_path / "final.png"
    assert main.main(["--self-play", "1", "--snapshot", str(path)]) == 0
    assert path.exists()


def test_console_two_player_win(feed_input, capsys):
    feed_input("1", "4", "2", "5", "3", "q")
    assert main.main(["--no-ui", "--mode", "hvh"]) == 0
    out = capsys.readouterr().out
    assert "Two players" in out
    assert "X wins!" in out
    assert "Score  X: 1  O: 0  Draws: 0" in out
    assert "Goodbye!" in out


def test_console_rejects_bad_input(feed_input, capsys):
    feed_input("1", "1", "0", "zz")
    main.main(["--no-ui", "--mode", "hvh"])
    out = capsys.readouterr().out
    assert "That move is not allowed right now." in out
    assert "Unknown command: '0'" in out
    assert "Unknown command: 'zz'" in out


def test_console_hint(feed_input, capsys):
    feed_input("h")
    main.main(["--no-ui", "--mode", "hvh"])
    out = capsys.readouterr().out
    assert "Play X at row 1, column 1 (key 1)" in out


def test_console_against_computer(feed_input, capsys):
    feed_input("1")
    main.main(["--no-ui", "--mode", "hvc", "--delay-ms", "0"])
    out = capsys.readouterr().out
    assert "Computer plays: O" in out
    assert "Computer is thinking..." in out


def test_console_saves_snapshot_when_round_ends(feed_input, tmp_path, capsys):
    path = tmp_path / "round.png"
    feed_input("1", "4", "2", "5", "3")
    main.main(["--no-ui", "--mode", "hvh", "--snapshot", str(path)])
    assert path.exists()
    assert f"Saved: {path}" in capsys.readouterr().out


def test_negative_delay_is_rejected():
    with pytest.raises(SystemExit):
        main.main(["--no-ui", "--delay-ms", "-5"])


def test_parser_defaults():
    args = main.build_parser().parse_args([])
    assert args.mode == "hvc"
    assert args.side == "X"
    assert args.delay_ms == 280
    assert not args.no_ui
    assert args.self_play is None
