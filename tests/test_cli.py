"""Tests for the lzvstats command line interface."""

import sys

import pytest

import lzvstats


def _run(monkeypatch, *args):
    monkeypatch.setattr(sys, 'argv', ['lzvstats.py', *args])
    lzvstats.main()


class TestLeaderboardCommand:
    """Tests for the leaderboard subcommand."""

    def test_csv_and_html(self, monkeypatch, tmp_path, data_dir):
        out = tmp_path / 'board.csv'
        _run(
            monkeypatch, 'leaderboard', '--data', str(data_dir),
            '--output', str(out), '--html', '--now', '2026-01-01T00:00:00Z',
        )
        assert out.exists()
        assert out.with_suffix('.html').exists()

    def test_summary(self, monkeypatch, capsys, data_dir):
        _run(monkeypatch, 'leaderboard', '--data', str(data_dir), '--summary', '--now', '2026-01-01')
        assert 'Joris Peeters' in capsys.readouterr().out

    def test_requires_output_or_summary(self, monkeypatch, data_dir):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, 'leaderboard', '--data', str(data_dir))
        assert exc.value.code == 2

    def test_invalid_now(self, monkeypatch, data_dir):
        with pytest.raises(SystemExit):
            _run(monkeypatch, 'leaderboard', '--data', str(data_dir), '--summary', '--now', 'gisteren')

    def test_missing_data_dir(self, monkeypatch, tmp_path):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, 'leaderboard', '--data', str(tmp_path / 'nope'), '--summary')
        assert exc.value.code == 1


class TestHistoryCommand:
    """Tests for the history subcommand."""

    def test_prints_history(self, monkeypatch, capsys, data_dir):
        _run(monkeypatch, 'history', '--data', str(data_dir), '--player', '2', '--now', '2026-01-01')
        out = capsys.readouterr().out
        assert 'Verlauf: Wout Janssens' in out
        assert '1030' in out

    def test_unknown_player(self, monkeypatch, data_dir):
        with pytest.raises(SystemExit):
            _run(monkeypatch, 'history', '--data', str(data_dir), '--player', '42')


class TestSidesCommand:
    """Tests for the sides and teams subcommands."""

    def test_sides(self, monkeypatch, capsys, data_dir):
        _run(monkeypatch, 'sides', '--league', str(data_dir / 'league.csv'), '--team', 'FC Degradé')
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith('HOME  vs De Zwaluwen')
        assert lines[0].endswith('W')
        assert lines[1].startswith('AWAY  vs Sporting West')
        assert lines[-1] == 'Form: L D W'

    def test_teams(self, monkeypatch, capsys, data_dir):
        _run(monkeypatch, 'teams', '--league', str(data_dir / 'league.csv'))
        out = capsys.readouterr().out.splitlines()
        assert len(out) == 5
