"""Shared test fixtures."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from lzv.reader import read_league_matches, read_snapshot


DATA_DIR = Path(__file__).resolve().parent.parent / 'data'


@pytest.fixture(scope='session')
def data_dir() -> Path:
    """Path to the data directory."""
    return DATA_DIR


@pytest.fixture(scope='session')
def now() -> datetime:
    """Fixed evaluation time after all sample matches except the 2099 one."""
    return datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(scope='session')
def snapshot():
    """(players, matches) from the sample snapshot."""
    return read_snapshot(DATA_DIR)


@pytest.fixture(scope='session')
def league_matches():
    """All scraped matches from league.csv."""
    return read_league_matches(DATA_DIR / 'league.csv')
