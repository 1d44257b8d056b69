"""Common fixtures: a throwaway SQLite database per test."""

import tempfile
from pathlib import Path

import pytest

from linkpad.notes import NoteService
from linkpad.storage import create_session_factory, init_db


@pytest.fixture
def temp_db_dir():
    """Create a temporary directory for the database file."""
    with tempfile.TemporaryDirectory() as db_dir:
        yield Path(db_dir)


@pytest.fixture
def db_engine(temp_db_dir):
    engine = init_db(f"sqlite:///{temp_db_dir / 'test_linkpad.db'}")
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def note_service(session_factory):
    return NoteService(session_factory)
