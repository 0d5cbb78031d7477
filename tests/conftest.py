"""
Shared fixtures: everything runs against the bundled sample database.
"""

import pytest

from chordref.app.lookup import ChordReference
from chordref.data.loader import load_chord_database
from chordref.theory.chord_parser import ChordNameParser
from chordref.theory.reverse_index import ReverseIndex


@pytest.fixture(scope="session")
def sample_db():
    return load_chord_database()


@pytest.fixture
def parser(sample_db):
    return ChordNameParser(sample_db)


@pytest.fixture(scope="session")
def index(sample_db):
    return ReverseIndex(sample_db)


@pytest.fixture
def reference():
    return ChordReference().load()
