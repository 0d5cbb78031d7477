"""
Chord database loader.

Reads a chords-db style JSON file into a validated ChordDatabase.
The package bundles a small sample database that is used when no
path is given.

Usage:
    from chordref.data.loader import load_chord_database

    db = load_chord_database()                  # bundled sample
    db = load_chord_database("data/guitar.json")
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from chordref.data.schema import ChordDatabase


logger = logging.getLogger(__name__)

SAMPLE_DATABASE_PATH = Path(__file__).parent / "guitar_sample.json"


def load_chord_database(path: Optional[Union[str, Path]] = None) -> ChordDatabase:
    """
    Load and validate a chord database.

    Args:
        path: JSON file to read (default: the bundled sample)

    Returns:
        Validated, immutable ChordDatabase

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the file does not match the schema
    """
    path = Path(path) if path is not None else SAMPLE_DATABASE_PATH

    if not path.exists():
        raise FileNotFoundError(f"Chord database not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    database = ChordDatabase.model_validate(data)

    logger.info(
        "Loaded %d chord keys (%d voicings) from %s",
        len(database.chords), database.voicing_count(), path,
    )
    return database
