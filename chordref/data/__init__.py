"""
Data Subpackage

This package handles the chord database:
    - schema.py: Pydantic models (Voicing, ChordEntry, ChordDatabase)
    - loader.py: Load and validate a chords-db style JSON file
    - guitar_sample.json: Small bundled database used by default
"""

from chordref.data.schema import ChordDatabase, ChordEntry, Voicing
from chordref.data.loader import load_chord_database
