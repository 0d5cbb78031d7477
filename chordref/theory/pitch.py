"""
Pitch Module - Shared Note Vocabulary

Every other theory module does its note arithmetic through this one.
It can:
    1. Turn any common note spelling into a pitch class (0-11)
    2. Pick the one display spelling for a pitch class (flats, jazz convention)
    3. Translate between the chord database's key names and display roots
    4. Reduce a voicing's MIDI notes to its sorted pitch-class set

Pitch classes are plain ints with 0 = C. They are always reduced mod 12.
"""

from typing import Iterable, List, Tuple

import numpy as np

from chordref.errors import InvalidNote


# =============================================================================
# CONSTANTS
# =============================================================================

# The 12 keys in display spelling. Index = pitch class.
KEYS = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")

NATURAL_PITCH_CLASSES = {
    "C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11,
}

# Accidental text (lowercased) -> semitone shift
ACCIDENTALS = {
    "": 0,
    "#": 1, "♯": 1, "sharp": 1,
    "b": -1, "♭": -1, "flat": -1,
}

SHARP_TO_FLAT = {
    "C#": "Db",
    "D#": "Eb",
    "F#": "Gb",
    "G#": "Ab",
    "A#": "Bb",
}

# chords-db spells two of its keys with the word "sharp"
DATABASE_KEY_TO_ROOT = {
    "C": "C",
    "Csharp": "Db",
    "D": "D",
    "Eb": "Eb",
    "E": "E",
    "F": "F",
    "Fsharp": "Gb",
    "G": "G",
    "Ab": "Ab",
    "A": "A",
    "Bb": "Bb",
    "B": "B",
}

ROOT_TO_DATABASE_KEY = {root: key for key, root in DATABASE_KEY_TO_ROOT.items()}

PitchClassSet = Tuple[int, ...]


# =============================================================================
# CORE FUNCTIONS
# =============================================================================

def pitch_class_of(spelling: str) -> int:
    """Get the pitch class (0-11) for a note spelling like 'C#', 'eb' or 'B♭'."""
    if not spelling:
        raise InvalidNote(spelling)

    note = spelling.strip()
    if not note:
        raise InvalidNote(spelling)

    letter = note[0].upper()
    accidental = note[1:].strip().lower()

    if letter not in NATURAL_PITCH_CLASSES or accidental not in ACCIDENTALS:
        raise InvalidNote(spelling)

    return (NATURAL_PITCH_CLASSES[letter] + ACCIDENTALS[accidental]) % 12


def canonical_spelling(pitch_class: int) -> str:
    """Get the flat-preferred display spelling for a pitch class."""
    return KEYS[pitch_class % 12]


def normalize_to_flat(spelling: str) -> str:
    """Convert the five common sharp spellings to flats; pass anything else through."""
    return SHARP_TO_FLAT.get(spelling, spelling)


def transpose(pitch_class: int, semitones: int) -> int:
    return (pitch_class + semitones) % 12


def note_names(pitch_classes: Iterable[int]) -> List[str]:
    """Display spellings for a sequence of pitch classes, order preserved."""
    return [canonical_spelling(pc) for pc in pitch_classes]


def pitch_class_set(midi_notes: Iterable[int]) -> PitchClassSet:
    """Reduce MIDI note numbers to their sorted, distinct pitch classes."""
    midi = np.asarray(list(midi_notes), dtype=int)
    return tuple(int(pc) for pc in np.unique(np.mod(midi, 12)))


# =============================================================================
# DATABASE KEY TRANSLATION
# =============================================================================

def database_key_for(root: str) -> str:
    """Get the chord database key for a display root (e.g. 'Db' -> 'Csharp')."""
    flat = canonical_spelling(pitch_class_of(root))
    return ROOT_TO_DATABASE_KEY[flat]


def root_for_database_key(database_key: str) -> str:
    """Get the display root for a chord database key (e.g. 'Fsharp' -> 'Gb')."""
    if database_key in DATABASE_KEY_TO_ROOT:
        return DATABASE_KEY_TO_ROOT[database_key]
    return canonical_spelling(pitch_class_of(database_key))


def root_pitch_class(root: str) -> int:
    """Pitch class of a root written either as a database key or a note spelling."""
    return pitch_class_of(root_for_database_key(root))
