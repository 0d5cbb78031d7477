"""
Degrees Module - Interval Labels for Voicing Notes

Labels every string of a voicing with the note's degree relative to the
chord root: R, b3, 5, b7, 9, ...

How a note is labelled:
    1. Take the interval formula for the chord quality
       (unknown qualities fall back to the major triad)
    2. semitones = (midi % 12 - root + 12) % 12
    3. Use the formula's own token with that offset, if there is one
    4. Otherwise use the first entry of DEGREE_PRIORITY with that offset
    5. Otherwise use the first token defined for that offset

Muted strings are always None. This module never raises: a note it
cannot label becomes None.

The formula table is knowingly incomplete for the database's vocabulary.
Qualities missing from it are labelled against the major triad.
"""

from typing import Dict, List, Optional, Sequence

from chordref.data.schema import MAJOR, Voicing


# =============================================================================
# FORMULA TABLES
# =============================================================================

CHORD_FORMULAS = {
    # Triads
    MAJOR: ["R", "3", "5"],
    "": ["R", "3", "5"],
    "minor": ["R", "b3", "5"],
    "m": ["R", "b3", "5"],
    "dim": ["R", "b3", "b5"],
    "aug": ["R", "3", "#5"],

    # Sevenths
    "maj7": ["R", "3", "5", "7"],
    "7": ["R", "3", "5", "b7"],
    "m7": ["R", "b3", "5", "b7"],
    "m7b5": ["R", "b3", "b5", "b7"],
    "dim7": ["R", "b3", "b5", "bb7"],
    "mmaj7": ["R", "b3", "5", "7"],
    "mMaj7": ["R", "b3", "5", "7"],

    # Extended
    "9": ["R", "3", "5", "b7", "9"],
    "maj9": ["R", "3", "5", "7", "9"],
    "m9": ["R", "b3", "5", "b7", "9"],
    "11": ["R", "3", "5", "b7", "9", "11"],
    "maj11": ["R", "3", "5", "7", "9", "11"],
    "m11": ["R", "b3", "5", "b7", "9", "11"],
    "13": ["R", "3", "5", "b7", "9", "13"],
    "maj13": ["R", "3", "5", "7", "9", "13"],

    # Sixths
    "6": ["R", "3", "5", "6"],
    "m6": ["R", "b3", "5", "6"],
    "69": ["R", "3", "5", "6", "9"],
    "m69": ["R", "b3", "5", "6", "9"],

    # Suspended
    "sus2": ["R", "2", "5"],
    "sus4": ["R", "4", "5"],
    "sus": ["R", "4", "5"],
    "7sus4": ["R", "4", "5", "b7"],
    "7sus2": ["R", "2", "5", "b7"],
    "sus2sus4": ["R", "2", "4", "5"],

    # Added tones
    "add9": ["R", "3", "5", "9"],
    "madd9": ["R", "b3", "5", "9"],
    "add11": ["R", "3", "5", "11"],

    # Altered dominants
    "alt": ["R", "3", "b5", "b7", "b9", "#9"],
    "7b5": ["R", "3", "b5", "b7"],
    "7#5": ["R", "3", "#5", "b7"],
    "aug7": ["R", "3", "#5", "b7"],
    "7b9": ["R", "3", "5", "b7", "b9"],
    "7#9": ["R", "3", "5", "b7", "#9"],
    "9b5": ["R", "3", "b5", "b7", "9"],
    "aug9": ["R", "3", "#5", "b7", "9"],
    "9#11": ["R", "3", "5", "b7", "9", "#11"],

    # Major seventh variants
    "maj7b5": ["R", "3", "b5", "7"],
    "maj7#5": ["R", "3", "#5", "7"],
    "maj7sus2": ["R", "2", "5", "7"],

    # Minor-major variants
    "mmaj7b5": ["R", "b3", "b5", "7"],
    "mmaj9": ["R", "b3", "5", "7", "9"],
    "mmaj11": ["R", "b3", "5", "7", "9", "11"],

    # Power chord
    "5": ["R", "5"],
}

DEFAULT_FORMULA = CHORD_FORMULAS[MAJOR]

# Degree token -> semitones above the root
INTERVAL_SEMITONES = {
    "R": 0,
    "b2": 1, "2": 2, "#2": 3,
    "b3": 3, "3": 4,
    "4": 5, "#4": 6,
    "b5": 6, "5": 7, "#5": 8,
    "6": 9, "bb7": 9, "b7": 10, "7": 11,
    "b9": 13, "9": 14, "#9": 15,
    "11": 17, "#11": 18,
    "b13": 20, "13": 21,
}

# Tie-break for notes outside the formula: simpler intervals first
DEGREE_PRIORITY = ["R", "5", "3", "b3", "7", "b7", "4", "2", "6", "9", "11", "13"]


def _build_semitones_map() -> Dict[int, List[str]]:
    """Semitone class (0-11) -> every degree token with that offset, in table order."""
    mapping: Dict[int, List[str]] = {pc: [] for pc in range(12)}
    for token, semitones in INTERVAL_SEMITONES.items():
        mapping[semitones % 12].append(token)
    return mapping


SEMITONES_TO_INTERVALS = _build_semitones_map()


# =============================================================================
# CORE FUNCTIONS
# =============================================================================

def formula_for(quality: str) -> List[str]:
    """Interval formula for a quality, or the major triad if it is unknown."""
    return CHORD_FORMULAS.get(quality, DEFAULT_FORMULA)


def find_interval(semitones: int, formula: Sequence[str]) -> Optional[str]:
    """Pick the degree token for a note `semitones` above the root."""
    for token in formula:
        offset = INTERVAL_SEMITONES.get(token)
        if offset is not None and offset % 12 == semitones:
            return token

    candidates = SEMITONES_TO_INTERVALS.get(semitones % 12, [])
    for token in DEGREE_PRIORITY:
        if token in candidates:
            return token

    return candidates[0] if candidates else None


def calculate_intervals(
    voicing: Voicing,
    root_pitch_class: int,
    quality: str
) -> List[Optional[str]]:
    """
    Degree label for each string of a voicing.

    Args:
        voicing: Voicing with frets and the MIDI notes of its sounding strings
        root_pitch_class: Pitch class of the chord root (0-11)
        quality: Chord quality, e.g. "m7"

    Returns:
        One label or None per string, in string order

    Example:
        Cmaj7 x32000 → [None, 'R', '3', '5', '7', '3']
    """
    frets = voicing.frets
    if not voicing.midi:
        return [None] * len(frets)

    formula = formula_for(quality)
    root = root_pitch_class % 12
    labels: List[Optional[str]] = []
    midi_index = 0

    for fret in frets:
        if fret == -1:
            labels.append(None)
            continue

        if midi_index >= len(voicing.midi):
            labels.append(None)
            continue

        midi_note = voicing.midi[midi_index]
        midi_index += 1

        semitones = (midi_note % 12 - root + 12) % 12
        labels.append(find_interval(semitones, formula))

    return labels
