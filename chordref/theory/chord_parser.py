"""
Chord Name Parser - Free Text to (Root, Quality)

This module turns what a user types into a chord the database understands:
    - Root note (e.g., "F#m7" → root="Gb", always flat spelling)
    - Quality (e.g., "c maj 7" → quality="maj7", "Am" → quality="minor")

It also answers partial input for type-ahead suggestions.

Parsing never hard-fails on an unknown quality: the raw token is passed
through and the database lookup simply misses. Only a missing or
non-letter root is an error (UnrecognizedRoot).

Known limitation:
    A "b" straight after the root letter is always read as a flat.
    "Bb" is B-flat, never B plus a quality "b".
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from chordref.data.schema import MAJOR, MINOR, ChordDatabase, ChordEntry, chord_name
from chordref.errors import NotInitialized, UnrecognizedRoot
from chordref.theory.pitch import canonical_spelling, pitch_class_of


# =============================================================================
# PARSED CHORD DATA CLASS
# =============================================================================

@dataclass(frozen=True)
class ParsedChord:
    """Result of parsing a chord name."""
    root: str
    quality: str
    raw_quality: str = ""

    @property
    def name(self) -> str:
        return chord_name(self.root, self.quality)

    def __str__(self) -> str:
        return f"{self.root} {self.quality}"


# =============================================================================
# ALIAS TABLES
# =============================================================================

ROOT_LETTERS = "ABCDEFG"
SHARP_MODIFIERS = ("#", "♯")
FLAT_MODIFIERS = ("b", "♭")

SUGGESTION_LIMIT = 10

# Spellings people type -> database quality
QUALITY_ALIASES = {
    # Major
    "": MAJOR,
    "M": MAJOR,
    "maj": MAJOR,
    "MAJ": MAJOR,
    "major": MAJOR,
    "Major": MAJOR,
    "MAJOR": MAJOR,

    # Minor
    "m": MINOR,
    "min": MINOR,
    "MIN": MINOR,
    "-": MINOR,
    "minor": MINOR,
    "Minor": MINOR,
    "MINOR": MINOR,

    # Diminished
    "dim": "dim",
    "o": "dim",
    "°": "dim",
    "diminished": "dim",
    "dim7": "dim7",
    "o7": "dim7",
    "°7": "dim7",

    # Augmented
    "aug": "aug",
    "+": "aug",
    "augmented": "aug",

    # Suspended
    "sus": "sus4",
    "sus4": "sus4",
    "sus2": "sus2",
    "suspended": "sus4",
    "suspended4": "sus4",
    "suspended2": "sus2",

    # Sevenths
    "7": "7",
    "dom7": "7",
    "dominant7": "7",
    "dominant": "7",
    "maj7": "maj7",
    "M7": "maj7",
    "major7": "maj7",
    "Δ7": "maj7",
    "Δ": "maj7",
    "m7": "m7",
    "min7": "m7",
    "minor7": "m7",
    "-7": "m7",
    "m7b5": "m7b5",
    "ø": "m7b5",
    "ø7": "m7b5",
    "half-dim": "m7b5",
    "half-diminished": "m7b5",

    # Ninths
    "9": "9",
    "maj9": "maj9",
    "m9": "m9",
    "min9": "m9",

    # Sixths
    "6": "6",
    "maj6": "6",
    "m6": "m6",
    "min6": "m6",
    "69": "69",
    "6/9": "69",

    # Added tones
    "add9": "add9",
    "add2": "add9",
    "madd9": "madd9",

    # Power chord
    "5": "5",
    "power": "5",

    # Elevenths and thirteenths
    "11": "11",
    "13": "13",
    "maj11": "maj11",
    "maj13": "maj13",
    "m11": "m11",
}


# =============================================================================
# PARSER
# =============================================================================

class ChordNameParser:
    """
    Parses chord names and looks them up in a chord database.

    The database is optional for parse(); search() and get_suggestions()
    need it and raise NotInitialized without one.

    Example:
        >>> parser = ChordNameParser(load_chord_database())
        >>> parser.parse("F#m7")
        ParsedChord(root='Gb', quality='m7', raw_quality='m7')
        >>> parser.get_suggestions("Dm")
        ['Dm', 'Dm7', 'Dm7b5']
    """

    def __init__(self, database: Optional[ChordDatabase] = None):
        self.database = database

    def _require_database(self) -> ChordDatabase:
        if self.database is None:
            raise NotInitialized("ChordNameParser")
        return self.database

    # =========================================================================
    # PARSING
    # =========================================================================

    def split_root(self, text: str):
        """
        Split input into (flat root, raw quality).

        Raises:
            UnrecognizedRoot: If the input does not start with A-G
        """
        chord = text.strip() if text else ""
        if not chord or chord[0].upper() not in ROOT_LETTERS:
            raise UnrecognizedRoot(text)

        spelling = chord[0].upper()
        rest = chord[1:]

        if rest[:1] in SHARP_MODIFIERS:
            spelling += "#"
            rest = rest[1:]
        elif rest[:1] in FLAT_MODIFIERS:
            spelling += "b"
            rest = rest[1:]

        root = canonical_spelling(pitch_class_of(spelling))
        raw_quality = re.sub(r"\s+", "", rest)
        return root, raw_quality

    def normalize_quality(self, raw_quality: str) -> str:
        """Map a typed quality to the database vocabulary (never fails)."""
        if raw_quality in QUALITY_ALIASES:
            return QUALITY_ALIASES[raw_quality]

        lowered = raw_quality.lower()
        if lowered in QUALITY_ALIASES:
            return QUALITY_ALIASES[lowered]

        if self.database is not None:
            suffixes = self.database.suffixes
            if raw_quality in suffixes:
                return raw_quality
            for suffix in suffixes:
                if suffix.lower() == lowered:
                    return suffix

        return raw_quality

    def parse(self, text: str) -> ParsedChord:
        """Parse a chord name like 'Dbmaj9' or 'c maj 7'."""
        root, raw_quality = self.split_root(text)
        return ParsedChord(
            root=root,
            quality=self.normalize_quality(raw_quality),
            raw_quality=raw_quality,
        )

    # =========================================================================
    # DATABASE QUERIES
    # =========================================================================

    def search(self, text: str) -> Optional[ChordEntry]:
        """Find the chord entry for a typed name; None if there is no such chord."""
        database = self._require_database()
        try:
            parsed = self.parse(text)
        except UnrecognizedRoot:
            return None
        return database.find(parsed.root, parsed.quality)

    def get_suggestions(self, partial: str, limit: int = SUGGESTION_LIMIT) -> List[str]:
        """
        Chord names for partially typed input, in database order.

        The raw quality is matched as a case-insensitive prefix, with two
        case rules for "m": a lowercase "m" that is not the start of
        "ma..." keeps only the minor family, so "Dm" does not suggest
        "Dmaj7"; an uppercase "M" means major and drops the minor family,
        so "DM" does not suggest "Dm7".
        """
        database = self._require_database()
        if not partial:
            return []
        try:
            root, raw_quality = self.split_root(partial)
        except UnrecognizedRoot:
            return []

        prefix = raw_quality.lower()
        minor_only = raw_quality.startswith("m") and not prefix.startswith("ma")
        major_only = raw_quality.startswith("M")

        suggestions = []
        for entry in database.entries_for(root):
            quality = entry.quality
            if prefix and not quality.lower().startswith(prefix):
                continue
            if minor_only and not _is_minor_family(quality):
                continue
            if major_only and _is_minor_family(quality):
                continue
            suggestions.append(chord_name(root, quality))
            if len(suggestions) >= limit:
                break

        return suggestions


def _is_minor_family(quality: str) -> bool:
    return quality == MINOR or (quality.startswith("m") and not quality.startswith("maj"))


def parse_chord_name(text: str, database: Optional[ChordDatabase] = None) -> ParsedChord:
    """Convenience wrapper around ChordNameParser.parse()."""
    return ChordNameParser(database).parse(text)
