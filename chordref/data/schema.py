"""
Schema definitions for the chord database.

This module defines the Pydantic models that validate and structure the
bundled chord data. The JSON layout follows chords-db:

    {
      "keys": ["C", "C#", ...],
      "suffixes": ["major", "minor", "7", ...],
      "chords": {
        "C": [{"key": "C", "suffix": "major", "positions": [...]}, ...],
        "Csharp": [...],
        ...
      }
    }

Every model is frozen: the database is loaded once and never mutated.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from chordref.errors import InvalidNote
from chordref.theory.pitch import pitch_class_of, root_for_database_key, root_pitch_class


MAJOR = "major"
MINOR = "minor"

# Qualities shown with a short suffix in chord names
DISPLAY_SUFFIXES = {
    MAJOR: "",
    "": "",
    MINOR: "m",
}


def chord_name(root: str, quality: str) -> str:
    """
    Build a display chord name from a root and a database quality.

    Examples:
        chord_name("C", "major")  → "C"
        chord_name("A", "minor")  → "Am"
        chord_name("Bb", "maj7")  → "Bbmaj7"
    """
    return root + DISPLAY_SUFFIXES.get(quality, quality)


# =============================================================================
# VOICING
# =============================================================================

class Voicing(BaseModel):
    """
    One playable fingering of a chord.

    Attributes:
        frets: Fret per string, low E first (-1 = muted, 0 = open),
            relative to base_fret
        fingers: Finger per string (0 = none)
        base_fret: Fret the diagram starts at (1 = open position)
        barres: Frets that are barred
        midi: MIDI numbers of the sounding strings only (muted strings omitted)
        capo: Whether the lowest barre acts as a capo
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    frets: List[int] = Field(..., min_length=1)
    fingers: List[int] = Field(default_factory=list)
    base_fret: int = Field(default=1, ge=1, alias="baseFret")
    barres: List[int] = Field(default_factory=list)
    midi: List[int] = Field(default_factory=list)
    capo: Optional[bool] = None

    @field_validator("frets")
    @classmethod
    def validate_frets(cls, v: List[int]) -> List[int]:
        """Frets are -1 (muted) or a non-negative fret number"""
        bad = [f for f in v if f < -1]
        if bad:
            raise ValueError(f"Fret values must be >= -1. Got: {bad}")
        return v

    @field_validator("midi")
    @classmethod
    def validate_midi(cls, v: List[int]) -> List[int]:
        bad = [n for n in v if not 0 <= n <= 127]
        if bad:
            raise ValueError(f"MIDI notes must be in 0-127. Got: {bad}")
        return v

    @model_validator(mode="after")
    def validate_fingers(self) -> "Voicing":
        """Fingers, when given, line up one-to-one with frets"""
        if self.fingers and len(self.fingers) != len(self.frets):
            raise ValueError(
                f"Expected {len(self.frets)} fingers to match frets. "
                f"Got: {len(self.fingers)}"
            )
        return self

    @property
    def sounding_strings(self) -> int:
        return sum(1 for f in self.frets if f != -1)


# =============================================================================
# CHORD ENTRY
# =============================================================================

class ChordEntry(BaseModel):
    """
    All voicings of one chord: a root key plus a quality.

    `key` is the database spelling ("Csharp"), not the display root ("Db").
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str
    quality: str = Field(..., alias="suffix")
    voicings: List[Voicing] = Field(default_factory=list, alias="positions")

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        try:
            root_pitch_class(v)
        except InvalidNote:
            raise ValueError(f"Unknown chord key: '{v}'")
        return v

    @property
    def root(self) -> str:
        return root_for_database_key(self.key)

    @property
    def name(self) -> str:
        return chord_name(self.root, self.quality)


# =============================================================================
# CHORD DATABASE
# =============================================================================

class ChordDatabase(BaseModel):
    """
    The full chord database, keyed by database root spelling.

    Lookups take display roots ("Db", "F#", "Gb") and find the matching
    database key by pitch class, so either spelling works.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    keys: List[str] = Field(default_factory=list)
    suffixes: List[str] = Field(default_factory=list)
    chords: Dict[str, List[ChordEntry]]

    @field_validator("chords")
    @classmethod
    def validate_chord_keys(cls, v: Dict[str, List[ChordEntry]]) -> Dict[str, List[ChordEntry]]:
        for key in v:
            try:
                root_pitch_class(key)
            except InvalidNote:
                raise ValueError(f"Unknown chord database key: '{key}'")
        return v

    @model_validator(mode="before")
    @classmethod
    def fill_suffixes(cls, data: Any) -> Any:
        """Derive the suffix list from the raw entries when the file omits it"""
        if not isinstance(data, dict) or data.get("suffixes"):
            return data
        chords = data.get("chords")
        if not isinstance(chords, dict):
            return data

        seen = []
        for entries in chords.values():
            for entry in entries or []:
                if isinstance(entry, ChordEntry):
                    quality = entry.quality
                elif isinstance(entry, dict):
                    quality = entry.get("suffix", entry.get("quality"))
                else:
                    continue
                if quality is not None and quality not in seen:
                    seen.append(quality)
        return {**data, "suffixes": seen}

    def database_key(self, root: str) -> Optional[str]:
        """Find the database key holding a root, matched by pitch class."""
        try:
            target = pitch_class_of(root)
        except InvalidNote:
            return None
        for key in self.chords:
            if root_pitch_class(key) == target:
                return key
        return None

    def entries_for(self, root: str) -> List[ChordEntry]:
        """All chord entries for a root, in database order."""
        key = self.database_key(root)
        if key is None:
            return []
        return self.chords[key]

    def find(self, root: str, quality: str) -> Optional[ChordEntry]:
        """Find a chord by root and quality; exact match first, then case-insensitive."""
        entries = self.entries_for(root)
        for entry in entries:
            if entry.quality == quality:
                return entry
        lowered = quality.lower()
        for entry in entries:
            if entry.quality.lower() == lowered:
                return entry
        return None

    def iter_entries(self) -> Iterator[ChordEntry]:
        for entries in self.chords.values():
            yield from entries

    def iter_voicings(self) -> Iterator[Tuple[ChordEntry, Voicing]]:
        for entry in self.iter_entries():
            for voicing in entry.voicings:
                yield entry, voicing

    def voicing_count(self) -> int:
        return sum(len(entry.voicings) for entry in self.iter_entries())
