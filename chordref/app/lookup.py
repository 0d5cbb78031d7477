"""
Chord Reference Facade
======================

One object that owns the load-then-query lifecycle of the engine:

    1. load()            → read the chord database, build parser + reverse index
    2. search_chord()    → chord name search (one entry or None)
    3. suggestions()     → type-ahead names for partial input
    4. search_notes()    → notes → chord names (exact pitch-class set)
    5. diagrams_for()    → one DiagramRequest per voicing, with degree labels
    6. progression_*()   → templates resolved in a key, with diagrams

Bad user input never raises from here: an unparseable chord name or note
list is a soft miss (None or an empty result). Calling a database-backed
method before load() raises NotInitialized.

Usage:
    from chordref.app.lookup import ChordReference

    ref = ChordReference().load()
    entry = ref.search_chord("F#m7")
    for request in ref.diagrams_for(entry):
        print(request.chord_name, request.labels)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from chordref.config import DEFAULT_CONFIG
from chordref.data.loader import load_chord_database
from chordref.data.schema import ChordDatabase, ChordEntry, Voicing
from chordref.errors import NoValidNotes, NotInitialized
from chordref.theory.chord_parser import ChordNameParser
from chordref.theory.degrees import calculate_intervals
from chordref.theory.pitch import root_pitch_class
from chordref.theory.progressions import (
    AlterationSession,
    ResolvedChord,
    flatten_resolution,
    get_progression,
    get_unique_chords,
)
from chordref.theory.reverse_index import NoteLookupResult, ReverseIndex


logger = logging.getLogger(__name__)


# =============================================================================
# DIAGRAM REQUEST
# =============================================================================

@dataclass(frozen=True)
class DiagramRequest:
    """
    Everything a fretboard renderer needs for one voicing.

    `left_handed` only tells the renderer which way to draw the neck;
    the labels are always in string order.
    """
    chord_name: str
    voicing: Voicing
    labels: List[Optional[str]]
    left_handed: bool = True

    def to_dict(self) -> Dict:
        return {
            "chord_name": self.chord_name,
            "voicing": self.voicing.model_dump(by_alias=True),
            "labels": self.labels,
            "left_handed": self.left_handed,
        }


# =============================================================================
# FACADE
# =============================================================================

class ChordReference:
    """Application-level entry point over the chord database and resolvers."""

    def __init__(self, config: Optional[Dict] = None):
        self.config = DEFAULT_CONFIG.copy()
        if config:
            self.config.update(config)

        self.database: Optional[ChordDatabase] = None
        self.parser: Optional[ChordNameParser] = None
        self.index: Optional[ReverseIndex] = None

    @property
    def is_initialized(self) -> bool:
        return self.database is not None

    def load(self, path: Optional[Union[str, Path]] = None) -> "ChordReference":
        """
        Load the chord database and build the parser and reverse index.

        Args:
            path: Database JSON (default: config["database_path"], then the bundled sample)
        """
        path = path if path is not None else self.config.get("database_path")
        database = load_chord_database(path)

        self.database = database
        self.parser = ChordNameParser(database)
        self.index = ReverseIndex(database)
        return self

    def _require_loaded(self) -> ChordDatabase:
        if self.database is None:
            raise NotInitialized("ChordReference")
        return self.database

    # =========================================================================
    # CHORD NAME SEARCH
    # =========================================================================

    def search_chord(self, text: str) -> Optional[ChordEntry]:
        self._require_loaded()
        return self.parser.search(text)

    def suggestions(self, partial: str) -> List[str]:
        self._require_loaded()
        return self.parser.get_suggestions(partial, limit=self.config["suggestion_limit"])

    # =========================================================================
    # NOTE SEARCH
    # =========================================================================

    def search_notes(self, text: str) -> NoteLookupResult:
        """Chords sounding exactly the given notes; no parseable notes is a soft miss."""
        self._require_loaded()
        try:
            return self.index.lookup(text)
        except NoValidNotes:
            logger.debug("No valid notes in %r", text)
            return NoteLookupResult(notes=[], pitch_classes=[], chords=[])

    # =========================================================================
    # DIAGRAMS
    # =========================================================================

    def diagrams_for(self, chord: Union[str, ChordEntry, None]) -> List[DiagramRequest]:
        """One labelled DiagramRequest per voicing of a chord (by entry or typed name)."""
        self._require_loaded()
        entry = self.search_chord(chord) if isinstance(chord, str) else chord
        if entry is None:
            return []

        root = root_pitch_class(entry.key)
        left_handed = bool(self.config["left_handed"])
        return [
            DiagramRequest(
                chord_name=entry.name,
                voicing=voicing,
                labels=calculate_intervals(voicing, root, entry.quality),
                left_handed=left_handed,
            )
            for voicing in entry.voicings
        ]

    # =========================================================================
    # PROGRESSIONS
    # =========================================================================

    def progression_session(
        self,
        progression_id: str,
        key: Optional[str] = None
    ) -> Optional[AlterationSession]:
        """Start an alteration session for a template; None if the id is unknown."""
        template = get_progression(progression_id)
        if template is None:
            return None
        return AlterationSession(template, key or self.config["default_key"])

    def lookup_progression_chord(self, chord_name: str) -> Optional[ChordEntry]:
        """Database entry for a resolved progression chord like 'Dm7' or 'Bb'."""
        return self.search_chord(chord_name)

    def progression_diagrams(
        self,
        resolved
    ) -> List[Tuple[ResolvedChord, Optional[DiagramRequest]]]:
        """
        First-voicing diagram for each unique chord of a resolution.

        The diagram is None when the database has no such chord.
        """
        self._require_loaded()
        diagrams = []
        for chord in get_unique_chords(flatten_resolution(resolved)):
            requests = self.diagrams_for(self.lookup_progression_chord(chord.chord_name))
            diagrams.append((chord, requests[0] if requests else None))
        return diagrams
