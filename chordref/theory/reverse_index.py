"""
Reverse Index - Notes to Chord Names

Maps the exact set of pitch classes a voicing sounds to every chord name
that produces that set. "C E G B" finds Cmaj7; "C E A" finds both Am and C6.

Matching is exact-set only: {C, E, G} does not match a voicing that also
sounds a ninth, and a voicing that omits the fifth is only found by a
query that omits it too.

Note input formats:
    - "C E G B"   (space-separated)
    - "C, E, G"   (comma-separated)
    - "C-E-G"     (dash-separated)
    - "CEG"       (condensed, parsed greedily)

Known limitation of the condensed format:
    A "B" after a letter is ambiguous. When it ends the run, or is followed
    by another letter, it is read as a flat if the letter before it can take
    one (D, E, G, A, B); otherwise it starts the note B. So "CEGB" parses
    as C, E, Gb. Use separators to be unambiguous.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from chordref.data.schema import ChordDatabase, chord_name
from chordref.errors import InvalidNote, NoValidNotes, NotInitialized
from chordref.theory.pitch import PitchClassSet, note_names, pitch_class_of, pitch_class_set


logger = logging.getLogger(__name__)

NOTE_LETTERS = "ABCDEFG"
FLATTABLE_LETTERS = "DEGAB"


# =============================================================================
# LOOKUP RESULT DATA CLASS
# =============================================================================

@dataclass
class NoteLookupResult:
    """Outcome of a note query. An empty `chords` list is a soft miss."""
    notes: List[str]
    pitch_classes: List[int]
    chords: List[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.chords)

    def to_dict(self) -> Dict:
        return {
            "notes": self.notes,
            "pitch_classes": self.pitch_classes,
            "chords": self.chords,
        }


# =============================================================================
# NOTE INPUT PARSING
# =============================================================================

def parse_condensed_notes(text: str) -> List[str]:
    """Split a run like 'C#EGBB' into note names, left to right."""
    notes = []
    i = 0
    length = len(text)

    while i < length:
        char = text[i]

        if char.upper() not in NOTE_LETTERS:
            i += 1
            continue

        note = char.upper()
        i += 1

        if i < length:
            modifier = text[i]
            if modifier in ("#", "♯"):
                note += "#"
                i += 1
            elif modifier in ("B", "b", "♭"):
                if i + 1 >= length or text[i + 1].upper() in NOTE_LETTERS:
                    if note in FLATTABLE_LETTERS:
                        note += "b"
                        i += 1
                    # otherwise the B is the next note
                else:
                    note += "b"
                    i += 1

        notes.append(note)

    return notes


def split_note_input(text: str) -> List[str]:
    """Split note input on commas, then whitespace, then dashes, else condensed."""
    cleaned = text.strip().upper()

    if "," in cleaned:
        return [n.strip() for n in cleaned.split(",")]
    if any(c.isspace() for c in cleaned):
        return cleaned.split()
    if "-" in cleaned:
        return [n.strip() for n in cleaned.split("-")]
    return parse_condensed_notes(cleaned)


def parse_note_input(text: str) -> List[int]:
    """
    Parse user note input into sorted, distinct pitch classes.

    Unparseable tokens are skipped. The result may be empty.
    """
    if not text:
        return []

    pitch_classes = set()
    for token in split_note_input(text):
        if not token:
            continue
        try:
            pitch_classes.add(pitch_class_of(token))
        except InvalidNote:
            logger.debug("Skipping unparseable note token %r", token)

    return sorted(pitch_classes)


# =============================================================================
# REVERSE INDEX
# =============================================================================

class ReverseIndex:
    """
    Index from pitch-class sets to chord names.

    Built once from the chord database in O(total voicings); read-only after.

    Example:
        >>> index = ReverseIndex(load_chord_database())
        >>> index.lookup("C E G B").chords
        ['Cmaj7']
    """

    def __init__(self, database: Optional[ChordDatabase] = None):
        self._index: Optional[Dict[PitchClassSet, List[str]]] = None
        if database is not None:
            self.build(database)

    @property
    def is_built(self) -> bool:
        return self._index is not None

    def build(self, database: ChordDatabase) -> "ReverseIndex":
        """Index every voicing that carries MIDI data."""
        index: Dict[PitchClassSet, List[str]] = {}

        for entry, voicing in database.iter_voicings():
            if not voicing.midi:
                continue
            name = chord_name(entry.root, entry.quality)
            names = index.setdefault(pitch_class_set(voicing.midi), [])
            if name not in names:
                names.append(name)

        self._index = index
        logger.info("Built reverse lookup index with %d unique pitch class sets", len(index))
        return self

    def _require_index(self) -> Dict[PitchClassSet, List[str]]:
        if self._index is None:
            raise NotInitialized("ReverseIndex")
        return self._index

    def __len__(self) -> int:
        return len(self._require_index())

    def chords_for(self, pitch_classes: Iterable[int]) -> List[str]:
        """Chord names whose voicings sound exactly these pitch classes."""
        index = self._require_index()
        key = tuple(sorted({pc % 12 for pc in pitch_classes}))
        return sorted(index.get(key, []))

    def lookup(self, text: str) -> NoteLookupResult:
        """
        Find chords containing exactly the notes in `text`.

        Raises:
            NotInitialized: If the index has not been built
            NoValidNotes: If no note in `text` could be parsed
        """
        self._require_index()
        pitch_classes = parse_note_input(text)
        if not pitch_classes:
            raise NoValidNotes(text)

        return NoteLookupResult(
            notes=note_names(pitch_classes),
            pitch_classes=pitch_classes,
            chords=self.chords_for(pitch_classes),
        )
