"""
Progressions Module - Roman-Numeral Templates in Any Key

This module turns key-independent progression templates into concrete chords.
It can:
    1. Resolve a numeral to a chord root in any of the 12 keys
    2. Resolve whole templates of three shapes:
         - FlatTemplate:      one ordered list of numerals ("ii-V-I")
         - SectionedTemplate: named sections resolved independently (AABA forms)
         - ChartTemplate:     a grid of bars, 1-2 chords per bar (blues charts)
    3. Apply per-slot quality overrides ("alterations") without touching the template
    4. Collapse a resolution to its unique chords for diagram display

Resolution rule:
    root  = KEYS[(key index + semitones(numeral)) % 12]
    chord = root + (override for the slot, else the template's quality)

Slot identity:
    FlatTemplate      → index
    SectionedTemplate → (section key, index)
    ChartTemplate     → (bar index, slot index)

An unknown numeral or key fails the whole resolution; nothing partial is returned.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Hashable, List, Mapping, Optional, Tuple, Union

from chordref.errors import UnknownKey, UnknownNumeral
from chordref.theory.pitch import KEYS, normalize_to_flat


# =============================================================================
# CONSTANTS
# =============================================================================

# Semitones above the key for each numeral (case marks the usual quality only)
INTERVALS = {
    "I": 0,
    "i": 0,
    "bII": 1,
    "ii": 2,
    "II": 2,     # secondary dominant (V/V)
    "biii": 3,
    "bIII": 3,
    "iii": 4,
    "III": 4,    # secondary dominant (V/vi)
    "IV": 5,
    "iv": 5,
    "#iv": 6,
    "V": 7,
    "v": 7,
    "bVI": 8,
    "vi": 9,
    "VI": 9,     # rhythm changes (dominant, not minor)
    "bVII": 10,
    "vii": 11,
    "VII": 11,
}

CATEGORY_NAMES = {
    "jazz": "Jazz",
    "blues": "Blues",
    "basic": "Basic",
    "pop": "Pop",
}

# Substitutes a progression view may offer for each default quality
ALTERATION_CHOICES = {
    "": ["maj7", "6", "add9", "sus4", "sus2"],
    "m": ["m7", "m6", "madd9"],
    "7": ["7b9", "7#9", "9", "13", "7#5", "7b5", "alt", "7sus4"],
    "maj7": ["6", "maj9", "69", "maj7#5"],
    "m7": ["m9", "m11", "m6", "mmaj7"],
    "m7b5": ["m7", "dim7"],
    "dim7": ["7b9"],
}

Slot = Hashable
Overrides = Dict[Slot, str]


# =============================================================================
# TEMPLATE DATA CLASSES
# =============================================================================

def _read_only(qualities: Mapping[str, str]) -> Mapping[str, str]:
    """Copy a numeral → quality table into a read-only mapping."""
    return MappingProxyType(dict(qualities))


@dataclass(frozen=True)
class FlatTemplate:
    """An ordered list of numerals; each numeral has one quality."""
    id: str
    name: str
    numerals: Tuple[str, ...]
    qualities: Mapping[str, str]
    category: str = "basic"

    def __post_init__(self):
        object.__setattr__(self, "qualities", _read_only(self.qualities))


@dataclass(frozen=True)
class Section:
    """One named section of a sectioned template (e.g. the 'B' of AABA)."""
    key: str
    name: str
    numerals: Tuple[str, ...]
    qualities: Mapping[str, str]

    def __post_init__(self):
        object.__setattr__(self, "qualities", _read_only(self.qualities))


@dataclass(frozen=True)
class SectionedTemplate:
    """Sections resolved independently; `form` gives the playing order."""
    id: str
    name: str
    sections: Tuple[Section, ...]
    form: str = ""
    category: str = "jazz"

    def section(self, key: str) -> Section:
        for section in self.sections:
            if section.key == key:
                return section
        raise KeyError(f"No section '{key}' in {self.id}")

    def form_sequence(self) -> List[str]:
        """Section keys in playing order (every section once if no form is set)."""
        if self.form:
            return list(self.form)
        return [section.key for section in self.sections]


@dataclass(frozen=True)
class ChartSlot:
    numeral: str
    quality: str


@dataclass(frozen=True)
class ChartTemplate:
    """A fixed grid of bars, each holding one or two chord slots."""
    id: str
    name: str
    bars: Tuple[Tuple[ChartSlot, ...], ...]
    category: str = "blues"
    bars_per_row: int = 4


ProgressionTemplate = Union[FlatTemplate, SectionedTemplate, ChartTemplate]


@dataclass(frozen=True)
class ResolvedChord:
    """One template slot resolved in a key. Built fresh on every resolution."""
    slot: Slot
    numeral: str
    root: str
    quality: str
    default_quality: str
    chord_name: str
    altered: bool = False

    def to_dict(self) -> Dict:
        return {
            "slot": self.slot,
            "numeral": self.numeral,
            "root": self.root,
            "quality": self.quality,
            "default_quality": self.default_quality,
            "chord_name": self.chord_name,
            "altered": self.altered,
        }


# =============================================================================
# ROOT RESOLUTION
# =============================================================================

def key_index(key: str) -> int:
    """Index of a key in KEYS; sharps are accepted and read as flats."""
    normalized = normalize_to_flat(key)
    if normalized not in KEYS:
        raise UnknownKey(key)
    return KEYS.index(normalized)


def numeral_offset(numeral: str) -> int:
    """Semitone offset of a numeral. Digits are ignored ('V7' reads as 'V')."""
    clean = re.sub(r"[0-9]", "", numeral)
    if clean not in INTERVALS:
        raise UnknownNumeral(numeral)
    return INTERVALS[clean]


def resolve_root(numeral: str, key: str) -> str:
    """
    Resolve a numeral to a chord root in a key.

    Examples:
        resolve_root("ii", "Bb")  → "C"
        resolve_root("V", "F#")   → "Db"
    """
    return KEYS[(key_index(key) + numeral_offset(numeral)) % 12]


def resolve_chord(numeral: str, key: str, quality: str) -> str:
    """Full chord name for a numeral, e.g. ('ii', 'C', 'm7') → 'Dm7'."""
    return resolve_root(numeral, key) + quality


def _resolve_slot(
    slot: Slot,
    numeral: str,
    default_quality: str,
    index: int,
    overrides: Overrides
) -> ResolvedChord:
    root = KEYS[(index + numeral_offset(numeral)) % 12]
    altered = slot in overrides
    quality = overrides[slot] if altered else default_quality
    return ResolvedChord(
        slot=slot,
        numeral=numeral,
        root=root,
        quality=quality,
        default_quality=default_quality,
        chord_name=root + quality,
        altered=altered,
    )


# =============================================================================
# TEMPLATE RESOLUTION (one function per template shape)
# =============================================================================

def resolve_flat(
    template: FlatTemplate,
    key: str,
    overrides: Optional[Overrides] = None
) -> List[ResolvedChord]:
    index = key_index(key)
    overrides = overrides or {}
    return [
        _resolve_slot(i, numeral, template.qualities.get(numeral, ""), index, overrides)
        for i, numeral in enumerate(template.numerals)
    ]


def resolve_sectioned(
    template: SectionedTemplate,
    key: str,
    overrides: Optional[Overrides] = None
) -> Dict[str, List[ResolvedChord]]:
    index = key_index(key)
    overrides = overrides or {}
    resolved = {}
    for section in template.sections:
        resolved[section.key] = [
            _resolve_slot(
                (section.key, i), numeral, section.qualities.get(numeral, ""),
                index, overrides,
            )
            for i, numeral in enumerate(section.numerals)
        ]
    return resolved


def resolve_chart(
    template: ChartTemplate,
    key: str,
    overrides: Optional[Overrides] = None
) -> List[List[ResolvedChord]]:
    index = key_index(key)
    overrides = overrides or {}
    return [
        [
            _resolve_slot((bar_index, slot_index), slot.numeral, slot.quality, index, overrides)
            for slot_index, slot in enumerate(bar)
        ]
        for bar_index, bar in enumerate(template.bars)
    ]


def resolve_progression(
    template: ProgressionTemplate,
    key: str,
    overrides: Optional[Overrides] = None
):
    """
    Resolve any template in a key.

    Returns:
        FlatTemplate      → list of ResolvedChord
        SectionedTemplate → dict of section key → list of ResolvedChord
        ChartTemplate     → list of bars, each a list of ResolvedChord

    Raises:
        UnknownKey, UnknownNumeral: The whole progression is unresolved
    """
    if isinstance(template, FlatTemplate):
        return resolve_flat(template, key, overrides)
    if isinstance(template, SectionedTemplate):
        return resolve_sectioned(template, key, overrides)
    if isinstance(template, ChartTemplate):
        return resolve_chart(template, key, overrides)
    raise TypeError(f"Not a progression template: {type(template).__name__}")


def flatten_resolution(resolved) -> List[ResolvedChord]:
    """Every ResolvedChord of any resolution shape, in order."""
    if isinstance(resolved, dict):
        return [chord for chords in resolved.values() for chord in chords]
    if resolved and isinstance(resolved[0], list):
        return [chord for bar in resolved for chord in bar]
    return list(resolved)


# =============================================================================
# SLOTS AND DEDUPLICATION
# =============================================================================

def template_slots(template: ProgressionTemplate) -> List[Slot]:
    """Every slot identity of a template, in order."""
    if isinstance(template, FlatTemplate):
        return list(range(len(template.numerals)))
    if isinstance(template, SectionedTemplate):
        return [
            (section.key, i)
            for section in template.sections
            for i in range(len(section.numerals))
        ]
    if isinstance(template, ChartTemplate):
        return [
            (bar_index, slot_index)
            for bar_index, bar in enumerate(template.bars)
            for slot_index in range(len(bar))
        ]
    raise TypeError(f"Not a progression template: {type(template).__name__}")


def default_quality(template: ProgressionTemplate, slot: Slot) -> str:
    """
    The template's own quality for a slot.

    Raises:
        KeyError: If the slot does not exist in the template
    """
    try:
        if isinstance(template, FlatTemplate):
            if isinstance(slot, bool) or not isinstance(slot, int) or slot < 0:
                raise KeyError(slot)
            numeral = template.numerals[slot]
            return template.qualities.get(numeral, "")
        if isinstance(template, SectionedTemplate):
            section_key, i = slot
            section = template.section(section_key)
            if i < 0:
                raise KeyError(slot)
            return section.qualities.get(section.numerals[i], "")
        if isinstance(template, ChartTemplate):
            bar_index, slot_index = slot
            if bar_index < 0 or slot_index < 0:
                raise KeyError(slot)
            return template.bars[bar_index][slot_index].quality
    except (IndexError, TypeError, ValueError):
        raise KeyError(slot)
    raise TypeError(f"Not a progression template: {type(template).__name__}")


def get_unique_chords(resolved: List[ResolvedChord]) -> List[ResolvedChord]:
    """First occurrence of each chord name, order preserved."""
    seen = set()
    unique = []
    for chord in resolved:
        if chord.chord_name not in seen:
            seen.add(chord.chord_name)
            unique.append(chord)
    return unique


def get_unique_chart_chords(bars: List[List[ResolvedChord]]) -> List[ResolvedChord]:
    return get_unique_chords([chord for bar in bars for chord in bar])


def alteration_choices(quality: str) -> List[str]:
    """Qualities that may replace `quality` in a slot (may be empty)."""
    return list(ALTERATION_CHOICES.get(quality, []))


# =============================================================================
# ALTERATION SESSION
# =============================================================================

class AlterationSession:
    """
    Per-view state: the selected template, the key, and the slot overrides.

    Overrides are cleared whenever the key or the template changes.
    Altering a slot back to its default removes the override, so the
    override dict only ever holds real alterations.

    Example:
        >>> session = AlterationSession(get_progression("ii-V-I"), "C")
        >>> session.alter(1, "7b9")
        >>> [c.chord_name for c in session.resolve()]
        ['Dm7', 'G7b9', 'Cmaj7']
        >>> session.alter(1, "7")
        >>> session.overrides
        {}
    """

    def __init__(self, template: ProgressionTemplate, key: str):
        key_index(key)
        self.template = template
        self.key = key
        self.overrides: Overrides = {}

    def set_key(self, key: str) -> None:
        changed = key_index(key) != key_index(self.key)
        self.key = key
        if changed:
            self.overrides.clear()

    def select(self, template: ProgressionTemplate) -> None:
        if template is not self.template:
            self.template = template
            self.overrides.clear()

    def default_quality(self, slot: Slot) -> str:
        return default_quality(self.template, slot)

    def alter(self, slot: Slot, quality: str) -> None:
        """Override a slot's quality; the default quality reverts it."""
        if quality == self.default_quality(slot):
            self.overrides.pop(slot, None)
        else:
            self.overrides[slot] = quality

    def revert(self, slot: Slot) -> None:
        self.default_quality(slot)
        self.overrides.pop(slot, None)

    def is_altered(self, slot: Slot) -> bool:
        return slot in self.overrides

    def resolve(self):
        return resolve_progression(self.template, self.key, self.overrides)


# =============================================================================
# PROGRESSION LIBRARY
# =============================================================================

def _chart(*bars: str) -> Tuple[Tuple[ChartSlot, ...], ...]:
    """Build chart bars from strings like 'ii:m7 V:7' (numeral:quality per slot)."""
    result = []
    for bar in bars:
        slots = []
        for token in bar.split():
            numeral, _, quality = token.partition(":")
            slots.append(ChartSlot(numeral, quality))
        result.append(tuple(slots))
    return tuple(result)


PROGRESSIONS: Dict[str, ProgressionTemplate] = {
    "ii-V-I": FlatTemplate(
        id="ii-V-I",
        name="ii-V-I",
        numerals=("ii", "V", "I"),
        qualities={"ii": "m7", "V": "7", "I": "maj7"},
        category="jazz",
    ),
    "minor-ii-V-i": FlatTemplate(
        id="minor-ii-V-i",
        name="Minor ii-V-i",
        numerals=("ii", "V", "i"),
        qualities={"ii": "m7b5", "V": "7", "i": "m7"},
        category="jazz",
    ),
    "turnaround": FlatTemplate(
        id="turnaround",
        name="Turnaround",
        numerals=("I", "vi", "ii", "V"),
        qualities={"I": "maj7", "vi": "m7", "ii": "m7", "V": "7"},
        category="jazz",
    ),
    "full-turnaround": FlatTemplate(
        id="full-turnaround",
        name="Full Turnaround",
        numerals=("iii", "vi", "ii", "V"),
        qualities={"iii": "m7", "vi": "m7", "ii": "m7", "V": "7"},
        category="jazz",
    ),
    "rhythm-changes-a": FlatTemplate(
        id="rhythm-changes-a",
        name="Rhythm Changes (A section)",
        numerals=("I", "VI", "ii", "V"),
        qualities={"I": "maj7", "VI": "7", "ii": "m7", "V": "7"},
        category="jazz",
    ),
    "rhythm-changes": SectionedTemplate(
        id="rhythm-changes",
        name="Rhythm Changes (AABA)",
        sections=(
            Section(
                key="A",
                name="A section",
                numerals=("I", "VI", "ii", "V", "iii", "VI", "ii", "V"),
                qualities={"I": "maj7", "VI": "7", "ii": "m7", "V": "7", "iii": "m7"},
            ),
            Section(
                key="B",
                name="Bridge",
                numerals=("III", "VI", "II", "V"),
                qualities={"III": "7", "VI": "7", "II": "7", "V": "7"},
            ),
        ),
        form="AABA",
        category="jazz",
    ),
    "12-bar-blues": ChartTemplate(
        id="12-bar-blues",
        name="12-Bar Blues",
        bars=_chart(
            "I:7", "I:7", "I:7", "I:7",
            "IV:7", "IV:7", "I:7", "I:7",
            "V:7", "IV:7", "I:7", "V:7",
        ),
        category="blues",
    ),
    "jazz-blues": ChartTemplate(
        id="jazz-blues",
        name="Jazz Blues",
        bars=_chart(
            "I:7", "IV:7", "I:7", "v:m7 I:7",
            "IV:7", "#iv:dim7", "I:7", "iii:m7 VI:7",
            "ii:m7", "V:7", "I:7 VI:7", "ii:m7 V:7",
        ),
        category="blues",
    ),
    "bird-blues": ChartTemplate(
        id="bird-blues",
        name="Bird Blues",
        bars=_chart(
            "I:maj7", "vii:m7b5 III:7", "vi:m7 II:7", "v:m7 I:7",
            "IV:7", "iv:m7 bVII:7", "iii:m7 VI:7", "biii:m7 bVI:7",
            "ii:m7", "V:7", "I:maj7 VI:7", "ii:m7 V:7",
        ),
        category="jazz",
    ),
    "I-IV-V": FlatTemplate(
        id="I-IV-V",
        name="I-IV-V",
        numerals=("I", "IV", "V"),
        qualities={"I": "", "IV": "", "V": ""},
        category="basic",
    ),
    "I-V-vi-IV": FlatTemplate(
        id="I-V-vi-IV",
        name="I-V-vi-IV",
        numerals=("I", "V", "vi", "IV"),
        qualities={"I": "", "V": "", "vi": "m", "IV": ""},
        category="pop",
    ),
}


def get_progression(progression_id: str) -> Optional[ProgressionTemplate]:
    return PROGRESSIONS.get(progression_id)


def progressions_by_category() -> Dict[str, Dict]:
    """Templates grouped by category, in CATEGORY_NAMES order; empty categories dropped."""
    categories = {
        cat_id: {"name": name, "progressions": []}
        for cat_id, name in CATEGORY_NAMES.items()
    }
    for template in PROGRESSIONS.values():
        cat_id = template.category if template.category in categories else "basic"
        categories[cat_id]["progressions"].append(template)
    return {k: v for k, v in categories.items() if v["progressions"]}
