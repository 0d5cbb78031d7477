"""
Tests for chordref/theory/chord_parser.py

Run with: pytest tests/test_chord_parser.py -v
"""

import pytest

from chordref.errors import NotInitialized, UnrecognizedRoot
from chordref.theory.chord_parser import ChordNameParser, ParsedChord, parse_chord_name


class TestParse:
    """Test chord name → (root, quality)."""

    @pytest.mark.parametrize("text, root, quality", [
        ("F#m7", "Gb", "m7"),
        ("c maj 7", "C", "maj7"),
        ("C", "C", "major"),
        ("Am", "A", "minor"),
        ("Amin", "A", "minor"),
        ("A-", "A", "minor"),
        ("Bb", "Bb", "major"),
        ("Bbm7", "Bb", "m7"),
        ("Cø", "C", "m7b5"),
        ("C-7", "C", "m7"),
        ("CM7", "C", "maj7"),
        ("CΔ", "C", "maj7"),
        ("CMAJ7", "C", "maj7"),
        ("C°7", "C", "dim7"),
        ("Gsus", "G", "sus4"),
        ("D6/9", "D", "69"),
        ("E♭7", "Eb", "7"),
        ("C♯m", "Db", "minor"),
    ])
    def test_parse(self, text, root, quality):
        parsed = parse_chord_name(text)
        assert (parsed.root, parsed.quality) == (root, quality)

    def test_root_is_flat_spelled(self):
        """Sharp roots are reported with their flat spelling."""
        assert parse_chord_name("G#7").root == "Ab"

    def test_enharmonic_natural_roots(self):
        """E# and Cb roots canonicalize to F and B."""
        assert parse_chord_name("E#").root == "F"
        assert parse_chord_name("Cb").root == "B"

    def test_unknown_quality_passes_through(self):
        """Unknown qualities are not an error; the raw token is kept."""
        parsed = parse_chord_name("C13b9")
        assert parsed.quality == "13b9"
        assert parsed.raw_quality == "13b9"

    def test_database_suffix_case_insensitive(self, parser):
        """Database suffixes match regardless of case."""
        assert parser.normalize_quality("M7B5") == "m7b5"

    @pytest.mark.parametrize("text", ["", "   ", "Hm", "7", "xyz"])
    def test_unrecognized_root(self, text):
        with pytest.raises(UnrecognizedRoot):
            parse_chord_name(text)

    def test_parsed_chord_name(self):
        """ParsedChord.name uses display suffixes."""
        assert parse_chord_name("Am").name == "Am"
        assert parse_chord_name("C").name == "C"
        assert ParsedChord("Bb", "maj7").name == "Bbmaj7"

    def test_round_trip_every_entry(self, sample_db, parser):
        """Every database chord name parses back to its own root and quality."""
        for entry in sample_db.iter_entries():
            parsed = parser.parse(entry.name)
            assert (parsed.root, parsed.quality) == (entry.root, entry.quality), entry.name


class TestSearch:
    """Test database lookups by name."""

    def test_search_finds_entry(self, parser):
        entry = parser.search("F#m7")
        assert entry is not None
        assert entry.key == "Fsharp"
        assert entry.quality == "m7"

    def test_search_sharp_database_key(self, parser):
        """'Dbm' finds the entry stored under 'Csharp'."""
        entry = parser.search("Dbm")
        assert entry.key == "Csharp"

    def test_search_miss_is_none(self, parser):
        assert parser.search("Cmaj13") is None

    def test_search_bad_root_is_none(self, parser):
        assert parser.search("Hm7") is None

    def test_search_without_database(self):
        with pytest.raises(NotInitialized):
            ChordNameParser().search("C")


class TestSuggestions:
    """Test type-ahead suggestions."""

    def test_minor_family_only(self, parser):
        """'Dm' suggests only D chords in the minor family."""
        assert parser.get_suggestions("Dm") == ["Dm", "Dm7", "Dm7b5"]

    @pytest.mark.parametrize("partial", ["Dma", "Dmaj"])
    def test_ma_prefix_is_major(self, parser, partial):
        """'Dma' starts both 'major' and 'maj7', not minor."""
        assert parser.get_suggestions(partial) == ["D", "Dmaj7"]

    def test_uppercase_m_is_major(self, parser):
        """'DM' is the major alias, so minor-family chords are left out."""
        assert parser.get_suggestions("DM") == ["D", "Dmaj7"]

    def test_prefix_case_insensitive(self, parser):
        """Other letters match regardless of case."""
        assert parser.get_suggestions("DSUS") == ["Dsus2", "Dsus4"]

    def test_bare_root_lists_database_order(self, parser):
        assert parser.get_suggestions("D") == [
            "D", "Dm", "D7", "Dm7", "Dmaj7", "Dsus2", "Dsus4", "Dm7b5",
        ]

    def test_limit(self, parser):
        assert parser.get_suggestions("C", limit=3) == ["C", "Cm", "C6"]

    def test_default_limit(self, parser):
        assert len(parser.get_suggestions("C")) == 10

    def test_sharp_root(self, parser):
        """Sharp input suggests under the flat spelling."""
        assert parser.get_suggestions("F#m") == ["Gbm", "Gbm7"]

    def test_no_match(self, parser):
        assert parser.get_suggestions("Dzz") == []

    def test_empty_and_bad_input(self, parser):
        assert parser.get_suggestions("") == []
        assert parser.get_suggestions("H") == []

    def test_without_database(self):
        with pytest.raises(NotInitialized):
            ChordNameParser().get_suggestions("C")
