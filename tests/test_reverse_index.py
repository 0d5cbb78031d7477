"""
Tests for chordref/theory/reverse_index.py

Run with: pytest tests/test_reverse_index.py -v
"""

import pytest

from chordref.errors import NoValidNotes, NotInitialized
from chordref.theory.reverse_index import (
    ReverseIndex,
    parse_condensed_notes,
    parse_note_input,
    split_note_input,
)


class TestNoteInput:
    """Test the accepted note input formats."""

    @pytest.mark.parametrize("text", ["C E G", "C, E, G", "C-E-G", "CEG", "c e g", "  C  E G "])
    def test_formats(self, text):
        assert split_note_input(text) == ["C", "E", "G"]

    def test_condensed_accidentals(self):
        assert parse_condensed_notes("C#EG#") == ["C#", "E", "G#"]

    def test_condensed_flats_before_letters(self):
        """Lowercase input is upper-cased first; 'B' after D/E/G/A/B is a flat."""
        assert split_note_input("dbfab") == ["Db", "F", "Ab"]

    def test_condensed_b_ambiguity(self):
        """A trailing 'B' after G is read as a flat."""
        assert parse_condensed_notes("CEGB") == ["C", "E", "Gb"]

    def test_condensed_b_after_c(self):
        """C cannot take this flat, so the B is a note."""
        assert parse_condensed_notes("CB") == ["C", "B"]

    def test_parse_sorted_distinct(self):
        assert parse_note_input("G E C C") == [0, 4, 7]

    def test_parse_skips_invalid_tokens(self):
        assert parse_note_input("C X G") == [0, 7]

    def test_parse_flats_in_tokens(self):
        assert parse_note_input("c eb g") == [0, 3, 7]

    def test_parse_empty(self):
        assert parse_note_input("") == []
        assert parse_note_input("xyz") == []


class TestReverseIndex:
    """Test exact pitch-class set lookups."""

    def test_single_match(self, index):
        result = index.lookup("C E G B")
        assert result.chords == ["Cmaj7"]
        assert result.notes == ["C", "E", "G", "B"]
        assert result.pitch_classes == [0, 4, 7, 11]
        assert result.found

    def test_several_matches_sorted(self, index):
        """{C, E, A} is both A minor and C6."""
        assert index.lookup("C E A").chords == ["Am", "C6"]

    def test_order_does_not_matter(self, index):
        assert index.lookup("A C E").chords == index.lookup("E A C").chords

    def test_duplicate_voicings_listed_once(self, index):
        """C major has two voicings with the same set."""
        assert index.lookup("C E G").chords == ["C"]

    def test_exact_set_only(self, index):
        """Adding a pitch class to a matching set loses the match."""
        assert index.chords_for([0, 4, 7, 11]) == ["Cmaj7"]
        assert index.chords_for([0, 2, 4, 7, 11]) == []

    def test_subset_does_not_match(self, index):
        """Dropping the seventh from Cmaj7 finds only C, not Cmaj7."""
        assert "Cmaj7" not in index.chords_for([0, 4, 7])

    def test_soft_miss(self, index):
        result = index.lookup("C D E F")
        assert result.chords == []
        assert not result.found
        assert result.notes == ["C", "D", "E", "F"]

    def test_flat_spelled_names(self, index):
        """Chords on black keys come back with flat roots."""
        assert index.lookup("F# A C#").chords == ["Gbm"]

    def test_no_valid_notes(self, index):
        with pytest.raises(NoValidNotes):
            index.lookup("xyz")

    def test_len(self, index):
        assert len(index) > 0
        assert index.is_built

    def test_to_dict(self, index):
        data = index.lookup("C E G").to_dict()
        assert data == {"notes": ["C", "E", "G"], "pitch_classes": [0, 4, 7], "chords": ["C"]}


class TestUninitialized:
    """Test use before the index is built."""

    def test_lookup_before_build(self):
        with pytest.raises(NotInitialized):
            ReverseIndex().lookup("C E G")

    def test_len_before_build(self):
        with pytest.raises(NotInitialized):
            len(ReverseIndex())

    def test_build_later(self, sample_db):
        index = ReverseIndex()
        assert not index.is_built
        index.build(sample_db)
        assert index.chords_for([2, 5, 9]) == ["Dm"]
