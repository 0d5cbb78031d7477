"""
Tests for chordref/theory/degrees.py

Run with: pytest tests/test_degrees.py -v
"""

from chordref.data.schema import Voicing
from chordref.theory.degrees import (
    CHORD_FORMULAS,
    DEFAULT_FORMULA,
    calculate_intervals,
    find_interval,
    formula_for,
)


class TestFindInterval:
    """Test picking a degree token for a semitone offset."""

    def test_formula_token_wins(self):
        """A 9 chord labels two semitones as '9'."""
        assert find_interval(2, formula_for("9")) == "9"

    def test_priority_outside_formula(self):
        """Outside the formula, the simpler token is used."""
        assert find_interval(2, DEFAULT_FORMULA) == "2"
        assert find_interval(10, DEFAULT_FORMULA) == "b7"
        assert find_interval(3, DEFAULT_FORMULA) == "b3"

    def test_first_candidate_fallback(self):
        """No priority token for a semitone: the first defined one is used."""
        assert find_interval(1, DEFAULT_FORMULA) == "b2"
        assert find_interval(8, DEFAULT_FORMULA) == "#5"

    def test_diminished_seventh(self):
        assert find_interval(9, formula_for("dim7")) == "bb7"

    def test_unknown_quality_uses_major(self):
        assert formula_for("weird") == CHORD_FORMULAS["major"]

    def test_major_synonyms(self):
        assert formula_for("") == formula_for("major")


class TestCalculateIntervals:
    """Test per-string labels for real voicings."""

    def test_cmaj7(self, sample_db):
        voicing = sample_db.find("C", "maj7").voicings[0]
        assert calculate_intervals(voicing, 0, "maj7") == [None, "R", "3", "5", "7", "3"]

    def test_a_minor(self, sample_db):
        voicing = sample_db.find("A", "minor").voicings[0]
        assert calculate_intervals(voicing, 9, "minor") == [None, "R", "5", "R", "b3", "5"]

    def test_two_muted_strings(self, sample_db):
        voicing = sample_db.find("C", "dim7").voicings[0]
        assert calculate_intervals(voicing, 0, "dim7") == [None, None, "b3", "bb7", "R", "b5"]

    def test_unknown_quality_labels_against_major(self, sample_db):
        voicing = sample_db.find("C", "major").voicings[0]
        assert calculate_intervals(voicing, 0, "weird") == calculate_intervals(voicing, 0, "major")

    def test_extension_outside_formula(self, sample_db):
        """C9 labelled as a plain triad: the D shows as '2', Bb as 'b7'."""
        voicing = sample_db.find("C", "9").voicings[0]
        assert calculate_intervals(voicing, 0, "major") == [None, "R", "3", "b7", "2", "5"]
        assert calculate_intervals(voicing, 0, "9") == [None, "R", "3", "b7", "9", "5"]

    def test_one_label_per_string(self, sample_db):
        for entry, voicing in sample_db.iter_voicings():
            labels = calculate_intervals(voicing, 0, entry.quality)
            assert len(labels) == len(voicing.frets)
            for fret, label in zip(voicing.frets, labels):
                if fret == -1:
                    assert label is None

    def test_deterministic(self, sample_db):
        voicing = sample_db.find("G", "7").voicings[0]
        assert calculate_intervals(voicing, 7, "7") == calculate_intervals(voicing, 7, "7")

    def test_no_midi_data(self):
        voicing = Voicing(frets=[-1, 3, 2, 0, 1, 0])
        assert calculate_intervals(voicing, 0, "major") == [None] * 6
