"""
Tests for chordref/app/lookup.py

Run with: pytest tests/test_lookup.py -v
"""

import pytest

from chordref.app.lookup import ChordReference, DiagramRequest
from chordref.errors import NotInitialized
from chordref.theory.progressions import get_progression, resolve_progression


class TestLifecycle:
    """Test load-then-query gating."""

    @pytest.mark.parametrize("call", [
        lambda ref: ref.search_chord("C"),
        lambda ref: ref.suggestions("C"),
        lambda ref: ref.search_notes("C E G"),
        lambda ref: ref.diagrams_for("C"),
        lambda ref: ref.progression_diagrams([]),
    ])
    def test_queries_before_load(self, call):
        ref = ChordReference()
        assert not ref.is_initialized
        with pytest.raises(NotInitialized):
            call(ref)

    def test_load(self, reference):
        assert reference.is_initialized
        assert reference.index.is_built

    def test_load_missing_database(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ChordReference().load(tmp_path / "missing.json")

    def test_database_path_from_config(self, tmp_path):
        ref = ChordReference({"database_path": str(tmp_path / "missing.json")})
        with pytest.raises(FileNotFoundError):
            ref.load()


class TestChordSearch:
    """Test name search and suggestions."""

    def test_search_chord(self, reference):
        assert reference.search_chord("F#m7").name == "Gbm7"

    def test_soft_misses(self, reference):
        assert reference.search_chord("Cmaj13") is None
        assert reference.search_chord("Hm7") is None
        assert reference.search_chord("") is None

    def test_suggestion_limit_from_config(self):
        ref = ChordReference({"suggestion_limit": 2}).load()
        assert ref.suggestions("C") == ["C", "Cm"]


class TestNoteSearch:
    """Test notes → chords."""

    def test_found(self, reference):
        assert reference.search_notes("C E G B").chords == ["Cmaj7"]

    def test_no_valid_notes_is_soft_miss(self, reference):
        result = reference.search_notes("xyz")
        assert result.chords == []
        assert result.notes == []
        assert not result.found


class TestDiagrams:
    """Test diagram requests."""

    def test_one_request_per_voicing(self, reference):
        requests = reference.diagrams_for("C")
        assert len(requests) == 2
        assert all(isinstance(r, DiagramRequest) for r in requests)
        assert all(r.chord_name == "C" for r in requests)

    def test_labels(self, reference):
        request = reference.diagrams_for("Cmaj7")[0]
        assert request.labels == [None, "R", "3", "5", "7", "3"]

    def test_labels_use_database_key_root(self, reference):
        """Gbm7 is stored under 'Fsharp' and labelled from Gb."""
        request = reference.diagrams_for("F#m7")[0]
        assert request.labels[0] == "R"

    def test_left_handed_default(self, reference):
        assert reference.diagrams_for("C")[0].left_handed is True

    def test_right_handed_config(self):
        ref = ChordReference({"left_handed": False}).load()
        assert ref.diagrams_for("C")[0].left_handed is False

    def test_unknown_chord(self, reference):
        assert reference.diagrams_for("Cmaj13") == []
        assert reference.diagrams_for(None) == []

    def test_entry_argument(self, reference):
        entry = reference.search_chord("Am")
        assert len(reference.diagrams_for(entry)) == 1

    def test_to_dict(self, reference):
        data = reference.diagrams_for("Cmaj7")[0].to_dict()
        assert data["voicing"]["baseFret"] == 1
        assert data["labels"][1] == "R"


class TestProgressions:
    """Test progression sessions and diagrams."""

    def test_session_default_key(self):
        ref = ChordReference({"default_key": "F"})
        session = ref.progression_session("ii-V-I")
        assert [c.chord_name for c in session.resolve()] == ["Gm7", "C7", "Fmaj7"]

    def test_unknown_progression(self, reference):
        assert reference.progression_session("nope") is None

    def test_lookup_progression_chord(self, reference):
        assert reference.lookup_progression_chord("Em").quality == "minor"
        assert reference.lookup_progression_chord("G").quality == "major"

    def test_progression_diagrams(self, reference):
        resolved = resolve_progression(get_progression("ii-V-I"), "C")
        diagrams = reference.progression_diagrams(resolved)
        assert [chord.chord_name for chord, _ in diagrams] == ["Dm7", "G7", "Cmaj7"]
        assert all(request is not None for _, request in diagrams)

    def test_missing_diagram_is_none(self, reference):
        """Ebm7 and Dbmaj7 are not in the sample database."""
        resolved = resolve_progression(get_progression("ii-V-I"), "Db")
        diagrams = dict((chord.chord_name, request) for chord, request in reference.progression_diagrams(resolved))
        assert diagrams["Ebm7"] is None
        assert diagrams["Ab7"] is not None
        assert diagrams["Dbmaj7"] is None

    def test_chart_diagrams_unique(self, reference):
        bars = resolve_progression(get_progression("12-bar-blues"), "E")
        diagrams = reference.progression_diagrams(bars)
        assert [chord.chord_name for chord, _ in diagrams] == ["E7", "A7", "B7"]
