"""
Chord Reference - Package Root

A music-theory engine for a guitar chord reference: chord name search,
notes-to-chord lookup, Roman-numeral progressions in any key, and
scale-degree labels for every voicing.

Subpackages:
    - chordref.data: Chord database schema, loader and bundled sample
    - chordref.theory: Pitch classes, name parsing, reverse index,
                       degree labels, progressions
    - chordref.app: ChordReference facade and command-line interface

Example usage:
    from chordref.app.lookup import ChordReference

    ref = ChordReference().load()
    ref.search_notes("C E G B").chords     # ['Cmaj7']
    ref.suggestions("Dm")                  # ['Dm', 'Dm7', 'Dm7b5']
"""

__version__ = "0.1.0"
