"""
App Subpackage

The user-facing layer:
    - lookup.py: ChordReference facade (load once, then query)
    - cli.py: The `chordref` command

Usage:
    - CLI: chordref chord "F#m7"
    - Python: ChordReference().load().search_notes("C E G")
"""
