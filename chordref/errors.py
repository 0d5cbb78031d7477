"""
Error Types for the Chord Reference Engine

Every failure the engine can raise is defined here, so callers can catch
one base class (ChordRefError) or pick the specific kind they care about.

Two families:
    - Bad user input (InvalidNote, UnrecognizedRoot, NoValidNotes).
      The application layer turns these into a neutral "not found" result.
    - Programmer errors (NotInitialized, UnknownNumeral, UnknownKey).
      These mean the caller or the template data is wrong and should surface.

A "soft miss" (no chord found, no exact note match) is NOT an exception:
it is an empty list or None.
"""


class ChordRefError(Exception):
    """Base class for all chord reference errors."""


class InvalidNote(ChordRefError, ValueError):
    """A note spelling has a bad letter or an unrecognized accidental."""

    def __init__(self, spelling: str):
        self.spelling = spelling
        super().__init__(f"Invalid note: '{spelling}'")


class UnrecognizedRoot(ChordRefError, ValueError):
    """A chord name does not start with a root letter A-G."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Cannot identify a root note in '{text}'")


class NoValidNotes(ChordRefError, ValueError):
    """A note query contained no parseable note names."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"No valid notes in '{text}'")


class UnknownNumeral(ChordRefError, ValueError):
    """A progression uses a Roman numeral outside the interval table."""

    def __init__(self, numeral: str):
        self.numeral = numeral
        super().__init__(f"Unknown numeral: '{numeral}'")


class UnknownKey(ChordRefError, ValueError):
    """A progression was asked to resolve in a key that is not one of the 12."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Unknown key: '{key}'")


class NotInitialized(ChordRefError, RuntimeError):
    """A database-backed resolver was called before the database was loaded."""

    def __init__(self, component: str):
        self.component = component
        super().__init__(f"{component} used before the chord database was loaded")
