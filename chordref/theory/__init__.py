"""
Theory Subpackage

Music theory on top of pitch classes:
    - pitch.py: Note spellings, pitch classes, database key names
    - chord_parser.py: Free-text chord names → (root, quality), suggestions
    - reverse_index.py: Notes → chord names (exact pitch-class set)
    - degrees.py: Degree labels (R, b3, 5, ...) for each string of a voicing
    - progressions.py: Roman-numeral templates resolved in any key

Only the modules that do not need the chord database are imported here;
import the others directly.
"""

from chordref.theory.pitch import KEYS, normalize_to_flat, pitch_class_of
from chordref.theory.progressions import PROGRESSIONS, get_progression, resolve_progression
