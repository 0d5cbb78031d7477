"""
Test Package

Contains unit tests for all modules.
Run with: pytest tests/ -v

Test files should follow the pattern:
    test_<module_name>.py

Example:
    tests/test_schema.py         - Tests for chordref/data/schema.py
    tests/test_progressions.py   - Tests for chordref/theory/progressions.py
    tests/test_cli.py            - Tests for chordref/app/cli.py
"""
