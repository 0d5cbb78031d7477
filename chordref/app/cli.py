"""
Command Line Interface for the Chord Reference Engine
=====================================================

Look up chords by name, by notes, or through progression templates.

Usage Examples:
    # Chord name search - voicings with fret and degree lines
    chordref chord "F#m7"

    # Type-ahead suggestions
    chordref suggest Dm

    # Notes to chords (exact pitch-class set)
    chordref notes "C E G B"

    # List progression templates
    chordref progressions

    # Resolve a template in a key, altering slot 1 to 7b9
    chordref progression ii-V-I --key Bb --alter 1=7b9

    # Global flags go before the subcommand
    chordref --json --verbose notes "C-E-A"

Slots for --alter:
    flat templates       INDEX          e.g. 1=7b9
    sectioned templates  SECTION:INDEX  e.g. B:0=9
    chart templates      BAR:INDEX      e.g. 5:0=9   (bars count from 0)

Exit status is 0 on success, including "not found" results, and 2 on errors.
"""

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from chordref.app.lookup import ChordReference, DiagramRequest
from chordref.config import load_config
from chordref.errors import ChordRefError
from chordref.theory.progressions import (
    ChartTemplate,
    FlatTemplate,
    SectionedTemplate,
    alteration_choices,
    flatten_resolution,
    progressions_by_category,
)


EXIT_OK = 0
EXIT_ERROR = 2


# =============================================================================
# PART 1: ARGUMENT PARSER SETUP
# =============================================================================

def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser object
    """
    parser = argparse.ArgumentParser(
        prog="chordref",
        description="""
Guitar chord reference - look up chords by name, by notes, or by
Roman-numeral progression in any key.

Examples:
  chordref chord "Bbmaj7"
  chordref notes "C E G B"
  chordref progression jazz-blues --key F
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # ─────────────────────────────────────────────────────────────────────────
    # Global flags
    # ─────────────────────────────────────────────────────────────────────────
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output result as JSON (useful for scripting)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show detailed processing information"
    )
    parser.add_argument(
        "--database",
        metavar="PATH",
        help="Chord database JSON (default: bundled sample)"
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="YAML config file"
    )
    parser.add_argument(
        "--right-handed",
        action="store_true",
        help="Request right-handed diagrams (default is left-handed)"
    )

    # ─────────────────────────────────────────────────────────────────────────
    # Subcommands
    # ─────────────────────────────────────────────────────────────────────────
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    chord = subparsers.add_parser("chord", help="Show voicings for a chord name")
    chord.add_argument("name", help='Chord name, e.g. "F#m7" or "c maj 7"')

    suggest = subparsers.add_parser("suggest", help="Suggest chord names for partial input")
    suggest.add_argument("partial", help='Partial chord name, e.g. "Dm"')

    notes = subparsers.add_parser("notes", help="Find chords containing exactly these notes")
    notes.add_argument("notes", help='Notes, e.g. "C E G", "C,E,G", "C-E-G" or "CEG"')

    subparsers.add_parser("progressions", help="List progression templates")

    progression = subparsers.add_parser("progression", help="Resolve a progression in a key")
    progression.add_argument("id", help="Template id, e.g. ii-V-I")
    progression.add_argument("--key", "-k", help="Key to resolve in (default from config)")
    progression.add_argument(
        "--alter",
        action="append",
        default=[],
        metavar="SLOT=QUALITY",
        help="Override one slot's quality (repeatable)"
    )

    return parser


# =============================================================================
# PART 2: OUTPUT FORMATTING FUNCTIONS
# =============================================================================

def format_frets(frets: List[int]) -> str:
    return " ".join("x" if f == -1 else str(f) for f in frets)


def format_labels(labels: List[Optional[str]]) -> str:
    return " ".join(label if label is not None else "-" for label in labels)


def format_diagram(request: DiagramRequest, indent: str = "  ") -> List[str]:
    voicing = request.voicing
    return [
        f"{indent}Frets:   {format_frets(voicing.frets)}   (base fret {voicing.base_fret})",
        f"{indent}Degrees: {format_labels(request.labels)}",
    ]


def format_chord_result(name: str, requests: List[DiagramRequest]) -> str:
    lines = [f"{name}  ({len(requests)} voicing{'s' if len(requests) != 1 else ''})", ""]
    for i, request in enumerate(requests, start=1):
        lines.append(f"Voicing {i}:")
        lines.extend(format_diagram(request))
        lines.append("")
    return "\n".join(lines).rstrip()


def _cell(chord) -> str:
    return chord.chord_name + ("*" if chord.altered else "")


def format_resolution(template, resolved) -> List[str]:
    """Resolved chords laid out for the template's shape."""
    lines = []

    if isinstance(template, FlatTemplate):
        lines.append("  " + "  →  ".join(_cell(c) for c in resolved))
        lines.append("  " + "  ".join(c.numeral for c in resolved))

    elif isinstance(template, SectionedTemplate):
        lines.append(f"  Form: {'-'.join(template.form_sequence())}")
        for section in template.sections:
            chords = resolved[section.key]
            lines.append(f"  [{section.key}] {section.name}")
            lines.append("    " + "  ".join(_cell(c) for c in chords))

    elif isinstance(template, ChartTemplate):
        row = []
        for bar in resolved:
            row.append(" ".join(_cell(c) for c in bar).center(12))
            if len(row) == template.bars_per_row:
                lines.append("  |" + "|".join(row) + "|")
                row = []
        if row:
            lines.append("  |" + "|".join(row) + "|")

    return lines


def _json_resolution(resolved):
    if isinstance(resolved, dict):
        return {key: [c.to_dict() for c in chords] for key, chords in resolved.items()}
    if resolved and isinstance(resolved[0], list):
        return [[c.to_dict() for c in bar] for bar in resolved]
    return [c.to_dict() for c in resolved]


def _slot_label(slot) -> str:
    if isinstance(slot, tuple):
        return ":".join(str(part) for part in slot)
    return str(slot)


# =============================================================================
# PART 3: COMMANDS
# =============================================================================

def parse_slot(text: str, template):
    """
    Parse a --alter slot for the template's shape.

    Raises:
        ValueError: If the text does not fit the template's slot format
    """
    if isinstance(template, FlatTemplate):
        return int(text)

    first, sep, second = text.partition(":")
    if not sep:
        raise ValueError(f"Expected SECTION:INDEX or BAR:INDEX, got '{text}'")
    if isinstance(template, SectionedTemplate):
        return (first, int(second))
    return (int(first), int(second))


def run_chord(ref: ChordReference, args, output_json: bool) -> int:
    entry = ref.search_chord(args.name)
    requests = ref.diagrams_for(entry)

    if output_json:
        print(json.dumps({
            "query": args.name,
            "chord": entry.name if entry else None,
            "diagrams": [r.to_dict() for r in requests],
        }, indent=2))
    elif entry is None:
        print(f"No chord found for '{args.name}'")
    else:
        print(format_chord_result(entry.name, requests))
    return EXIT_OK


def run_suggest(ref: ChordReference, args, output_json: bool) -> int:
    suggestions = ref.suggestions(args.partial)

    if output_json:
        print(json.dumps({"query": args.partial, "suggestions": suggestions}, indent=2))
    elif not suggestions:
        print(f"No suggestions for '{args.partial}'")
    else:
        print("\n".join(suggestions))
    return EXIT_OK


def run_notes(ref: ChordReference, args, output_json: bool) -> int:
    result = ref.search_notes(args.notes)

    if output_json:
        print(json.dumps(result.to_dict(), indent=2))
    elif not result.notes:
        print(f"No valid notes in '{args.notes}'")
    elif not result.found:
        print(f"No chord contains exactly {' '.join(result.notes)}")
    else:
        print(f"Notes:  {' '.join(result.notes)}")
        print(f"Chords: {', '.join(result.chords)}")
    return EXIT_OK


def run_progressions(output_json: bool) -> int:
    categories = progressions_by_category()

    if output_json:
        print(json.dumps({
            cat_id: {
                "name": category["name"],
                "progressions": [
                    {"id": t.id, "name": t.name} for t in category["progressions"]
                ],
            }
            for cat_id, category in categories.items()
        }, indent=2))
        return EXIT_OK

    for category in categories.values():
        print(category["name"])
        for template in category["progressions"]:
            print(f"  {template.id:<20} {template.name}")
    return EXIT_OK


def run_progression(ref: ChordReference, args, output_json: bool, verbose: bool) -> int:
    session = ref.progression_session(args.id, args.key)
    if session is None:
        print(f"Error: unknown progression '{args.id}' (see 'chordref progressions')",
              file=sys.stderr)
        return EXIT_ERROR

    template = session.template
    for alteration in args.alter:
        slot_text, sep, quality = alteration.partition("=")
        try:
            if not sep:
                raise ValueError(f"Expected SLOT=QUALITY, got '{alteration}'")
            slot = parse_slot(slot_text, template)
            session.alter(slot, quality)
        except (KeyError, ValueError) as e:
            print(f"Error: invalid --alter '{alteration}' for {template.id}: {e}",
                  file=sys.stderr)
            return EXIT_ERROR
        if verbose and not output_json:
            choices = alteration_choices(session.default_quality(slot))
            print(f"  Slot {_slot_label(slot)}: {quality} (usual choices: {choices})")

    resolved = session.resolve()
    diagrams = ref.progression_diagrams(resolved)

    if output_json:
        print(json.dumps({
            "id": template.id,
            "name": template.name,
            "key": session.key,
            "overrides": {_slot_label(s): q for s, q in session.overrides.items()},
            "chords": _json_resolution(resolved),
            "unique_chords": [
                {
                    "chord": chord.to_dict(),
                    "diagram": request.to_dict() if request else None,
                }
                for chord, request in diagrams
            ],
        }, indent=2))
        return EXIT_OK

    print(f"{template.name} in {session.key}")
    print()
    for line in format_resolution(template, resolved):
        print(line)
    if any(c.altered for c in flatten_resolution(resolved)):
        print("  (* = altered)")
    print()
    print("Chords:")
    for chord, request in diagrams:
        print(f"  {chord.chord_name}")
        if request is None:
            print("    (no diagram available)")
        else:
            for line in format_diagram(request, indent="    "):
                print(line)
    return EXIT_OK


# =============================================================================
# PART 4: MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Argument list (default: sys.argv[1:])

    Returns:
        Process exit status
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_ERROR

    try:
        config: Dict = load_config(args.config)
        verbose = args.verbose or bool(config.get("verbose"))
        if args.database:
            config["database_path"] = args.database
        if args.right_handed:
            config["left_handed"] = False

        if verbose:
            logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

        if args.command == "progressions":
            return run_progressions(args.json)

        if verbose and not args.json:
            print("--- Step 1: Loading chord database ---")
        ref = ChordReference(config).load()

        if verbose and not args.json:
            print(f"--- Step 2: Running '{args.command}' ---")

        if args.command == "chord":
            return run_chord(ref, args, args.json)
        if args.command == "suggest":
            return run_suggest(ref, args, args.json)
        if args.command == "notes":
            return run_notes(ref, args, args.json)
        return run_progression(ref, args, args.json, verbose)

    except ChordRefError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


# =============================================================================
# SCRIPT EXECUTION
# =============================================================================

if __name__ == "__main__":
    sys.exit(main())
