#!/usr/bin/env python3
"""
Command-line interface for story conversion.

This is the only place that touches files; everything it calls is a pure
text-to-story or story-to-text function.

Usage:
    twine-workshop convert story.twee story.html
    twine-workshop convert story.json story.html --to html
    twine-workshop links story.twee
    twine-workshop validate "Cave 2" "a.b"
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from twine_workshop import config
from twine_workshop.archive import generate_archive
from twine_workshop.detect import parse_file
from twine_workshop.identifiers import validate_passage_name
from twine_workshop.json_backup import generate_json
from twine_workshop.links import build_graph, find_broken_links
from twine_workshop.playable import generate_playable
from twine_workshop.twee import generate_twee

logger = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2

GENERATORS = {
    'archive': generate_archive,
    'twee': generate_twee,
    'json': generate_json,
    'html': generate_playable,
}

# Output extension -> generator; .html means a Twine archive unless --to html
OUTPUT_EXTENSIONS = {
    '.html': 'archive',
    '.htm': 'archive',
    '.twee': 'twee',
    '.tw': 'twee',
    '.json': 'json',
}


def load_story(path: Path):
    """Read and parse a story file; None if it cannot be read or parsed."""
    try:
        content = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: cannot read {path}: {e}", file=sys.stderr)
        return None

    story = parse_file(content, path.name)
    if story is None:
        print(f"Error: {path} is not a recognized story file", file=sys.stderr)
    else:
        logger.debug("Loaded %s: %d passages, start %r", path, len(story.passages), story.start_passage)
    return story


def cmd_convert(args: argparse.Namespace) -> int:
    target = args.to or OUTPUT_EXTENSIONS.get(args.output.suffix.lower())
    if target is None:
        print(f"Error: cannot infer output format from {args.output.name}, use --to", file=sys.stderr)
        return EXIT_ERROR

    story = load_story(args.input)
    if story is None:
        return EXIT_ERROR

    output = GENERATORS[target](story)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(output, encoding='utf-8')

    print(f"✓ Converted {len(story.passages)} passages ({target})", file=sys.stderr)
    print(f"✓ Output: {args.output}", file=sys.stderr)
    return EXIT_SUCCESS


def cmd_links(args: argparse.Namespace) -> int:
    story = load_story(args.input)
    if story is None:
        return EXIT_ERROR

    for name, targets in build_graph(story).items():
        print(f"{name} -> {', '.join(targets) if targets else '(none)'}")

    broken = find_broken_links(story)
    for name, targets in broken.items():
        for target in targets:
            print(f"Broken link in {name!r}: {target!r}", file=sys.stderr)
    return EXIT_VIOLATIONS if broken else EXIT_SUCCESS


def cmd_validate(args: argparse.Namespace) -> int:
    invalid = 0
    for name in args.names:
        reason = validate_passage_name(name)
        if reason:
            invalid += 1
            print(f"✗ {name!r}: {reason}")
        else:
            print(f"✓ {name!r}")
    return EXIT_VIOLATIONS if invalid else EXIT_SUCCESS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='twine-workshop',
        description='Convert stories between Twine archive, Twee, JSON and playable HTML',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0 - Success
  1 - Broken links or invalid names found
  2 - Error occurred
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    convert = subparsers.add_parser('convert', help='Convert a story file to another format')
    convert.add_argument('input', type=Path, help='Story file (.html, .twee, .tw, .json)')
    convert.add_argument('output', type=Path, help='Output file')
    convert.add_argument('--to', choices=sorted(GENERATORS),
                         help='Output format (default: from output extension)')
    convert.set_defaults(func=cmd_convert)

    links = subparsers.add_parser('links', help='Print the passage link graph')
    links.add_argument('input', type=Path, help='Story file')
    links.set_defaults(func=cmd_links)

    validate = subparsers.add_parser('validate', help='Check passage names')
    validate.add_argument('names', nargs='+', help='Passage names to check')
    validate.set_defaults(func=cmd_validate)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI usage."""
    args = build_parser().parse_args(argv)
    config.configure_logging(args.verbose)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
