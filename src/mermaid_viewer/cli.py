#!/usr/bin/env python3
"""
Mermaid Diagram Extraction Tool

Extracts Mermaid diagram blocks from a Markdown file into separate .mmd
files with a JSON manifest, or prints them as JSON.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Dict, Any, Optional

from .core.extractor import DiagramBlockExtractor, DiagramRecord
from .core.validator import MermaidValidator
from .utils.config import Config


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Extract Mermaid diagrams from Markdown files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mermaid-extract --input README.md --output ./diagrams/
  mermaid-extract README.md ./diagrams/
  mermaid-extract README.md --json --validate
        """
    )

    parser.add_argument(
        'input_file',
        nargs='?',
        help='Input Markdown file path'
    )

    parser.add_argument(
        'output_dir',
        nargs='?',
        help='Output directory path'
    )

    parser.add_argument(
        '--input', '-i',
        dest='input_file_flag',
        help='Input Markdown file path (alternative to positional argument)'
    )

    parser.add_argument(
        '--output', '-o',
        dest='output_dir_flag',
        help='Output directory path (alternative to positional argument)'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Print diagrams as JSON instead of writing files'
    )

    parser.add_argument(
        '--validate',
        action='store_true',
        help='Validate each diagram and include the results'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    return parser.parse_args(argv)


def validate_arguments(args: argparse.Namespace) -> tuple[Path, Optional[Path]]:
    """Validate and normalize arguments."""
    input_file = args.input_file or args.input_file_flag
    if not input_file:
        print("Error: Input file is required", file=sys.stderr)
        sys.exit(1)

    input_path = Path(input_file)
    if not input_path.exists():
        print(f"Error: Input file does not exist: {input_path}", file=sys.stderr)
        sys.exit(1)

    output_dir = args.output_dir or args.output_dir_flag
    if not output_dir:
        if args.json:
            return input_path, None
        print("Error: Output directory is required (or use --json)", file=sys.stderr)
        sys.exit(1)

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    return input_path, output_path


def load_diagrams(input_path: Path, extractor: DiagramBlockExtractor) -> List[DiagramRecord]:
    """Read diagrams from a Markdown file, or a whole .mmd file as one diagram."""
    text = input_path.read_text(encoding='utf-8')

    if input_path.suffix.lower() in Config.MERMAID_EXTENSIONS:
        if not text.strip():
            return []
        return [DiagramRecord(
            content=text.strip(),
            index=0,
            title=input_path.stem,
            start_line=0,
            end_line=len(text.split('\n')) - 1,
            raw_block=text
        )]

    return extractor.extract(text)


def write_diagrams(diagrams: List[DiagramRecord], input_path: Path, output_path: Path,
                   validations: Dict[int, Dict[str, Any]], verbose: bool = False) -> Path:
    """Write one file per diagram plus the manifest; return the manifest path."""
    base = input_path.stem.lower()
    entries = []

    for diagram in diagrams:
        filename = f"{base}_{diagram.index + 1:02d}{Config.OUTPUT_EXTENSION}"
        (output_path / filename).write_text(diagram.content + "\n", encoding='utf-8')

        entry = {
            "index": diagram.index,
            "title": diagram.title,
            "file": filename,
            "startLine": diagram.start_line,
            "endLine": diagram.end_line
        }
        if diagram.index in validations:
            entry["validation"] = validations[diagram.index]
        entries.append(entry)

        if verbose:
            print(f"  [{diagram.index}] {diagram.title} -> {filename} "
                  f"(lines {diagram.start_line}-{diagram.end_line})")

    manifest = {
        "original_file": input_path.name,
        "diagrams": entries,
        "processing_info": {
            "total_diagrams": len(diagrams),
            "config": Config.to_dict()
        }
    }

    manifest_path = output_path / Config.MANIFEST_NAME
    with open(manifest_path, 'w', encoding='utf-8') as f:
        json.dump(manifest, f, indent=2)

    return manifest_path


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    args = parse_arguments(argv)
    input_path, output_path = validate_arguments(args)

    if args.verbose:
        print(f"Input file: {input_path}")
        print(f"Output directory: {output_path}")
        print(f"Configuration: {Config.to_dict()}")

    extractor = DiagramBlockExtractor()
    validator = MermaidValidator(extractor=extractor)

    try:
        diagrams = load_diagrams(input_path, extractor)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading {input_path}: {e}", file=sys.stderr)
        sys.exit(1)

    validations = {}
    if args.validate:
        for diagram in diagrams:
            validations[diagram.index] = validator.validate(diagram.content).to_dict()

    if args.json:
        payload = []
        for diagram in diagrams:
            entry = diagram.to_dict()
            if diagram.index in validations:
                entry["validation"] = validations[diagram.index]
            payload.append(entry)
        print(json.dumps(payload, indent=2))
        return

    if args.verbose:
        print(f"Found {len(diagrams)} diagram(s)")

    manifest_path = write_diagrams(diagrams, input_path, output_path, validations, verbose=args.verbose)

    invalid = [index for index, result in validations.items() if not result["isValid"]]
    if invalid:
        print(f"Warning: {len(invalid)} diagram(s) failed validation: {invalid}", file=sys.stderr)

    print(f"Extracted {len(diagrams)} diagram(s) to {output_path}")
    if args.verbose:
        print(f"Manifest: {manifest_path}")


if __name__ == "__main__":
    main()
