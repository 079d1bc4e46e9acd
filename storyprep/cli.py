"""Command-line interface for the story import pipeline."""

import argparse
import logging
import sys
from pathlib import Path

from .config import Config
from .maintenance import (
    check_transliterations,
    load_sentence_table,
    retransliterate_table,
)
from .pipeline import StoryImportPipeline, build_transliterator, write_sentence_csv
from .transliteration import RulesConfigError

COMMANDS = ("import", "transliterate", "check")
MAX_REPORTED_ISSUES = 50


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Split Devanagari stories into sentences and transliterate them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Import one story
  storyprep import --input story1.txt --title "पाव वाट"

  # Import every story listed in a config file, preview only
  storyprep import --config stories.yaml --dry-run

  # Recompute transliterations for an exported sentence table
  storyprep transliterate --table sentences.csv --all --checkpoint-file ckpt.json

  # Report transliterations that still contain Devanagari
  storyprep check --table sentences.csv
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    import_parser = subparsers.add_parser("import", help="Segment and transliterate stories")
    setup_import_parser(import_parser)

    translit_parser = subparsers.add_parser(
        "transliterate", help="Recompute transliterations of existing sentences"
    )
    setup_transliterate_parser(translit_parser)

    check_parser = subparsers.add_parser(
        "check", help="Report transliterations containing Devanagari"
    )
    setup_check_parser(check_parser)

    # If no command specified, treat as import command
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or (argv[0] not in COMMANDS and argv[0] not in ("-h", "--help")):
        argv.insert(0, "import")

    return parser.parse_args(argv)


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--rules",
        type=Path,
        help="Path to transliteration rules file (JSON or YAML)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )


def setup_import_parser(parser: argparse.ArgumentParser) -> None:
    """Setup arguments for import command."""
    add_common_arguments(parser)
    parser.add_argument(
        "--input",
        "-f",
        type=Path,
        help="Path to story .txt file",
    )
    parser.add_argument(
        "--title",
        "-t",
        type=str,
        help="Story title (default: file name)",
    )
    parser.add_argument(
        "--language",
        "-l",
        type=str,
        help="Story language (default: konkani)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Output directory for preview files",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview the first sentences of each story without writing files",
    )
    parser.add_argument(
        "--no-json",
        action="store_true",
        help="Skip writing the preview JSON",
    )
    parser.add_argument(
        "--no-csv",
        action="store_true",
        help="Skip writing the sentence CSV",
    )
    parser.add_argument(
        "--no-transliteration",
        action="store_true",
        help="Only segment; leave transliterations empty",
    )


def setup_transliterate_parser(parser: argparse.ArgumentParser) -> None:
    """Setup arguments for transliterate command."""
    add_common_arguments(parser)
    parser.add_argument(
        "--table",
        type=Path,
        required=True,
        help="CSV of sentences with id and text_source columns",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Where to write the updated table (default: overwrite --table)",
    )
    parser.add_argument(
        "--limit",
        "-l",
        type=int,
        help="Limit number of rows to process (0 = all, default: 5)",
    )
    parser.add_argument(
        "--batch-size",
        "-b",
        type=int,
        help="Batch size for processing rows (default: 100)",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Process all rows (alias for --limit 0)",
    )
    parser.add_argument(
        "--start-id",
        type=int,
        help="Start processing from id > start-id (default: 0)",
    )
    parser.add_argument(
        "--checkpoint-file",
        type=Path,
        help="Write progress checkpoint to this file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Do not write the updated table; just report",
    )


def setup_check_parser(parser: argparse.ArgumentParser) -> None:
    """Setup arguments for check command."""
    parser.add_argument(
        "--table",
        type=Path,
        required=True,
        help="CSV of sentences with id, text_source and text_transliterated columns",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )


def build_config(args: argparse.Namespace) -> Config:
    """Build configuration from arguments."""
    # Start with config file if provided
    if getattr(args, "config", None):
        config = Config.from_yaml(args.config)
    else:
        config = Config()

    if getattr(args, "rules", None):
        config.transliteration.rules_file = args.rules

    # Import overrides
    if getattr(args, "input", None):
        config.input_file = args.input
        config.stories = []
    if getattr(args, "title", None):
        config.title = args.title
    if getattr(args, "language", None):
        config.language = args.language
    if getattr(args, "output", None) and args.command == "import":
        config.output.output_dir = args.output
    if getattr(args, "no_json", False):
        config.output.save_preview_json = False
    if getattr(args, "no_csv", False):
        config.output.save_csv = False
    if getattr(args, "no_transliteration", False):
        config.transliteration.enabled = False

    # Maintenance overrides
    if getattr(args, "limit", None) is not None:
        config.maintenance.limit = args.limit
    if getattr(args, "all", False):
        config.maintenance.limit = 0
    if getattr(args, "batch_size", None) is not None:
        config.maintenance.batch_size = args.batch_size
    if getattr(args, "start_id", None) is not None:
        config.maintenance.start_id = args.start_id
    if getattr(args, "checkpoint_file", None):
        config.maintenance.checkpoint_file = args.checkpoint_file
    if getattr(args, "dry_run", False):
        config.maintenance.dry_run = True

    return config


def handle_import(args: argparse.Namespace) -> int:
    """Handle import command."""
    try:
        config = build_config(args)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not config.story_entries():
        print("Error: Input file is required (use --input or --config)", file=sys.stderr)
        return 1

    try:
        pipeline = StoryImportPipeline(config)
        results = pipeline.run(dry_run=args.dry_run)
    except FileNotFoundError as e:
        print(f"Error: File not found - {e}", file=sys.stderr)
        return 1
    except RulesConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logging.exception("Import failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for result in results:
        print(f"{result.metadata.title}: {result.count} sentences")
    return 0


def handle_transliterate(args: argparse.Namespace) -> int:
    """Handle transliterate command."""
    try:
        config = build_config(args)
        transliterator = build_transliterator(config)
        df = load_sentence_table(args.table)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    opts = config.maintenance
    logging.info(
        "Starting transliteration with options: limit=%d batch_size=%d start_id=%d "
        "dry_run=%s checkpoint_file=%s",
        opts.limit,
        opts.batch_size,
        opts.start_id,
        opts.dry_run,
        opts.checkpoint_file,
    )

    try:
        report = retransliterate_table(
            df,
            transliterator,
            limit=opts.limit,
            batch_size=opts.batch_size,
            start_id=opts.start_id,
            dry_run=opts.dry_run,
            checkpoint_file=opts.checkpoint_file,
        )
    except Exception as e:
        logging.exception("Transliteration failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not opts.dry_run and (report.updated or args.output):
        write_sentence_csv(df.to_dict("records"), args.output or args.table)

    verb = "Would update" if opts.dry_run else "Updated"
    print(f"{verb} {report.updated} of {report.total_processed} rows (last id {report.last_id})")
    return 0


def handle_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    try:
        df = load_sentence_table(args.table)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    issues = check_transliterations(df)
    if not issues:
        print("All transliterations look clean (no Devanagari code points found).")
        return 0

    print(
        f"Found {len(issues)} entries with Devanagari code points in the transliteration:",
        file=sys.stderr,
    )
    for issue in issues[:MAX_REPORTED_ISSUES]:
        print(f"ID {issue.sentence_id}: {issue.text_source} || {issue.text_transliterated}")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(getattr(args, "verbose", False))

    if args.command == "transliterate":
        return handle_transliterate(args)
    elif args.command == "check":
        return handle_check(args)
    else:
        return handle_import(args)


if __name__ == "__main__":
    sys.exit(main())
