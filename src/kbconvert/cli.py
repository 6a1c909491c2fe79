#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Command-line interface for kbconvert.

Examples
--------
Export a note to Word, resolving ``![[image]]`` embeds from the vault:
    $ kbconvert export "Meeting Notes.md" --vault ~/notes -o meeting.docx

Import a Word document as a note with extracted images:
    $ kbconvert import report.docx -o ~/notes/imports

Run the cleanup passes over already converted text:
    $ kbconvert cleanup converted.md > cleaned.md

Settings come from ``--config`` or a discovered ``.kbconvert.toml`` /
``.kbconvert.yaml`` / ``.kbconvert.json`` / ``[tool.kbconvert]`` table;
command-line flags override them.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from kbconvert.api import markdown_to_docx, read_docx_file
from kbconvert.cleanup import cleanup_converted_text
from kbconvert.config import KbConvertConfig, load_config
from kbconvert.converters.docx2markdown import docx_to_markdown, save_conversion_result
from kbconvert.exceptions import ConfigError, KbConvertError, ParsingError
from kbconvert.images import VaultImageResolver
from kbconvert.logging_utils import configure_logging

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_USAGE_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the export, import and cleanup commands."""
    from kbconvert import __version__

    parser = argparse.ArgumentParser(
        prog="kbconvert",
        description="Convert markdown notes to styled Word documents and back.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Configuration file (TOML, YAML or JSON)")
    parser.add_argument("--no-config", action="store_true", help="Ignore discovered configuration files")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log records to this file")
    parser.add_argument("--trace", action="store_true", help="Timestamped log records with logger names")

    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Convert a markdown note to DOCX")
    export_parser.add_argument("input", help="Markdown note")
    export_parser.add_argument("-o", "--out", help="Output .docx path (default: next to the note)")
    export_parser.add_argument("--vault", help="Notes directory searched for embedded images")
    export_parser.add_argument(
        "--wiki-links", choices=["keep", "remove", "text"], help="How [[cross-reference]] links are handled"
    )
    export_parser.add_argument("--template", help="DOCX template providing base styles")
    export_parser.add_argument("--keep-toc", action="store_true", help="Render table-of-contents sections")

    import_parser = subparsers.add_parser("import", help="Convert a DOCX document to a markdown note")
    import_parser.add_argument("input", help="DOCX document")
    import_parser.add_argument("-o", "--out", help="Output folder (default: next to the document)")
    import_parser.add_argument("--image-handling", choices=["extract", "embed", "ignore"])
    import_parser.add_argument("--link-format", choices=["wikilink", "markdown-relative", "markdown-absolute"])
    import_parser.add_argument("--assets-location", choices=["subfolder", "same", "custom"])
    import_parser.add_argument("--no-source-callout", action="store_true", help="Do not prepend the source callout")
    import_parser.add_argument("--vault-root", help="Root for markdown-absolute image links")

    cleanup_parser = subparsers.add_parser("cleanup", help="Run the cleanup passes over converted text")
    cleanup_parser.add_argument("input", help="Text file to clean")
    cleanup_parser.add_argument("-o", "--out", help="Write to this file instead of stdout")
    cleanup_parser.add_argument("--no-tables", action="store_true", help="Skip table repair")
    cleanup_parser.add_argument("--no-commands", action="store_true", help="Skip command detection")

    return parser


def _print_summary(message: str) -> None:
    """Print a one-line summary, styled when stdout is a terminal."""
    from rich.console import Console

    console = Console()
    if console.is_terminal:
        console.print(f"[green][OK][/green] {message}")
    else:
        print(message)


def run_export(args: argparse.Namespace, config: KbConvertConfig) -> int:
    source = Path(args.input)
    parser_options = config.markdown
    if args.wiki_links:
        parser_options = parser_options.create_updated(wiki_link_mode=args.wiki_links)

    docx_options = config.docx
    if args.template:
        docx_options = docx_options.create_updated(template_path=args.template)
    if args.keep_toc:
        docx_options = docx_options.create_updated(skip_toc=False)

    vault = args.vault or config.vault
    resolver = VaultImageResolver(vault) if vault else VaultImageResolver(source.parent)

    data = markdown_to_docx(
        source.read_bytes(),
        options=docx_options,
        image_resolver=resolver,
        parser_options=parser_options,
        style_config=config.styles,
    )

    out_path = Path(args.out) if args.out else source.with_suffix(".docx")
    out_path.write_bytes(data)
    _print_summary(f"Exported {source.name} -> {out_path} ({len(data):,} bytes)")
    return EXIT_SUCCESS


def run_import(args: argparse.Namespace, config: KbConvertConfig) -> int:
    import_options = config.importer
    updates = {}
    if args.image_handling:
        updates["image_handling"] = args.image_handling
    if args.link_format:
        updates["image_link_format"] = args.link_format
    if args.assets_location:
        updates["assets_location"] = args.assets_location
    if args.no_source_callout:
        updates["insert_source_callout"] = False
    if updates:
        import_options = import_options.create_updated(**updates)

    data, base_name = read_docx_file(args.input)
    result = docx_to_markdown(data, base_name=base_name, options=import_options, cleanup_options=config.cleanup)

    output_folder = Path(args.out) if args.out else Path(args.input).parent
    note_path = save_conversion_result(result, output_folder, import_options, vault_root=args.vault_root)
    _print_summary(f"Imported {Path(args.input).name} -> {note_path} ({len(result.images)} image(s))")
    return EXIT_SUCCESS


def run_cleanup(args: argparse.Namespace, config: KbConvertConfig) -> int:
    options = config.cleanup
    if args.no_tables:
        options = options.create_updated(repair_tables=False)
    if args.no_commands:
        options = options.create_updated(detect_commands=False)

    raw = Path(args.input).read_bytes()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParsingError(f"{args.input} is not valid UTF-8", original_error=e) from e

    cleaned = cleanup_converted_text(text, options)
    if args.out:
        Path(args.out).write_text(cleaned, encoding="utf-8")
    else:
        sys.stdout.write(cleaned)
    return EXIT_SUCCESS


_COMMANDS = {"export": run_export, "import": run_import, "cleanup": run_cleanup}


def main(args: Optional[list[str]] = None) -> int:
    """Run the CLI and return the process exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    configure_logging(parsed_args.log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    try:
        config = load_config(parsed_args.config, discover=not parsed_args.no_config)
    except ConfigError as e:
        print(f"Error: {e.describe()}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    try:
        return _COMMANDS[parsed_args.command](parsed_args, config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    except KbConvertError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e.describe()}", file=sys.stderr)
        return EXIT_ERROR
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
