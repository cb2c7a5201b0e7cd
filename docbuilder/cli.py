"""
Command-line interface for docbuilder.

Usage:
    docbuilder render template.json --format html --output out.html
    docbuilder render template.json --mode instance --data data.json --signatures signatures.json --format pdf
    docbuilder info template.json
    docbuilder validate template.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.markup import escape

from . import api
from .config import RENDER_MODES, RenderOptions
from .exceptions import DocBuilderError
from .models.blocks import SignatureBlock
from .utils.logger import add_file_handler
from .utils.rich_logger import RichLogger, setup_logging
from .utils.validators import validate_document
from .version import __version__

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="docbuilder",
        description="docbuilder - design and render positioned document templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  docbuilder render template.json --format html --output out.html
  docbuilder render template.json --mode instance --data data.json --format pdf
  docbuilder info template.json --json
  docbuilder validate template.json
  docbuilder version
        """,
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Log level (default: WARNING)")
    parser.add_argument("--log-file", help="Also write logs to this file (rotated)")
    parser.add_argument("--plain-log", action="store_true", help="Log as plain text instead of rich output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser("render", help="Render a template to HTML or PDF")
    render_parser.add_argument("input", help="Template JSON file")
    render_parser.add_argument("-f", "--format", choices=["html", "pdf"], default="html",
                               help="Output format (default: html)")
    render_parser.add_argument("-o", "--output",
                               help="Output file path (default: input name with new extension)")
    render_parser.add_argument("-m", "--mode", choices=RENDER_MODES, default="template",
                               help="template (empty placeholders) or instance (filled with data)")
    render_parser.add_argument("-d", "--data", help="Data context JSON file (instance mode)")
    render_parser.add_argument("-s", "--signatures", help="Signature records JSON file (instance mode)")
    render_parser.add_argument("--scale", type=float, default=1.0, help="HTML scale factor (default: 1.0)")
    render_parser.add_argument("--grid", action="store_true", help="Draw the layout grid (HTML)")
    render_parser.add_argument("--page-prefix", default="", help='Text before the page stamp, e.g. "Page "')

    info_parser = subparsers.add_parser("info", help="Show template information")
    info_parser.add_argument("input", help="Template JSON file")
    info_parser.add_argument("--json", action="store_true", help="Output as JSON")

    validate_parser = subparsers.add_parser("validate", help="Check a template for problems")
    validate_parser.add_argument("input", help="Template JSON file")

    subparsers.add_parser("version", help="Show version information")
    return parser


def cmd_render(args, reporter: RichLogger) -> int:
    """Handle render command."""
    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else input_path.with_suffix(f".{args.format}")

    document = api.load_document(input_path)
    data = api.load_data(args.data)
    signatures = api.load_signatures(args.signatures)
    options = RenderOptions(mode=args.mode, scale=args.scale, show_grid=args.grid,
                            page_number_prefix=args.page_prefix)

    if args.format == "pdf":
        api.render_pdf(document, output_path, data=data, signatures=signatures, options=options)
    else:
        api.render_html(document, data=data, signatures=signatures, options=options, output=output_path)

    reporter.success(escape(f"Saved: {output_path}"))
    return 0


def document_info(document) -> dict:
    blocks = [block for _, block in document.iter_blocks()]
    kinds: dict = {}
    for block in blocks:
        kinds[block.kind] = kinds.get(block.kind, 0) + 1
    settings = document.page_settings
    return {
        "title": document.title,
        "orientation": settings.orientation,
        "pages": len(document.pages),
        "blocks": len(blocks),
        "signature_blocks": sum(isinstance(block, SignatureBlock) for block in blocks),
        "block_types": dict(sorted(kinds.items())),
        "margins_mm": [settings.margin_top, settings.margin_right, settings.margin_bottom, settings.margin_left],
    }


def cmd_info(args, reporter: RichLogger) -> int:
    """Handle info command."""
    info = document_info(api.load_document(args.input))
    if args.json:
        print(json.dumps(info, indent=2, ensure_ascii=False))
    else:
        reporter.table(f"📄 {args.input}", info)
    return 0


def _describe(entry: dict) -> str:
    context = ", ".join(f"{key}={value}" for key, value in entry.get("context", {}).items())
    return escape(f"{entry['message']} ({context})" if context else entry["message"])


def cmd_validate(args, reporter: RichLogger) -> int:
    """Handle validate command."""
    validators = validate_document(api.load_document(args.input))
    for entry in validators.errors:
        reporter.failure(_describe(entry))
    for entry in validators.warnings:
        reporter.console.print(f"[yellow]! {_describe(entry)}[/yellow]")
    if validators.errors:
        return 1
    reporter.success(escape(f"{args.input} is valid"))
    return 0


def cmd_version(args=None, reporter: Optional[RichLogger] = None) -> int:
    """Handle version command."""
    print(f"docbuilder v{__version__}")
    return 0


COMMANDS = {
    "render": cmd_render,
    "info": cmd_info,
    "validate": cmd_validate,
    "version": cmd_version,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level, use_rich=not args.plain_log)
    if args.log_file:
        add_file_handler(logging.getLogger(), args.log_file, args.log_level)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    reporter = RichLogger()
    try:
        return handler(args, reporter)
    except DocBuilderError as e:
        logger.error(str(e))
        reporter.failure(escape(str(e)))
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
