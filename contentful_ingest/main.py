#!/usr/bin/env python3
"""
Contentful ingestion - command line entry point

Runs the plugin once outside a host build: fetches every configured content
type, writes templated files and JSON output below an output directory.
"""

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

import structlog
from rich.console import Console
from rich.table import Table

from .config.loader import load_config_from_file
from .constants import CONSTANTS
from .core.config import ClientConfig
from .core.exceptions import ContentfulError
from .core.plugin import ContentfulPlugin
from .rendering.writers import FileSystemArtifactWriter
from .utils.logging import setup_logging

console = Console()
logger = structlog.get_logger()


async def main_async(
    options: dict[str, Any],
    output_dir: str = CONSTANTS.DEFAULT_OUTPUT_DIR,
    client_config: Optional[ClientConfig] = None,
) -> dict[str, Any]:
    """Run the plugin once and return the shared data it produced."""
    data: dict[str, Any] = {}
    writer = FileSystemArtifactWriter(Path(output_dir))
    plugin = ContentfulPlugin(
        **options, add_data_to=data, client_config=client_config, artifact_writer=writer
    )

    results = await plugin.run_async()
    print_summary(results, writer)
    return data


def print_summary(results: dict[str, list], writer: FileSystemArtifactWriter) -> None:
    """Print entry counts per content type."""
    table = Table(title="Contentful content types")
    table.add_column("Content type", style="bold")
    table.add_column("Entries", justify="right")
    for name, entries in results.items():
        table.add_row(name, str(len(entries)))
    console.print(table)
    if writer.written:
        count = len(writer.written)
        console.print(f"📁 Wrote {count} files to: [bold]{writer.output_dir}[/bold]")


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Fetch Contentful entries and render them to files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s contentful.yaml
  %(prog)s contentful.yaml -o public --verbose

Credentials not present in the file are read from CONTENTFUL_ACCESS_TOKEN
and CONTENTFUL_SPACE_ID.
        """,
    )
    parser.add_argument("config", help="Configuration file (YAML or JSON)")
    parser.add_argument(
        "-o",
        "--output",
        default=CONSTANTS.DEFAULT_OUTPUT_DIR,
        help="Output directory (default: %(default)s)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Read draft content from the Content Preview API (needs a preview token)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")

    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, json_logs=args.json_logs)

    try:
        options, client_config = load_config_from_file(args.config)
    except (OSError, ValueError, ContentfulError) as e:
        logger.error("Failed to load config", path=args.config, error=str(e))
        console.print(f"❌ [red]Failed to load config: {e}[/red]")
        sys.exit(CONSTANTS.EXIT_CODE_ERROR)

    if args.preview:
        client_config = replace(client_config, host=CONSTANTS.PREVIEW_HOST)

    try:
        asyncio.run(main_async(options, output_dir=args.output, client_config=client_config))
    except KeyboardInterrupt:
        console.print("\n[yellow]Run interrupted by user[/yellow]")
        sys.exit(CONSTANTS.EXIT_CODE_KEYBOARD_INTERRUPT)
    except ContentfulError as e:
        logger.error("Contentful run failed", error=str(e), content_type=e.content_type)
        console.print(f"❌ [red]Contentful run failed: {e}[/red]")
        sys.exit(CONSTANTS.EXIT_CODE_ERROR)

    console.print("✅ [green]Contentful run completed successfully![/green]")


if __name__ == "__main__":
    main()
