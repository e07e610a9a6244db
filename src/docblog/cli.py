"""Command-line interface for docblog."""

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from . import __version__
from .core.orchestrator import BatchOrchestrator
from .errors import StateFileError
from .logging_config import setup_logging
from .models.config import DocblogConfig
from .models.events import EventType

# Environment variables consulted for credentials missing from the config file
ENV_CREDENTIALS = {
    ("assets", "cloud_name"): "CLOUDINARY_CLOUD_NAME",
    ("assets", "api_key"): "CLOUDINARY_API_KEY",
    ("assets", "api_secret"): "CLOUDINARY_API_SECRET",
    ("refine", "api_key"): "OPENAI_API_KEY",
}


def parse_doc_ids(value: Optional[str]) -> Optional[list[str]]:
    """
    Split the positional argument into document ids.

    Returns None when no argument was given (tracked mode).

    Examples:
        >>> parse_doc_ids("abc")
        ['abc']
        >>> parse_doc_ids(" a, b ,,c ")
        ['a', 'b', 'c']
    """
    if value is None:
        return None
    return [doc_id.strip() for doc_id in value.split(",") if doc_id.strip()]


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="docblog",
        description="Convert Google Docs into frontmatter Markdown posts for a static blog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert every id in the pending list and move successes to the completed list
  docblog

  # Convert one document (state files untouched)
  docblog 1AbCdEf

  # Convert several documents
  docblog 1AbCdEf,2GhIjKl -o ./blog/posts

  # Use a config file and skip the refinement pass
  docblog --config docblog.yaml --no-refine
        """,
    )

    parser.add_argument(
        "doc_ids",
        nargs="?",
        help="Document id or comma-separated ids; omit to convert the pending list",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML configuration file",
    )

    # Output
    parser.add_argument(
        "--output-dir",
        "-o",
        type=Path,
        default=None,
        help="Output directory (default: ./posts)",
    )
    parser.add_argument(
        "--default-image",
        type=str,
        default=None,
        metavar="PATH",
        help="Cover image used when no image could be relocated",
    )

    # State files
    state_group = parser.add_argument_group("state files")
    state_group.add_argument(
        "--pending-file",
        type=Path,
        default=None,
        metavar="FILE",
        help="JSON array of ids to convert (default: unConvertDocIds.json)",
    )
    state_group.add_argument(
        "--completed-file",
        type=Path,
        default=None,
        metavar="FILE",
        help="JSON array of converted ids (default: convertedDocIds.json)",
    )

    # Processing
    processing_group = parser.add_argument_group("processing")
    processing_group.add_argument(
        "--no-refine",
        action="store_true",
        help="Skip the refinement pass",
    )
    processing_group.add_argument(
        "--debug-html-dir",
        type=Path,
        default=None,
        metavar="DIR",
        help="Save each raw export as <DIR>/<id>.html",
    )

    # Output control
    output_group = parser.add_argument_group("output control")
    output_group.add_argument(
        "--dry-run",
        action="store_true",
        help="List the documents that would be converted",
    )
    output_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    output_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress output",
    )

    return parser


def build_config(args: argparse.Namespace) -> DocblogConfig:
    """Merge config file, environment credentials and CLI flags."""
    data: dict = {}
    if args.config:
        data = DocblogConfig.from_yaml_file(args.config).model_dump(exclude_none=True)

    for (section, key), env_name in ENV_CREDENTIALS.items():
        value = os.environ.get(env_name)
        if value and not data.get(section, {}).get(key):
            data.setdefault(section, {})[key] = value

    if args.output_dir:
        data.setdefault("output", {})["directory"] = args.output_dir
    if args.default_image:
        data.setdefault("assets", {})["default_image"] = args.default_image
    if args.pending_file:
        data.setdefault("state", {})["pending_file"] = args.pending_file
    if args.completed_file:
        data.setdefault("state", {})["completed_file"] = args.completed_file
    if args.no_refine:
        data.setdefault("refine", {})["enabled"] = False
    if args.debug_html_dir:
        data.setdefault("source", {})["debug_html_dir"] = args.debug_html_dir
    if args.dry_run:
        data["dry_run"] = True

    if args.verbose:
        data["log_level"] = "DEBUG"
    elif args.quiet:
        data["log_level"] = "ERROR"

    return DocblogConfig.model_validate(data)


def run_batch(args: argparse.Namespace) -> int:
    """Run the orchestrator with given arguments."""
    console = Console()

    try:
        config = build_config(args)
    except (OSError, ValueError, ValidationError, yaml.YAMLError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    setup_logging(
        level=config.log_level,
        log_file=str(config.log_file) if config.log_file else None,
    )

    doc_ids = parse_doc_ids(args.doc_ids)
    if doc_ids is not None and not doc_ids:
        console.print("[red]Error:[/red] No document ids given")
        return 1

    async def run() -> int:
        if not args.quiet:
            console.print(f"[bold blue]docblog[/bold blue] v{__version__}")
            if doc_ids is None:
                console.print(f"Pending list: {config.state.pending_file}")
            console.print(f"Output: {config.output.directory}")
            console.print()

        try:
            async with BatchOrchestrator(config) as orchestrator:
                if args.quiet:
                    async for _ in orchestrator.run(doc_ids):
                        pass
                else:
                    with Progress(
                        SpinnerColumn(),
                        TextColumn("[progress.description]{task.description}"),
                        console=console,
                        transient=True,
                    ) as progress:
                        task = progress.add_task("Starting...", total=None)

                        async for event in orchestrator.run(doc_ids):
                            if event.type == EventType.STARTED:
                                progress.update(task, description=f"[cyan]{event.message}")
                            elif event.type == EventType.DOCUMENT_STARTED:
                                progress.update(
                                    task,
                                    description=f"[cyan]Converting {event.current}/{event.total}: {event.doc_id}",
                                )
                            elif event.type == EventType.DOCUMENT_SKIPPED:
                                console.print(f"[yellow]{event.message}[/yellow]")
                            elif event.type == EventType.IMAGE_FAILED:
                                console.print(f"[yellow]Image kept:[/yellow] {event.image_url} - {event.error}")
                            elif event.type == EventType.DOCUMENT_SAVED:
                                console.print(f"[green]Saved:[/green] {event.output_path}")
                            elif event.type == EventType.DOCUMENT_FAILED:
                                console.print(f"[red]Failed:[/red] {event.doc_id} - {event.error}")
                            elif event.type == EventType.COMPLETED:
                                progress.update(task, description=f"[green]{event.message}")

                stats = orchestrator.stats
                if not args.quiet:
                    console.print()
                    console.print("[bold]Results:[/bold]")
                    console.print(f"  Documents converted: {stats.documents_converted}")
                    console.print(f"  Documents failed: {stats.documents_failed}")
                    console.print(f"  Images relocated: {stats.images_uploaded}")
                    console.print(f"  Images kept at source: {stats.images_failed}")
                    console.print(f"  Documents refined: {stats.documents_refined}")
                    if doc_ids is None and not config.dry_run:
                        console.print(f"  Still pending: {len(orchestrator.state.pending)}")
                    console.print(f"  Duration: {stats.duration_seconds:.1f}s")

                return 0 if stats.documents_failed == 0 else 1

        except StateFileError as e:
            console.print(f"[red]State error:[/red] {e}")
            return 1
        except Exception as e:
            console.print(f"[red]Error:[/red] {e}")
            if args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    return asyncio.run(run())


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    # .env.local wins over .env; neither overrides the real environment
    load_dotenv(".env.local")
    load_dotenv(".env")

    parser = create_parser()
    args = parser.parse_args(argv)
    return run_batch(args)


if __name__ == "__main__":
    sys.exit(main())
