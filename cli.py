#!/usr/bin/env python3
"""
LESS Tokens CLI

Scans LESS stylesheet trees, resolves their imports, merges the variables
they declare and exports them as a Tailwind CSS theme configuration.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from exporters import to_ascii, to_css, to_json, to_tailwind_config, to_theme
from pipeline.config import Settings, load_settings
from pipeline.errors import ConfigError, StartupError
from pipeline.log import configure_logging, get_logger
from pipeline.runner import RunReport, run_pipeline
from storage import open_store
from storage.base import StyleStore


logger = get_logger("cli")

EXPORT_NAME = "main-config"


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="less-tokens",
        description="Convert LESS variables into a Tailwind CSS theme configuration.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  less-tokens                          # Scan LESS_SCAN_PATHS (default ./less,./styles)
  less-tokens ./styles                 # Scan one directory
  less-tokens ./styles -o theme.js     # Write the config somewhere else
  less-tokens ./styles --stdout -f json    # Print the run report as JSON
  less-tokens ./styles --stdout -f tree    # Print the import hierarchy
  less-tokens ./styles --db less.sqlite    # Persist results in SQLite
        """,
    )

    # Positional arguments
    parser.add_argument(
        "roots",
        nargs="*",
        help="Directories to scan (default: LESS_SCAN_PATHS)",
    )

    # Output options
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Token configuration file (default: <output-dir>/tailwind.config.js)",
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for generated files (default: OUTPUT_DIR or ./output)",
    )

    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the selected format to stdout instead of writing files",
    )

    parser.add_argument(
        "-f", "--format",
        choices=["tailwind", "json", "css", "tree"],
        default="tailwind",
        help="Format printed with --stdout (default: tailwind)",
    )

    parser.add_argument(
        "--ascii-style",
        choices=["tree", "ascii"],
        default="tree",
        help="Tree output style: 'tree' (Unicode) or 'ascii' (pure ASCII)",
    )

    # Scanning options
    parser.add_argument(
        "--exclude-dir",
        nargs="+",
        default=None,
        help="Additional directory names to exclude",
    )

    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum directory depth to scan",
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of threads reading files (default: LESS_READ_WORKERS or 1)",
    )

    # Storage and logging
    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="SQLite database path (default: LESS_DATABASE_PATH, else in-memory)",
    )

    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write the log to this file",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Increase log verbosity for troubleshooting",
    )

    return parser.parse_args(args)


def build_settings(parsed: argparse.Namespace, settings: Settings) -> Settings:
    """Apply command line overrides to environment settings."""
    if parsed.workers is not None and parsed.workers < 1:
        raise ConfigError("--workers must be at least 1")
    return settings.override(
        scan_paths=[Path(r) for r in parsed.roots] or None,
        output_dir=Path(parsed.output_dir) if parsed.output_dir else None,
        config_path=Path(parsed.output) if parsed.output else None,
        database_path=Path(parsed.db) if parsed.db else None,
        read_workers=parsed.workers,
        exclude_dirs=parsed.exclude_dir,
        max_depth=parsed.max_depth,
    )


def render(report: RunReport, fmt: str, ascii_style: str = "tree") -> str:
    """Render a report in one of the CLI formats."""
    if fmt == "json":
        return to_json(report)
    if fmt == "css":
        return to_css(report.groups)
    if fmt == "tree":
        return to_ascii(report.graph, style=ascii_style)
    return to_tailwind_config(report.groups)


def write_outputs(report: RunReport, settings: Settings, store: StyleStore) -> None:
    """Write the token configuration and the generated stylesheet, and record the export."""
    config_text = to_tailwind_config(report.groups)
    css_text = to_css(report.groups)
    store.store_export(EXPORT_NAME, to_theme(report.groups), css_text)

    config_path = settings.tailwind_config_path
    css_path = settings.css_path
    for path in (config_path, css_path):
        path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(config_text, encoding="utf-8")
    css_path.write_text(css_text, encoding="utf-8")
    logger.info("Exported Tailwind configuration to: %s", config_path)
    logger.info("Exported token stylesheet to: %s", css_path)


def main(args=None, environ=None):
    """Main entry point."""
    parsed = parse_args(args)

    store: Optional[StyleStore] = None
    try:
        settings = build_settings(parsed, load_settings(environ))
        configure_logging(
            settings.log_level,
            verbose=parsed.verbose,
            log_file=Path(parsed.log_file) if parsed.log_file else None,
        )
        logger.info("Starting LESS to Tailwind conversion...")

        store = open_store(settings.database_path)
        report = run_pipeline(settings, store)

        if parsed.stdout:
            print(render(report, parsed.format, parsed.ascii_style))
        else:
            write_outputs(report, settings, store)
    except StartupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1
    finally:
        if store is not None:
            store.close()

    print(f"Summary: {report.summary()}", file=sys.stderr)
    for issue in report.issues:
        print(f"  {issue}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
