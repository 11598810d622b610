"""Command-line interface for regionborders.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- One command per artefact (extract, overlay, sdf) plus contour listing (info)
- Progress bars for contour projection
- Verbose/quiet output modes
- Detailed error reporting
"""

from regionborders.cli.app import cli, main

__all__ = ["cli", "main"]
