"""Command-line layer: Typer app, Rich components and diagnostics."""
