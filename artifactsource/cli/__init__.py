"""artifactsource CLI — Typer-based command-line interface.

Provides the ``artifactsource`` command with subcommands for listing,
diffing and copying sources, cloning repositories and sniffing content.

All output uses Rich for formatted terminal display.
"""
