"""Command-line interface for the photogrammetric camera toolkit."""

from photocam.cli.arguments import parse_arguments
from photocam.cli.main import main

__all__ = ["main", "parse_arguments"]
