"""Command-line interface."""

from .cli import CcxCLI

__all__ = ['CcxCLI']
