"""
Logging Configuration Module

Diagnostic logging for ccx goes to stderr so it never mixes with command
output on stdout.
"""

import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_VERBOSITY_STEPS = [logging.WARNING, logging.INFO, logging.DEBUG]


def resolve_log_level(level_name: str = "WARNING", verbose: int = 0) -> int:
    """
    Combine the configured level with -v flags.

    Each -v lowers the threshold one step, down to DEBUG.
    """
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.WARNING

    if verbose > 0:
        step = _VERBOSITY_STEPS[min(verbose, len(_VERBOSITY_STEPS) - 1)]
        level = min(level, step)
    return level


def configure_logging(level_name: str = "WARNING", verbose: int = 0) -> int:
    """Configure root logging and return the effective level."""
    level = resolve_log_level(level_name, verbose)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True
    )
    return level
