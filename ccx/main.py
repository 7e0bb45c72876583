"""
Main entry point for ccx.

Wires settings into the tmux gateway, session commands and watcher, and
exposes the ``ccx`` console script.
"""

import sys
from typing import List, Optional

from rich.console import Console

from .cli.cli import CcxCLI
from .core.commands import SessionCommands
from .core.directory import SessionDirectory
from .core.watcher import SessionWatcher
from .tmux.gateway import TmuxGateway
from .utils.config_loader import Settings


def create_gateway(settings: Settings) -> TmuxGateway:
    """Create a tmux gateway from settings."""
    return TmuxGateway(
        tmux_binary=settings.tmux_binary,
        command_timeout=settings.command_timeout,
        send_enter_delay=settings.send_enter_delay
    )


def create_session_commands(settings: Settings,
                            gateway: Optional[TmuxGateway] = None) -> SessionCommands:
    """
    Create fully wired session commands.

    Args:
        settings: Validated settings
        gateway: Optional gateway to share (created from settings if omitted)

    Returns:
        SessionCommands: Commands bound to a gateway and session directory
    """
    gateway = gateway or create_gateway(settings)
    directory = SessionDirectory(gateway, prefix=settings.session_prefix)
    return SessionCommands(
        gateway,
        directory=directory,
        prefix=settings.session_prefix,
        agent_command=settings.agent_command
    )


def create_watcher(settings: Settings,
                   gateway: Optional[TmuxGateway] = None,
                   console: Optional[Console] = None) -> SessionWatcher:
    """Create a session watcher from settings."""
    return SessionWatcher(
        gateway or create_gateway(settings),
        console=console,
        capture_lines=settings.watch_capture_lines,
        tail_lines=settings.watch_tail_lines
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Console script entry point."""
    sys.exit(CcxCLI().run(argv))


if __name__ == "__main__":
    main()
