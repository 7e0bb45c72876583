"""
CLI Module

Command-line interface for ccx with rich output. Parses arguments, loads
configuration, wires the session commands and renders their results.
"""

import argparse
import logging
import os
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .. import __version__
from ..core.commands import SessionCommands
from ..core.directory import SessionSummary
from ..core.exceptions import CaptureError, CcxError
from ..core.status import SessionStatus
from ..core.watcher import SessionWatcher
from ..utils.config_loader import ConfigLoader, Settings
from ..utils.logging_config import configure_logging

logger = logging.getLogger(__name__)

NO_SESSIONS_MESSAGE = "No active ccx sessions"


def shorten_path(path: str, home: Optional[str] = None) -> str:
    """Replace a leading home directory with ``~`` for display."""
    home = (home if home is not None else os.environ.get("HOME", "")).rstrip("/")
    if home and (path == home or path.startswith(home + "/")):
        return "~" + path[len(home):]
    return path


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def format_summary(summary: SessionSummary) -> Text:
    """One status line: name, *status*, [title] and working directory."""
    line = Text(summary.name, style="bold")
    if summary.status is not SessionStatus.UNKNOWN:
        style = "green" if summary.status is SessionStatus.DONE else "yellow"
        line.append(f" *{summary.status.value}*", style=style)
    if summary.title:
        line.append(f" [{summary.title}]")
    if summary.working_directory:
        line.append(f" {shorten_path(summary.working_directory)}", style="dim")
    return line


class CcxCLI:
    """
    Command-line interface for managing Claude Code sessions in tmux.

    Commands: start, status, list, stop, attach, send, watch, version.
    """

    def __init__(self,
                 commands: Optional[SessionCommands] = None,
                 watcher: Optional[SessionWatcher] = None,
                 settings: Optional[Settings] = None,
                 console: Optional[Console] = None):
        """
        Initialize the CLI.

        Args:
            commands: Session commands (built from settings when omitted)
            watcher: Session watcher (built from settings when omitted)
            settings: Settings (loaded from the config file when omitted)
            console: Rich console for output
        """
        self.commands = commands
        self.watcher = watcher
        self.settings = settings
        self.console = console or Console()
        self.parser = self._create_argument_parser()

    def error(self, message: str) -> None:
        """Display error message."""
        self.console.print(Text(f"Error: {message}", style="red"))

    def success(self, message: str) -> None:
        """Display success message."""
        self.console.print(Text(message, style="green"))

    def warning(self, message: str) -> None:
        """Display warning message."""
        self.console.print(Text(message, style="yellow"))

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with provided arguments.

        Args:
            args: Command-line arguments (defaults to sys.argv)

        Returns:
            Exit code (0 for success)
        """
        parsed_args = self.parser.parse_args(args)

        if not hasattr(parsed_args, 'func'):
            self.parser.print_help()
            return 1

        try:
            if parsed_args.needs_session_layer:
                self._prepare(parsed_args)
            return parsed_args.func(parsed_args)

        except KeyboardInterrupt:
            self.console.print()
            self.warning("Operation cancelled by user")
            return 130
        except CcxError as e:
            logger.debug("Command failed", exc_info=True)
            self.error(str(e))
            return 1

    def _prepare(self, args) -> None:
        """Load settings, configure logging and build missing components."""
        if self.settings is None:
            loader = ConfigLoader()
            self.settings = loader.load_settings(args.config)
        configure_logging(self.settings.log_level, args.verbose)

        if self.commands is None or self.watcher is None:
            # Imported here to avoid circular imports
            from ..main import create_session_commands, create_watcher

            if self.commands is None:
                self.commands = create_session_commands(self.settings)
            if self.watcher is None:
                self.watcher = create_watcher(self.settings, console=self.console)

    def _create_argument_parser(self) -> argparse.ArgumentParser:
        """Create argument parser with all commands."""
        parser = argparse.ArgumentParser(
            prog="ccx",
            description="Manage Claude Code sessions in tmux",
            epilog="Use 'ccx <command> --help' for command-specific help"
        )

        parser.add_argument(
            "--version",
            action="version",
            version=f"ccx {__version__}"
        )

        parser.add_argument(
            "--verbose", "-v",
            action="count",
            default=0,
            help="Increase log verbosity (use -v or -vv)"
        )

        parser.add_argument(
            "--config",
            type=Path,
            help="Path to a config file (default: ~/.config/ccx/config.yaml)"
        )

        subparsers = parser.add_subparsers(
            title="commands",
            dest="command"
        )

        self._add_session_commands(subparsers)
        self._add_view_commands(subparsers)

        version_parser = subparsers.add_parser("version", help="Print the version")
        version_parser.set_defaults(func=self._cmd_version, needs_session_layer=False)

        return parser

    def _add_session_commands(self, subparsers) -> None:
        """Add lifecycle commands."""
        start_parser = subparsers.add_parser(
            "start",
            help="Start a new Claude Code session with the given prompt"
        )
        start_parser.add_argument("prompt", help="The prompt to send to Claude")
        start_parser.add_argument("--cwd", help="Working directory for the session")
        start_parser.set_defaults(func=self._cmd_start, needs_session_layer=True)

        stop_parser = subparsers.add_parser("stop", help="Stop a specific session")
        stop_parser.add_argument("session", help="The session name to stop")
        stop_parser.set_defaults(func=self._cmd_stop, needs_session_layer=True)

        attach_parser = subparsers.add_parser("attach", help="Attach to an existing session")
        attach_parser.add_argument("session", help="The session name to attach to")
        attach_parser.set_defaults(func=self._cmd_attach, needs_session_layer=True)

        send_parser = subparsers.add_parser("send", help="Send a message to an existing session")
        send_parser.add_argument("session", help="The session name to send to")
        send_parser.add_argument("message", help="The message to send")
        send_parser.set_defaults(func=self._cmd_send, needs_session_layer=True)

    def _add_view_commands(self, subparsers) -> None:
        """Add read-only commands."""
        status_parser = subparsers.add_parser(
            "status",
            help="Show status of sessions (all, or output of one session)"
        )
        status_parser.add_argument("session", nargs="?", help="Session to show output for")
        status_parser.add_argument(
            "--lines",
            type=positive_int,
            help="Number of lines to show (default: 10)"
        )
        status_parser.set_defaults(func=self._cmd_status, needs_session_layer=True)

        list_parser = subparsers.add_parser("list", help="List all sessions")
        list_parser.set_defaults(func=self._cmd_list, needs_session_layer=True)

        watch_parser = subparsers.add_parser("watch", help="Watch a session until it completes")
        watch_parser.add_argument("session", help="The session name to watch")
        watch_parser.add_argument(
            "--interval",
            type=float,
            help="Check interval in seconds (default: 2)"
        )
        watch_parser.set_defaults(func=self._cmd_watch, needs_session_layer=True)

    def _cmd_start(self, args) -> int:
        """Handle start command."""
        session_name = self.commands.start(args.prompt, working_directory=args.cwd)
        self.success(f"Started session: {session_name}")
        self.console.print(f"Attach with: ccx attach {session_name}", markup=False)
        return 0

    def _cmd_status(self, args) -> int:
        """Handle status command."""
        if args.session:
            lines = args.lines if args.lines is not None else self.settings.status_lines
            try:
                output = self.commands.recent_output(args.session, lines)
            except CaptureError as e:
                self.warning(f"Could not capture output: {e}")
                return 0

            for line in output:
                self.console.print(line, markup=False, highlight=False)
            return 0

        summaries = self.commands.summaries()
        if not summaries:
            self.console.print(NO_SESSIONS_MESSAGE)
            return 0

        for summary in summaries:
            self.console.print(format_summary(summary), highlight=False)
        return 0

    def _cmd_list(self, args) -> int:
        """Handle list command."""
        sessions = self.commands.sessions()
        if not sessions:
            self.console.print(NO_SESSIONS_MESSAGE)
            return 0

        table = Table()
        table.add_column("SESSION", style="bold")
        table.add_column("ATTACHED", justify="center")
        for session in sessions:
            table.add_row(session.name, "yes" if session.attached else "no")

        self.console.print(table)
        return 0

    def _cmd_stop(self, args) -> int:
        """Handle stop command."""
        self.commands.stop(args.session)
        self.success(f"Stopped session: {args.session}")
        return 0

    def _cmd_attach(self, args) -> int:
        """Handle attach command. Only returns if the handover did not happen."""
        self.commands.attach(args.session)
        return 0

    def _cmd_send(self, args) -> int:
        """Handle send command."""
        self.commands.send(args.session, args.message)
        self.success(f"Sent message to session: {args.session}")
        return 0

    def _cmd_watch(self, args) -> int:
        """Handle watch command."""
        interval = args.interval if args.interval is not None else self.settings.watch_interval
        self.watcher.watch(args.session, interval=interval)
        return 0

    def _cmd_version(self, args) -> int:
        """Handle version command."""
        self.console.print(f"ccx {__version__}", markup=False)
        return 0
