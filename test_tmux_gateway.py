#!/usr/bin/env python3
"""
Tmux Gateway Tests for ccx
Tests the tmux command line proxy with subprocess mocked out
"""

import subprocess
import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

sys.path.insert(0, str(Path(__file__).parent))

from ccx.core.exceptions import CaptureError, GatewayError
from ccx.tmux.gateway import TmuxGateway, TmuxSessionInfo


def completed(returncode=0, stdout="", stderr=""):
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


class GatewayTestCase(unittest.TestCase):

    def setUp(self):
        patcher = patch("ccx.tmux.gateway.subprocess.run")
        self.mock_run = patcher.start()
        self.addCleanup(patcher.stop)
        self.mock_run.return_value = completed()
        self.gateway = TmuxGateway(send_enter_delay=0)

    def argv(self, index=-1):
        return self.mock_run.call_args_list[index][0][0]


class TestRunTmuxCommand(GatewayTestCase):

    def test_uses_timeout_and_text_mode(self):
        self.gateway.session_exists("ccx-1")
        kwargs = self.mock_run.call_args[1]
        self.assertEqual(kwargs["timeout"], 10.0)
        self.assertTrue(kwargs["text"])
        self.assertTrue(kwargs["capture_output"])
        self.assertFalse(kwargs["check"])

    def test_missing_binary_raises_gateway_error(self):
        self.mock_run.side_effect = FileNotFoundError("tmux")
        with self.assertRaises(GatewayError):
            self.gateway.kill_session("ccx-1")

    def test_timeout_raises_gateway_error(self):
        self.mock_run.side_effect = subprocess.TimeoutExpired(cmd="tmux", timeout=10)
        with self.assertRaises(GatewayError):
            self.gateway.capture_pane("ccx-1", 20)

    def test_custom_binary(self):
        gateway = TmuxGateway(tmux_binary="/opt/bin/tmux")
        gateway.session_exists("ccx-1")
        self.assertEqual(self.argv()[0], "/opt/bin/tmux")


class TestCreateSession(GatewayTestCase):

    def test_creates_detached_session_and_enables_rename(self):
        self.gateway.create_session("ccx-1", "claude 'hi'")

        self.assertEqual(self.argv(0), ["tmux", "new-session", "-d", "-s", "ccx-1", "claude 'hi'"])
        self.assertEqual(
            self.argv(1), ["tmux", "set-option", "-w", "-t", "=ccx-1:", "allow-rename", "on"]
        )

    def test_allow_rename_targets_a_window(self):
        # A bare "=ccx-1" names only the session and tmux rejects it for window options
        self.gateway.create_session("ccx-1", "claude 'hi'")
        rename = self.argv(1)
        target = rename[rename.index("-t") + 1]
        self.assertTrue(target.endswith(":"))
        self.assertIn("-w", rename)

    def test_working_directory(self):
        self.gateway.create_session("ccx-1", "claude 'hi'", working_directory="/srv/app")
        self.assertEqual(
            self.argv(0),
            ["tmux", "new-session", "-d", "-s", "ccx-1", "-c", "/srv/app", "claude 'hi'"]
        )

    def test_failure_raises(self):
        self.mock_run.return_value = completed(1, stderr="duplicate session: ccx-1")
        with self.assertRaises(GatewayError) as ctx:
            self.gateway.create_session("ccx-1", "claude 'hi'")
        self.assertIn("duplicate session", str(ctx.exception))
        self.assertEqual(self.mock_run.call_count, 1)

    def test_rename_failure_is_not_fatal(self):
        self.mock_run.side_effect = [completed(0), completed(1, stderr="no such option")]
        self.gateway.create_session("ccx-1", "claude 'hi'")
        self.assertEqual(self.mock_run.call_count, 2)


class TestListSessions(GatewayTestCase):

    def test_parses_all_sessions_without_filtering(self):
        self.mock_run.return_value = completed(stdout="ccx-0000abcd:1\nwork:0\nccx-1111abcd:0\n")

        sessions = self.gateway.list_sessions()

        self.assertEqual(sessions, [
            TmuxSessionInfo("ccx-0000abcd", True),
            TmuxSessionInfo("work", False),
            TmuxSessionInfo("ccx-1111abcd", False),
        ])
        self.assertEqual(self.argv(), ["tmux", "list-sessions", "-F", "#{session_name}:#{session_attached}"])

    def test_multiple_clients_count_as_attached(self):
        self.mock_run.return_value = completed(stdout="ccx-0000abcd:2\n")
        self.assertTrue(self.gateway.list_sessions()[0].attached)

    def test_name_containing_colon(self):
        self.mock_run.return_value = completed(stdout="odd:name:0\n")
        self.assertEqual(self.gateway.list_sessions(), [TmuxSessionInfo("odd:name", False)])

    def test_malformed_lines_are_skipped(self):
        self.mock_run.return_value = completed(stdout="garbage\n:1\nccx-1:x\nccx-2:0\n")
        self.assertEqual(self.gateway.list_sessions(), [TmuxSessionInfo("ccx-2", False)])

    def test_no_server_is_empty(self):
        self.mock_run.return_value = completed(1, stderr="no server running on /tmp/tmux-0/default")
        self.assertEqual(self.gateway.list_sessions(), [])


class TestSessionExists(GatewayTestCase):

    def test_exact_target(self):
        self.assertTrue(self.gateway.session_exists("ccx-1"))
        self.assertEqual(self.argv(), ["tmux", "has-session", "-t", "=ccx-1"])

    def test_missing_session(self):
        self.mock_run.return_value = completed(1)
        self.assertFalse(self.gateway.session_exists("ccx-1"))

    def test_missing_tmux_means_absent(self):
        self.mock_run.side_effect = FileNotFoundError("tmux")
        self.assertFalse(self.gateway.session_exists("ccx-1"))


class TestPaneQueries(GatewayTestCase):

    def test_get_pane_title(self):
        self.mock_run.return_value = completed(stdout="✳ Done here\n")
        self.assertEqual(self.gateway.get_pane_title("ccx-1"), "✳ Done here")
        self.assertEqual(
            self.argv(), ["tmux", "display-message", "-p", "-t", "=ccx-1:", "#{pane_title}"]
        )

    def test_get_pane_title_vanished(self):
        self.mock_run.return_value = completed(1, stderr="can't find session")
        with self.assertRaises(CaptureError):
            self.gateway.get_pane_title("ccx-1")

    def test_working_directory(self):
        self.mock_run.return_value = completed(stdout="/home/dev/project\n")
        self.assertEqual(self.gateway.get_pane_working_directory("ccx-1"), "/home/dev/project")
        self.assertEqual(self.argv()[-1], "#{pane_current_path}")

    def test_working_directory_failures_are_none(self):
        self.mock_run.return_value = completed(1)
        self.assertIsNone(self.gateway.get_pane_working_directory("ccx-1"))

        self.mock_run.return_value = completed(0, stdout="\n")
        self.assertIsNone(self.gateway.get_pane_working_directory("ccx-1"))

        self.mock_run.side_effect = subprocess.TimeoutExpired(cmd="tmux", timeout=10)
        self.assertIsNone(self.gateway.get_pane_working_directory("ccx-1"))

    def test_capture_pane(self):
        self.mock_run.return_value = completed(stdout="line 1\nline 2\n")
        self.assertEqual(self.gateway.capture_pane("ccx-1", 20), "line 1\nline 2\n")
        self.assertEqual(self.argv(), ["tmux", "capture-pane", "-p", "-t", "=ccx-1:", "-S", "-20"])

    def test_capture_pane_vanished(self):
        self.mock_run.return_value = completed(1)
        with self.assertRaises(CaptureError):
            self.gateway.capture_pane("ccx-1", 20)


class TestKillAndSend(GatewayTestCase):

    def test_kill_session(self):
        self.gateway.kill_session("ccx-1")
        self.assertEqual(self.argv(), ["tmux", "kill-session", "-t", "=ccx-1"])

    def test_kill_missing_session_raises(self):
        self.mock_run.return_value = completed(1, stderr="can't find session: ccx-1")
        with self.assertRaises(GatewayError):
            self.gateway.kill_session("ccx-1")

    def test_send_keys_literal_then_enter(self):
        self.gateway.send_keys("ccx-1", "Enter the $HOME; ls")
        self.assertEqual(self.mock_run.call_count, 2)
        self.assertEqual(
            self.argv(0), ["tmux", "send-keys", "-t", "=ccx-1:", "-l", "--", "Enter the $HOME; ls"]
        )
        self.assertEqual(self.argv(1), ["tmux", "send-keys", "-t", "=ccx-1:", "Enter"])

    def test_send_keys_message_starting_with_dash(self):
        for message in ("-R reset please", "--help"):
            self.mock_run.reset_mock()
            self.gateway.send_keys("ccx-1", message)
            typed = self.argv(0)
            # Everything after "--" is literal text, never a flag
            self.assertEqual(typed[typed.index("--") + 1:], [message])
            self.assertLess(typed.index("-l"), typed.index("--"))

    def test_send_keys_waits_before_enter(self):
        gateway = TmuxGateway(send_enter_delay=0.5)
        with patch("ccx.tmux.gateway.time.sleep") as mock_sleep:
            gateway.send_keys("ccx-1", "hello")
        mock_sleep.assert_called_once_with(0.5)

    def test_send_keys_vanished(self):
        self.mock_run.return_value = completed(1)
        with self.assertRaises(GatewayError):
            self.gateway.send_keys("ccx-1", "hello")
        self.assertEqual(self.mock_run.call_count, 1)


class TestAttachSession(unittest.TestCase):

    @patch.dict("os.environ", {}, clear=True)
    @patch("ccx.tmux.gateway.os.execvp")
    def test_attach_outside_tmux(self, mock_execvp):
        TmuxGateway().attach_session("ccx-1")
        mock_execvp.assert_called_once_with("tmux", ["tmux", "attach-session", "-t", "=ccx-1"])

    @patch.dict("os.environ", {"TMUX": "/tmp/tmux-1000/default,123,0"}, clear=True)
    @patch("ccx.tmux.gateway.os.execvp")
    def test_switch_client_inside_tmux(self, mock_execvp):
        TmuxGateway().attach_session("ccx-1")
        mock_execvp.assert_called_once_with("tmux", ["tmux", "switch-client", "-t", "=ccx-1"])

    @patch("ccx.tmux.gateway.os.execvp", side_effect=FileNotFoundError("tmux"))
    def test_exec_failure_raises(self, mock_execvp):
        with self.assertRaises(GatewayError):
            TmuxGateway().attach_session("ccx-1")


if __name__ == '__main__':
    unittest.main()
