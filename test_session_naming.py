#!/usr/bin/env python3
"""
Session Naming Tests for ccx
"""

import re
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent))

from ccx.core.naming import SESSION_PREFIX, generate_session_name, is_managed

NAME_PATTERN = re.compile(r"^ccx-[0-9a-f]{8}$")


class TestGenerateSessionName(unittest.TestCase):

    def test_name_format(self):
        name = generate_session_name()
        self.assertRegex(name, NAME_PATTERN)
        self.assertTrue(name.startswith(SESSION_PREFIX))

    def test_custom_prefix(self):
        name = generate_session_name("agent-")
        self.assertRegex(name, r"^agent-[0-9a-f]{8}$")

    def test_no_duplicates_in_tight_loop(self):
        names = [generate_session_name() for _ in range(10000)]
        self.assertEqual(len(set(names)), len(names))

    def test_unique_even_with_frozen_clock(self):
        with patch("ccx.core.naming.time.time_ns", return_value=1_700_000_000_000_000_000):
            names = {generate_session_name() for _ in range(1000)}
        self.assertEqual(len(names), 1000)

    def test_wraps_to_eight_hex_digits(self):
        with patch("ccx.core.naming.time.time_ns", return_value=2 ** 64 + 5):
            self.assertRegex(generate_session_name(), NAME_PATTERN)

    def test_is_managed(self):
        self.assertTrue(is_managed("ccx-0000abcd"))
        self.assertFalse(is_managed("work"))
        self.assertFalse(is_managed("xccx-0000abcd"))


if __name__ == '__main__':
    unittest.main()
