"""Tests for the mpslice command-line interface."""

from __future__ import annotations

import contextlib
import io
import os
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from mpslice import __version__
from mpslice._cli import main


def _run(argv):
    """Run the CLI, returning (exit_code, stdout, stderr)."""
    out, err = io.StringIO(), io.StringIO()
    code = 0
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        try:
            main(argv)
        except SystemExit as e:
            code = e.code
    return code, out.getvalue(), err.getvalue()


class TestCli(unittest.TestCase):
    def test_version(self):
        code, out, _ = _run(["version"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "mpslice {}".format(__version__))

    def test_no_command(self):
        code, _, _ = _run([])
        self.assertEqual(code, 1)

    def test_unknown_flag_is_usage_error(self):
        code, _, err = _run(["peek", "--bogus"])
        self.assertEqual(code, 1)
        self.assertIn("usage:", err)

    def test_unknown_command_is_usage_error(self):
        code, _, _ = _run(["explode"])
        self.assertEqual(code, 1)

    def test_bad_max_depth_is_usage_error(self):
        code, _, _ = _run(["dump", "--hex", "c0", "--max-depth", "deep"])
        self.assertEqual(code, 1)

    def test_peek_hex(self):
        code, out, _ = _run(["peek", "--hex", "cd 01 00 c0"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "unsigned 256\tconsumed=3")

    def test_peek_container(self):
        code, out, _ = _run(["peek", "--hex", "92 01 02"])
        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("array(2)"))

    def test_dump_indents_children(self):
        code, out, _ = _run(["dump", "--hex", "92 a1 61 c3"])
        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), [
            "00000000  array(2)",
            "00000001    string b'a'",
            "00000003    boolean True",
        ])

    def test_dump_from_file(self):
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "payload.bin")
            with open(path, "wb") as f:
                f.write(b"\xc0\x05")
            code, out, _ = _run(["dump", "--input", path])
        self.assertEqual(code, 0)
        self.assertEqual(len(out.splitlines()), 2)

    def test_invalid_exit_code(self):
        code, _, err = _run(["peek", "--hex", "c1"])
        self.assertEqual(code, 2)
        self.assertIn("[ERR_INVALID]", err)

    def test_empty_input_exit_code(self):
        code, _, err = _run(["peek", "--hex", ""])
        self.assertEqual(code, 2)
        self.assertIn("[ERR_EOS]", err)

    def test_truncated_exit_code(self):
        code, _, err = _run(["peek", "--hex", "d9 05 61 62"])
        self.assertEqual(code, 3)
        self.assertIn("need 3 more byte(s)", err)

    def test_dump_depth_limit(self):
        code, _, err = _run(["dump", "--hex", "91 91 01", "--max-depth", "1"])
        self.assertEqual(code, 2)
        self.assertIn("[ERR_INVALID]", err)

    def test_bad_hex(self):
        code, _, err = _run(["peek", "--hex", "zz"])
        self.assertEqual(code, 2)
        self.assertIn("bad hex", err)


if __name__ == "__main__":
    unittest.main()
