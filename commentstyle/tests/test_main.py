"""Unit tests for the commentstyle command line."""
import os
import unittest

from click.testing import CliRunner

from commentstyle.__main__ import format_diagnostic, iterate_files, main
from commentstyle.config import Config
from commentstyle.model import Diagnostic, MessageKind, Position, Rewrite

# pylint: disable=invalid-name

LINE_COMMENTS = "// a\n// b\nfoo();\n"
STARRED = "/*\n * a\n * b\n */\nfoo();\n"


def _write(path, text):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", newline="") as fh:
        fh.write(text)


def _read(path):
    with open(path, newline="") as fh:
        return fh.read()


class TestFormatDiagnostic(unittest.TestCase):
    def test_format(self):
        diagnostic = Diagnostic(MessageKind.MISSING_STAR, Position(3, 0), Position(3, 4),
                                Rewrite(0, 1, " *"))
        self.assertEqual(
            format_diagnostic("a.js", diagnostic),
            "Error: a.js:3:1 - missing-star - Expected a '*' at the start of this line. (fixable)")


class TestLint(unittest.TestCase):
    def test_clean_file(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write("a.js", STARRED)
            result = runner.invoke(main, ["lint", "--config", "none.yml", "a.js"])
            # A missing config file is a usage error.
            self.assertEqual(result.exit_code, 2)

            result = runner.invoke(main, ["lint", "a.js"])
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertEqual(result.output, "")

    def test_problems_are_reported(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write("a.js", LINE_COMMENTS)
            result = runner.invoke(main, ["lint", "a.js"])

            self.assertEqual(result.exit_code, 1)
            self.assertIn("a.js:1:1 - expected-block", result.output)
            self.assertIn("(fixable)", result.output)

    def test_style_option(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write("a.js", LINE_COMMENTS)
            result = runner.invoke(main, ["lint", "--style", "separate-lines", "a.js"])

            self.assertEqual(result.exit_code, 0, result.output)

    def test_config_file(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write("a.js", STARRED)
            _write(".commentstyle.yml", "style: bare-block\n")
            result = runner.invoke(main, ["lint", "a.js"])

            self.assertEqual(result.exit_code, 1)
            self.assertIn("expected-bare-block", result.output)

    def test_check_jsdoc_needs_separate_lines(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write("a.js", STARRED)
            result = runner.invoke(main, ["lint", "--check-jsdoc", "a.js"])

            self.assertEqual(result.exit_code, 2)

    def test_unterminated_comment(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write("bad.js", "/* never closed\n")
            _write("good.js", STARRED)
            result = runner.invoke(main, ["lint", "bad.js", "good.js"])

            self.assertEqual(result.exit_code, 2)

    def test_directory(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write(os.path.join("src", "a.js"), LINE_COMMENTS)
            _write(os.path.join("src", "notes.txt"), LINE_COMMENTS)
            _write(os.path.join("src", "node_modules", "b.js"), LINE_COMMENTS)
            result = runner.invoke(main, ["lint", "src"])

            self.assertEqual(result.exit_code, 1)
            self.assertIn(os.path.join("src", "a.js"), result.output)
            self.assertNotIn("notes.txt", result.output)
            self.assertNotIn("node_modules", result.output)


class TestFix(unittest.TestCase):
    def test_fix_in_place(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write("a.js", LINE_COMMENTS)
            result = runner.invoke(main, ["fix", "a.js"])

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertEqual(_read("a.js"), STARRED)

    def test_dry_run(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write("a.js", LINE_COMMENTS)
            result = runner.invoke(main, ["fix", "--dry-run", "a.js"])

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("-// a", result.output)
            self.assertIn("+ * a", result.output)
            self.assertEqual(_read("a.js"), LINE_COMMENTS)

    def test_unfixable_problem(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write("a.js", "// a */\n// b\n")
            result = runner.invoke(main, ["fix", "a.js"])

            self.assertEqual(result.exit_code, 1)
            self.assertIn("expected-block", result.output)
            self.assertNotIn("(fixable)", result.output)
            self.assertEqual(_read("a.js"), "// a */\n// b\n")

    def test_directory_walk_leaves_nested_comments_alone(self):
        rust = "/*\n * outer\n * /* inner */\n */\nfn main() {}\n"
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write(os.path.join("src", "main.rs"), rust)
            result = runner.invoke(main, ["fix", "--style", "separate-lines", "src"])

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertEqual(_read(os.path.join("src", "main.rs")), rust)

    def test_keeps_crlf_line_endings_outside_comments(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write("a.js", "/*\r\n * a\r\n */\r\nfoo();\r\n")
            result = runner.invoke(main, ["fix", "--style", "separate-lines", "a.js"])

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertEqual(_read("a.js"), "// a\r\nfoo();\r\n")


class TestIterateFiles(unittest.TestCase):
    def test_files_are_yielded_as_given(self):
        config = Config(extensions=[".js"])
        self.assertEqual(list(iterate_files(["README"], config)), ["README"])
