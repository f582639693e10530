"""Unit tests for commentstyle.normalize and commentstyle.converters."""
import unittest

from commentstyle import converters, normalize
from commentstyle.grouping import group_comments
from commentstyle.source import SourceCode

# pylint: disable=invalid-name


def _content(text):
    source = SourceCode.from_text(text)
    return normalize.comment_lines(source, group_comments(source)[0])


class TestSeparateLines(unittest.TestCase):
    def test_uniform_leading_space_is_removed(self):
        self.assertEqual(_content("// a\n//   b\n// c"), ["a", "  b", "c"])

    def test_blank_lines_do_not_prevent_stripping(self):
        self.assertEqual(_content("// a\n//\n// b"), ["a", "", "b"])

    def test_missing_space_keeps_lines_as_written(self):
        self.assertEqual(_content("//a\n// b"), ["a", " b"])
        self.assertEqual(_content("// x = 1;\n//y = 2;"), [" x = 1;", "y = 2;"])


class TestStarredBlock(unittest.TestCase):
    def test_star_and_one_space_are_removed(self):
        self.assertEqual(_content("/*\n * foo\n *   bar\n *\n */"), ["foo", "  bar", ""])

    def test_star_only_when_a_line_has_no_space(self):
        self.assertEqual(_content("/*\n *foo\n * bar\n */"), ["foo", " bar"])

    def test_star_only_lines_become_empty(self):
        self.assertEqual(_content("/*\n * a\n *\n * b\n */"), ["a", "", "b"])

    def test_unstarred_blank_line_makes_a_bare_block(self):
        self.assertEqual(_content("/*\n * a\n   \n * b\n */"), ["", "a", "", "b", ""])

    def test_indented_comment(self):
        self.assertEqual(_content("    /*\n     * a\n     */"), ["a"])


class TestBareBlock(unittest.TestCase):
    def test_aligned_lines(self):
        self.assertEqual(_content("/* foo\n   bar */"), ["foo", "bar"])

    def test_relative_indentation_is_kept(self):
        self.assertEqual(_content("/* foo\n     bar\n   baz */"), ["foo", "  bar", "baz"])

    def test_indented_anchor(self):
        self.assertEqual(_content("  /* foo\n       bar\n     baz\n  */"), ["foo", "  bar", "baz", ""])

    def test_under_indented_lines_shift_the_block(self):
        self.assertEqual(_content("/* foo\n bar\n     baz */"), ["foo", "bar", "    baz"])

    def test_first_line_does_not_affect_offset(self):
        self.assertEqual(normalize.correction_offset(["x", "     a"], "   "), "")
        self.assertEqual(normalize.correction_offset(["", " a", "    b"], "   "), "  ")

    def test_blank_lines_do_not_affect_offset(self):
        self.assertEqual(normalize.correction_offset(["", "", "   a"], "   "), "")

    def test_bare_block_lines(self):
        lines = normalize.bare_block_lines([" foo", "   ", "  * bar"], "")
        self.assertEqual(lines, ["foo", "", " bar"])

    def test_realign_line(self):
        self.assertEqual(normalize.realign_line("      x", "   ", ""), "   x")
        self.assertEqual(normalize.realign_line("      x", "   ", "  "), "     x")
        self.assertEqual(normalize.realign_line("   x", "   ", "  "), "x")
        self.assertEqual(normalize.realign_line(" x", "   ", "  "), "x")

    def test_space_before_closing_delimiter(self):
        self.assertEqual(_content("/* foo\n   bar  */"), ["foo", "bar "])
        self.assertEqual(_content("/* foo\n   bar*/"), ["foo", "bar"])


class TestConverters(unittest.TestCase):
    def test_to_starred_block(self):
        self.assertEqual(converters.to_starred_block(["a", "", "  b"], "  "),
                         "/*\n   * a\n   * \n   *   b\n   */")

    def test_to_separate_lines(self):
        self.assertEqual(converters.to_separate_lines(["a", "b"], "    "), "// a\n    // b")

    def test_to_bare_block(self):
        self.assertEqual(converters.to_bare_block(["a", " b"], "  "), "/* a\n      b */")


class TestContentPreservation(unittest.TestCase):
    """Content survives conversion to another form and back."""

    CONTENT = ["first", "  indented", "", "last"]

    def test_each_form_normalizes_to_its_content(self):
        for anchor in ("", "    "):
            for render in (converters.to_starred_block, converters.to_bare_block,
                           converters.to_separate_lines):
                with self.subTest(render=render.__name__, anchor=anchor):
                    text = anchor + render(self.CONTENT, anchor)
                    self.assertEqual(_content(text), self.CONTENT)
