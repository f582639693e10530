"""Enforce and fix the style of multiline comments."""
from commentstyle.config import parse_options
from commentstyle.fixer import fix_text
from commentstyle.model import Diagnostic, MessageKind, Style, StyleOptions
from commentstyle.rules import check_source, check_text
from commentstyle.source import SourceCode
