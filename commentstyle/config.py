"""Option parsing and config file handling."""
import os
import re
from typing import Any, List, Mapping, Optional, Sequence, Union

import structlog
import yaml
from typing_extensions import TypedDict

from commentstyle.model import DEFAULT_IGNORE_PATTERN, ConfigError, Style, StyleOptions

LOGGER = structlog.get_logger(__name__)

CONFIG_FILE_NAME = ".commentstyle.yml"

# Languages with nested block comments (Rust, Swift, Kotlin, Scala) and plain CSS,
# which has no line comments, are left out.
DEFAULT_EXTENSIONS = [
    ".c", ".cc", ".cpp", ".cxx", ".h", ".hh", ".hpp", ".java", ".js", ".jsx", ".mjs", ".cjs",
    ".ts", ".tsx", ".mts", ".cts", ".go", ".cs", ".scss"
]

_OPTION_KEYS = {"style", "checkJSDoc", "ignorePattern"}
_FILE_KEYS = _OPTION_KEYS | {"extensions"}


class ConfigFile(TypedDict, total=False):
    """Shape of a .commentstyle.yml document."""

    style: str
    checkJSDoc: bool
    ignorePattern: str
    extensions: List[str]


def parse_style(value: Any) -> Style:
    try:
        return Style(value)
    except ValueError:
        choices = ", ".join(style.value for style in Style)
        raise ConfigError(f"Unknown style {value!r}, expected one of: {choices}") from None


def _parse_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{name}' must be a boolean, got {value!r}")
    return value


def _parse_pattern(value: Any):
    if not isinstance(value, str):
        raise ConfigError(f"'ignorePattern' must be a string, got {value!r}")
    try:
        return re.compile(value)
    except re.error as err:
        raise ConfigError(f"Invalid 'ignorePattern' {value!r}: {err}") from None


def _options_from_mapping(raw: Mapping[str, Any], allowed: set) -> StyleOptions:
    unknown = sorted(set(raw) - allowed)
    if unknown:
        raise ConfigError(f"Unknown option(s): {', '.join(unknown)}")

    style = parse_style(raw.get("style", Style.STARRED_BLOCK.value))
    check_jsdoc = _parse_bool("checkJSDoc", raw.get("checkJSDoc", False))
    if check_jsdoc and style != Style.SEPARATE_LINES:
        raise ConfigError("'checkJSDoc' is only valid with the separate-lines style")

    ignore_pattern = DEFAULT_IGNORE_PATTERN
    if raw.get("ignorePattern") is not None:
        ignore_pattern = _parse_pattern(raw["ignorePattern"])
    return StyleOptions(style, check_jsdoc, ignore_pattern)


def _options_from_list(raw: Sequence[Any]) -> StyleOptions:
    if not raw:
        return StyleOptions()

    style = parse_style(raw[0])
    if style == Style.SEPARATE_LINES:
        if len(raw) > 2:
            raise ConfigError("separate-lines takes at most one settings object")
        params = raw[1] if len(raw) == 2 else {}
        if not isinstance(params, Mapping):
            raise ConfigError(f"separate-lines settings must be a mapping, got {params!r}")
        unknown = sorted(set(params) - {"checkJSDoc"})
        if unknown:
            raise ConfigError(f"Unknown separate-lines setting(s): {', '.join(unknown)}")
        return StyleOptions(style, _parse_bool("checkJSDoc", params.get("checkJSDoc", False)))

    if len(raw) > 1:
        raise ConfigError(f"{style.value} takes no settings")
    return StyleOptions(style)


def parse_options(raw: Union[None, str, Sequence[Any], Mapping[str, Any]]) -> StyleOptions:
    """
    Build StyleOptions from a rule options value.

    Accepts `["starred-block"]`, `["bare-block"]`,
    `["separate-lines", {"checkJSDoc": true}]`, a bare style name, or a mapping
    with `style`, `checkJSDoc` and `ignorePattern` keys.
    """
    if raw is None:
        return StyleOptions()
    if isinstance(raw, str):
        return StyleOptions(parse_style(raw))
    if isinstance(raw, Mapping):
        return _options_from_mapping(raw, _OPTION_KEYS)
    if isinstance(raw, Sequence):
        return _options_from_list(raw)
    raise ConfigError(f"Unsupported options value {raw!r}")


class Config:
    """Options and file selection loaded from a config file."""

    def __init__(self, options: StyleOptions = StyleOptions(),
                 extensions: Optional[List[str]] = None, path: Optional[str] = None):
        self.options = options
        self.extensions = list(extensions) if extensions is not None else list(DEFAULT_EXTENSIONS)
        self.path = path

    def wants_file(self, file_name: str) -> bool:
        return os.path.splitext(file_name)[1] in self.extensions


def load(data: Union[str, bytes], path: Optional[str] = None) -> Config:
    """Given a yaml buffer, build a Config."""
    try:
        document = yaml.safe_load(data)
    except yaml.YAMLError as err:
        raise ConfigError(f"Invalid YAML in {path or 'config'}: {err}") from None

    if document is None:
        document = {}
    if not isinstance(document, Mapping):
        raise ConfigError(f"{path or 'config'} must contain a mapping")

    raw: ConfigFile = document
    unknown = sorted(set(raw) - _FILE_KEYS)
    if unknown:
        raise ConfigError(f"Unknown key(s) in {path or 'config'}: {', '.join(unknown)}")

    extensions = raw.get("extensions")
    if extensions is not None and (not isinstance(extensions, list)
                                   or not all(isinstance(ext, str) for ext in extensions)):
        raise ConfigError("'extensions' must be a list of strings")

    options = _options_from_mapping({k: v for k, v in raw.items() if k in _OPTION_KEYS},
                                    _OPTION_KEYS)
    return Config(options, extensions, path)


def load_config(path: Union[str, os.PathLike]) -> Config:
    """Load a config file from disk."""
    try:
        with open(path, encoding="utf-8") as fh:
            config = load(fh.read(), os.fspath(path))
    except OSError as err:
        raise ConfigError(f"Cannot read config file {os.fspath(path)}: {err.strerror}") from None
    LOGGER.debug("Loaded config", path=os.fspath(path), style=config.options.style.value)
    return config


def find_config(start_dir: Union[str, os.PathLike]) -> Optional[str]:
    """Return the nearest config file at or above `start_dir`."""
    current = os.path.abspath(start_dir)
    while True:
        candidate = os.path.join(current, CONFIG_FILE_NAME)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent
