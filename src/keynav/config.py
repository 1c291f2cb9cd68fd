"""
Configuration loading for KeyNav.

The key map is described by a TOML document with two sections:

    [groups.<id>]          name, binding and help text of a selectable group
    [commands.<mode>]      "<command string>" = "<action id>" (or a list of ids)

The document is read once at startup. Nothing here is fatal: a missing file
or malformed document produces a ChoiceMap holding only the built-in
named-key bindings.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .choice_map import ChoiceMap
from .error_handler_util import ConfigError, ErrorHandlerUtil

logger = logging.getLogger('KeyNav.Config')

# Shipped key map
DEFAULT_CONFIG = '''
[groups.window]
name = "Window"
binding = "<Cr> + w"
help = "Window management: fullscreen, maximize, minimize, decorations."

[groups.focus]
name = "Focus"
binding = "<Cr> + g"
help = "Move keyboard focus between windows."

[commands.normal]
"<Alt> + h" = "help"
"<Alt> + m" = "menu"
"j" = "down"
"k" = "up"
"l" = "right"
"h" = "left"
"n" = "next"
"p" = "previous"
"J" = "next_row"
"K" = "previous_row"
"<Cr> + n" = "next_window"
"<Cr> + p" = "previous_window"

[commands.window]
"f" = "fullscreen"
"m" = "maximize"
"M" = "minimize"
"d" = "decorations"

[commands.focus]
"n" = "next_window"
"p" = "previous_window"
"j" = ["next_window", "down"]
'''


def load_document(text: str) -> Dict[str, Any]:
    """
    Parse a TOML configuration document.

    Raises:
        ConfigError: If the text is not valid TOML.
    """
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid configuration document: {e}") from e


def read_config_file(path: Union[str, Path]) -> str:
    """
    Read a configuration file as text.

    Raises:
        ConfigError: If the file cannot be read.
    """
    path = Path(path).expanduser()
    try:
        return path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e


def load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    return load_document(read_config_file(path))


def load_choice_map(text: Optional[str] = None, path: Optional[Union[str, Path]] = None) -> ChoiceMap:
    """
    Build the session ChoiceMap.

    Args:
        text: TOML document to load. Takes precedence over ``path``.
        path: Configuration file to load when ``text`` is not given.

    Uses DEFAULT_CONFIG when neither is given. Falls back to the built-in
    named keys if the document cannot be read or parsed.
    """
    if text is None and path is None:
        text = DEFAULT_CONFIG

    def _load() -> Dict[str, Any]:
        if text is not None:
            return load_document(text)
        logger.info(f"Loading key map from {path}")
        return load_config_file(path)

    document = ErrorHandlerUtil.handle_with_fallback(
        _load,
        fallback_value={},
        error_message="Loading key map",
        logger_instance=logger,
        handled=ConfigError,
    )
    return ChoiceMap.from_config(document)
