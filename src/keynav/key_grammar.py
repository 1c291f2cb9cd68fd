"""
Key binding grammar for KeyNav.

Parses binding strings such as ``"<Cr> + j"`` or ``"J"`` into Command objects
and formats Commands back into the same canonical display form.

Grammar (whitespace is allowed around every token):

    binding   := (separator? modifier separator?)* key
    separator := "+"
    modifier  := "<" alphanumeric+ ">"
    key       := alphanumeric+

A key that is unchanged by uppercasing (``"J"``, ``"1"``) implies the shift
modifier.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from .error_handler_util import ParseError

logger = logging.getLogger('KeyNav.Grammar')

# Bracketed token -> modifier field. "sh" is the display token for shift.
MODIFIER_TOKENS = {
    'cr': 'control_key',
    'control': 'control_key',
    'alt': 'alt_key',
    'sh': 'shift_key',
    'shift': 'shift_key',
    'super': 'super_key',
}

_SEPARATOR = re.compile(r'\s*\+?\s*')
_MODIFIER = re.compile(r'<([A-Za-z0-9]+)>')
_WORD = re.compile(r'[A-Za-z0-9]+')


@dataclass(frozen=True, order=True)
class Modifiers:
    """The four independent modifier flags held during a key press."""
    shift_key: bool = False
    control_key: bool = False
    alt_key: bool = False
    super_key: bool = False

    @classmethod
    def from_names(cls, names: Iterable[str]) -> 'Modifiers':
        """Build a modifier set from field names such as ``'control_key'``."""
        flags = {name: True for name in names}
        return cls(**flags)

    def union(self, other: 'Modifiers') -> 'Modifiers':
        return Modifiers(
            shift_key=self.shift_key or other.shift_key,
            control_key=self.control_key or other.control_key,
            alt_key=self.alt_key or other.alt_key,
            super_key=self.super_key or other.super_key,
        )

    def __or__(self, other: 'Modifiers') -> 'Modifiers':
        return self.union(other)

    def is_none(self) -> bool:
        """True when no modifier is held."""
        return not (self.shift_key or self.control_key or self.alt_key or self.super_key)

    def __str__(self):
        mods = ""
        if self.super_key:
            mods += "<Super> + "
        if self.control_key:
            mods += "<Cr> + "
        if self.alt_key:
            mods += "<Alt> + "
        if self.shift_key:
            mods += "<Sh> + "
        return mods


NO_MODIFIERS = Modifiers()


@dataclass(frozen=True, order=True)
class Command:
    """A key name together with the modifiers held while it was pressed."""
    key: str
    mods: Modifiers = field(default=NO_MODIFIERS)

    @classmethod
    def parse(cls, text: str) -> 'Command':
        return parse_command(text)

    def matches(self, trigger: 'Command') -> bool:
        return self == trigger

    def __str__(self):
        if self.mods.is_none():
            return self.key
        return f"{self.mods}{self.key}"


def _separator(text: str) -> Tuple[str, bool]:
    """Consume an optional ``+`` and surrounding whitespace."""
    match = _SEPARATOR.match(text)
    return text[match.end():], '+' in match.group(0)


def _modifier(text: str) -> Tuple[str, Optional[Modifiers]]:
    """
    Consume one bracketed modifier token.

    Returns the remaining text and the parsed modifier, or ``None`` for the
    modifier when ``text`` does not start with a bracketed token.
    """
    rest, _ = _separator(text)
    match = _MODIFIER.match(rest)
    if match is None:
        return text, None

    token = match.group(1)
    name = MODIFIER_TOKENS.get(token.lower())
    if name is None:
        raise ParseError(f"Unknown modifier <{token}>", text=text, remainder=rest)

    rest, _ = _separator(rest[match.end():])
    return rest, Modifiers.from_names([name])


def _modifiers(text: str) -> Tuple[str, Modifiers]:
    """Consume modifier tokens until the first non-bracketed remainder."""
    mods = NO_MODIFIERS
    rest, mod = _modifier(text)
    while mod is not None:
        mods = mods | mod
        rest, mod = _modifier(rest)
    return rest, mods


def _word(text: str) -> Tuple[str, str]:
    rest = text.lstrip()
    match = _WORD.match(rest)
    if match is None:
        raise ParseError("Expected a key after the modifiers", text=text, remainder=rest)
    return rest[match.end():], match.group(0)


def parse_command(text: str) -> Command:
    """
    Parse a binding string into a Command.

    Args:
        text: Binding string, e.g. ``"<Cr> + j"``, ``"<alt><shift>x"`` or ``"J"``

    Returns:
        Command: The parsed command. A key equal to its uppercase form
            forces the shift flag.

    Raises:
        ParseError: If a modifier is unknown, the key is missing, or text
            follows the key.
    """
    if not isinstance(text, str):
        raise ParseError(f"Binding must be a string, not {type(text).__name__}")

    rest, mods = _modifiers(text)
    rest, key = _word(rest)
    if rest.strip():
        raise ParseError(f"Unexpected input after key '{key}': '{rest.strip()}'",
                         text=text, remainder=rest)

    if key == key.upper():
        mods = mods | Modifiers(shift_key=True)

    command = Command(key, mods)
    logger.debug(f"Parsed '{text}' as {command!r}")
    return command


def try_parse_command(text: str) -> Optional[Command]:
    """Parse a binding string, logging and returning None on failure."""
    try:
        return parse_command(text)
    except ParseError as e:
        logger.warning(f"Skipping binding '{text}': {e}")
        return None


def format_command(command: Command) -> str:
    """Canonical display string for a Command, e.g. ``"<Cr> + j"``."""
    return str(command)
