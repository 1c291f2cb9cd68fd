"""
Mode-based dispatch tables for KeyNav.

A ChoiceMap holds one Choices table per input mode. Each table maps a Command
either to a CommandGroup (pressing it switches the active mode to the group)
or to an ordered list of actions to run immediately. The ``"normal"`` mode is
the root mode that input returns to after actions run.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from .actions import Action, NamedKeyAction, NO_OP_RANK, parse_action, sort_actions
from .error_handler_util import ConfigError, ErrorHandlerUtil, ParseError
from .key_grammar import Command, NO_MODIFIERS, parse_command

logger = logging.getLogger('KeyNav.ChoiceMap')

DEFAULT_MODE = 'normal'

GROUPS_SECTION = 'groups'
COMMANDS_SECTION = 'commands'

# Fields every group entry must define
GROUP_FIELDS = ('name', 'binding', 'help')


@dataclass(frozen=True)
class CommandGroup:
    """A named sub-mode reachable from the root mode through its binding."""
    id: str
    name: str
    binding: Command
    help: str
    # Display bookkeeping only, never part of equality
    row_id: uuid.UUID = field(default_factory=uuid.uuid4, compare=False, repr=False)

    @classmethod
    def from_config(cls, group_id: str, value: Any) -> 'CommandGroup':
        """
        Build a group from its configuration table.

        Raises:
            ConfigError: If the entry is not a table or lacks a field.
            ParseError: If the binding string is malformed.
        """
        if not isinstance(value, Mapping):
            raise ConfigError(f"group '{group_id}' must be a table", section=GROUPS_SECTION)

        missing = [name for name in GROUP_FIELDS if not isinstance(value.get(name), str)]
        if missing:
            raise ConfigError(f"group '{group_id}' is missing {', '.join(missing)}",
                              section=GROUPS_SECTION)

        return cls(
            id=group_id,
            name=value['name'],
            binding=parse_command(value['binding']),
            help=value['help'],
        )


@dataclass(frozen=True)
class GroupChoice:
    group: CommandGroup

    def describe(self) -> str:
        return self.group.name


@dataclass(frozen=True)
class ActionChoice:
    actions: Tuple[Action, ...]

    @property
    def rank(self) -> int:
        if not self.actions:
            return NO_OP_RANK
        return self.actions[0].rank

    def describe(self) -> str:
        return ", ".join(action.label for action in self.actions)


ChoiceOutcome = Union[GroupChoice, ActionChoice]


@dataclass(frozen=True)
class SwitchMode:
    """The command selected a group; the next command resolves in ``mode``."""
    mode: str


@dataclass(frozen=True)
class Run:
    """The command resolved to actions to execute in order."""
    actions: Tuple[Action, ...]


@dataclass(frozen=True)
class Unrecognized:
    """Neither the mode nor the command is known."""


UNRECOGNIZED = Unrecognized()

Resolution = Union[SwitchMode, Run, Unrecognized]


def named_key_command(action: NamedKeyAction) -> Command:
    """The Command a named key produces when pressed, e.g. ``arrow_left``."""
    return Command(action.identifier, NO_MODIFIERS)


class Choices:
    """Mapping of Command to outcome for a single mode."""

    def __init__(self, entries: Optional[Mapping[Command, ChoiceOutcome]] = None):
        self._entries: Dict[Command, ChoiceOutcome] = dict(entries or {})

    @classmethod
    def with_named(cls) -> 'Choices':
        choices = cls()
        choices.named()
        return choices

    def named(self) -> None:
        """Bind every named key to its own NamedKeyAction."""
        for action in NamedKeyAction:
            self.insert(named_key_command(action), ActionChoice((action,)))

    def insert(self, command: Command, outcome: ChoiceOutcome) -> None:
        previous = self._entries.get(command)
        if previous is not None and previous != outcome:
            logger.debug(f"'{command}' rebound from {previous.describe()} to {outcome.describe()}")
        self._entries[command] = outcome

    def insert_actions(self, command: Command, actions: Sequence[Action]) -> None:
        self.insert(command, ActionChoice(tuple(actions)))

    def insert_group(self, group: CommandGroup) -> None:
        self.insert(group.binding, GroupChoice(group))

    def get(self, command: Command) -> Optional[ChoiceOutcome]:
        return self._entries.get(command)

    def load_table(self, table: Mapping[str, Any], errors=None) -> None:
        """
        Populate from a ``command string -> action identifier(s)`` table.

        Entries whose command fails to parse are skipped; unknown action
        identifiers degrade to NoOp.
        """
        for command_text, value in table.items():
            try:
                command = parse_command(command_text)
            except ParseError as e:
                if errors is not None:
                    errors.skip(command_text, e)
                else:
                    ErrorHandlerUtil.log_and_continue(e, f"Parsing '{command_text}'", logger)
                continue

            if isinstance(value, str):
                identifiers = [value]
            elif isinstance(value, list) and value and all(isinstance(v, str) for v in value):
                identifiers = value
            else:
                reason = f"expected an action identifier or a list of them, got {value!r}"
                if errors is not None:
                    errors.skip(command_text, reason)
                else:
                    logger.warning(f"Skipping '{command_text}': {reason}")
                continue

            self.insert_actions(command, [parse_action(identifier) for identifier in identifiers])

    def items(self):
        return self._entries.items()

    def __iter__(self) -> Iterator[Command]:
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __contains__(self, command):
        return command in self._entries

    def __eq__(self, other):
        if not isinstance(other, Choices):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self):
        return f"Choices({len(self._entries)} bindings)"


@dataclass
class CommandRow:
    """One binding, formatted for display in the command window."""
    command: str
    action: str
    mode: str
    row_id: uuid.UUID = field(default_factory=uuid.uuid4, compare=False, repr=False)
    visible: bool = True

    def values(self) -> List[str]:
        return [self.command, self.action]


COMMAND_ROW_HEADERS = ['Command', 'Act']


def sort_command_rows(rows: List[CommandRow], column_index: int, reverse: bool = False) -> List[CommandRow]:
    """Sort rows by the command (0) or action (1) column."""
    if column_index == 0:
        return sorted(rows, key=lambda row: row.command, reverse=reverse)
    if column_index == 1:
        return sorted(rows, key=lambda row: row.action, reverse=reverse)
    logger.info(f"Column index {column_index} not recognized.")
    return list(rows)


class ChoiceMap:
    """
    Named collection of Choices tables, one per input mode.

    Built once at startup, then owned by the session object and passed to
    the dispatcher. ``resolve`` never mutates the map.
    """

    def __init__(self):
        self.modes: Dict[str, Choices] = {DEFAULT_MODE: Choices.with_named()}
        self.groups: Dict[str, CommandGroup] = {}
        self.skipped = 0

    @classmethod
    def from_config(cls, document: Any) -> 'ChoiceMap':
        """
        Build a map from a parsed configuration document.

        The document holds a ``groups`` section (group id -> name, binding,
        help) and a ``commands`` section (mode -> command string -> action
        identifier). Every problem is logged and skipped; a document that is
        not a table yields a map with only the built-in named keys.
        """
        choice_map = cls()
        errors = ErrorHandlerUtil.create_error_context('ChoiceMap')

        if not isinstance(document, Mapping):
            errors.log_and_continue(
                ConfigError(f"expected a table, got {type(document).__name__}"),
                context="Reading configuration")
            return choice_map

        groups = errors.handle_with_fallback(
            lambda: _section(document, GROUPS_SECTION),
            fallback_value={},
            error_message="Reading groups")
        for group_id, value in groups.items():
            try:
                group = CommandGroup.from_config(group_id, value)
            except (ConfigError, ParseError) as e:
                errors.skip(f"{GROUPS_SECTION}.{group_id}", e)
                continue
            choice_map.groups[group_id] = group
            choice_map.mode(group_id)

        commands = errors.handle_with_fallback(
            lambda: _section(document, COMMANDS_SECTION),
            fallback_value={},
            error_message="Reading commands")
        for mode_name, table in commands.items():
            if not isinstance(table, Mapping):
                errors.skip(f"{COMMANDS_SECTION}.{mode_name}", "mode must be a table")
                continue
            choice_map.mode(mode_name).load_table(table, errors)

        # Groups are reachable from the root mode once materialized
        normal = choice_map.mode(DEFAULT_MODE)
        for group in choice_map.groups.values():
            normal.insert_group(group)

        choice_map.skipped = errors.skipped
        logger.info(f"Loaded {len(choice_map.modes)} modes and {len(choice_map.groups)} groups "
                    f"({errors.skipped} entries skipped)")
        return choice_map

    def mode(self, name: str) -> Choices:
        """Return the table for ``name``, creating it with named keys if absent."""
        if name not in self.modes:
            self.modes[name] = Choices.with_named()
        return self.modes[name]

    def choices(self, name: str) -> Optional[Choices]:
        return self.modes.get(name)

    def mode_names(self) -> List[str]:
        return list(self.modes)

    def add_group(self, group: CommandGroup) -> None:
        self.groups[group.id] = group
        self.mode(group.id)
        self.mode(DEFAULT_MODE).insert_group(group)

    def resolve(self, mode: str, command: Command) -> Resolution:
        """
        Resolve ``command`` in ``mode``.

        Returns SwitchMode for a group binding, Run for an action binding and
        UNRECOGNIZED when the mode or the command is unknown.
        """
        choices = self.modes.get(mode)
        if choices is None:
            logger.debug(f"Mode '{mode}' not found")
            return UNRECOGNIZED

        outcome = choices.get(command)
        if outcome is None:
            return UNRECOGNIZED
        if isinstance(outcome, GroupChoice):
            return SwitchMode(outcome.group.id)
        return Run(outcome.actions)

    def command_rows(self, mode: Optional[str] = None) -> List[CommandRow]:
        """Display rows for one mode, or for every mode when ``mode`` is None."""
        names = [mode] if mode is not None else self.mode_names()
        rows = []
        for name in names:
            choices = self.modes.get(name)
            if choices is None:
                continue
            entries = sorted(choices.items(), key=lambda item: _outcome_rank(item[1]))
            rows.extend(CommandRow(str(command), outcome.describe(), name)
                        for command, outcome in entries)
        return rows

    def actions_for(self, mode: str) -> List[Action]:
        """Every action reachable in one step from ``mode``, in rank order."""
        choices = self.modes.get(mode)
        if choices is None:
            return []
        found = set()
        for _, outcome in choices.items():
            if isinstance(outcome, ActionChoice):
                found.update(outcome.actions)
        return sort_actions(found)

    def __eq__(self, other):
        if not isinstance(other, ChoiceMap):
            return NotImplemented
        return self.modes == other.modes and self.groups == other.groups

    def __repr__(self):
        return f"ChoiceMap(modes={self.mode_names()})"


def _section(document: Mapping, name: str) -> Mapping:
    if name not in document:
        raise ConfigError(f"missing [{name}] section", section=name)
    section = document[name]
    if not isinstance(section, Mapping):
        raise ConfigError(f"[{name}] must be a table", section=name)
    return section


def _outcome_rank(outcome: ChoiceOutcome) -> int:
    # Groups list after every action
    if isinstance(outcome, GroupChoice):
        return 1000
    return outcome.rank
