"""
Help dialog widget listing the active key bindings.
"""

import urwid

from ...choice_map import ChoiceMap, DEFAULT_MODE
from ..key_bindings import KEY_CLOSE_HELP


class HelpDialog(urwid.WidgetWrap):
    """Help dialog showing the bindings of one mode and the selectable groups"""

    def __init__(self, choice_map: ChoiceMap, mode: str = DEFAULT_MODE):
        self.mode = mode
        self.command_rows = choice_map.command_rows(mode)

        help_text = [('bold', f'Mode: {mode}\n\n')]
        for row in self.command_rows:
            help_text.append(('bold', f'{row.command:<18}'))
            help_text.append(f'{row.action}\n')

        if choice_map.groups:
            help_text.append(('bold', '\nGroups:\n'))
            for group in choice_map.groups.values():
                help_text.append(('bold', f'• {group.name} ({group.binding}): '))
                help_text.append(f'{group.help}\n')

        help_text.append(('dark gray', '\nPress Esc or q to close'))

        content = urwid.Text(help_text)
        padded = urwid.Padding(content, left=2, right=2)
        filled = urwid.Filler(padded, valign='top', top=1)

        box = urwid.LineBox(filled, title='Key Bindings')
        super().__init__(box)

    def keypress(self, size, key):
        if key in KEY_CLOSE_HELP:
            return 'close_help'
        return super().keypress(size, key)
