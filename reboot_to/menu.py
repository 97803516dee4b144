#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Curses menu (atop console_window) for picking the boot entry
"""
# pylint: disable=consider-using-in
import curses as cs
from console_window import ConsoleWindow, OptionSpinner

from reboot_to.errors import UserCancelled
from reboot_to.selector import REBOOT, SET_NEXT


class BootMenu:
    """ Pick list of the boot entries; pick() returns (action, entry) """

    def __init__(self, listing):
        self.listing = listing
        self.entries = list(listing.entries)
        self.choice = None
        self.saved_pick_pos = None  # cursor position while in help mode

        spin = self.spin = OptionSpinner()
        spin.add_key('help_mode', '? - toggle help screen', vals=[False, True])
        spin.add_key('next', 'n - set next boot to entry, but do NOT reboot',
                     category='action')
        spin.add_key('quit', 'q,ESC - quit program (no changes)',
                     category='action', keys=[ord('q'), 27, 0x3]) # 27=ESC 3=CTL-C
        other_keys = {cs.KEY_ENTER, 10} # both forms of ENTER
        self.opts = spin.default_obj

        self.label_wid = max((len(x.label) for x in self.entries), default=0)
        self.win = ConsoleWindow(head_line=True, body_rows=len(self.entries)+20,
                                 head_rows=10, keys=spin.keys | other_keys)
        self.win.pick_pos = 0
        self.win.set_pick_mode(True)

    def format_entry(self, entry):
        """ e.g., 'nxt * 0002 Ubuntu' """
        marker = self.listing.marker(entry)
        active = '*' if entry.active else ''
        return f'{marker:>3} {active:>1} {entry.ident:>4} {entry.label:<{self.label_wid}}'

    @staticmethod
    def get_keys_line():
        """ Key hints for the header """
        return 'ENTER:reboot-to n:next-boot-only ?:help q:quit'

    def draw(self):
        """ Fill the window for the current mode """
        if self.opts.help_mode and self.saved_pick_pos is None:
            self.saved_pick_pos = self.win.pick_pos
            self.win.set_pick_mode(False)
        elif not self.opts.help_mode and self.saved_pick_pos is not None:
            self.win.pick_pos = self.saved_pick_pos
            self.saved_pick_pos = None
            self.win.set_pick_mode(True)

        if self.opts.help_mode:
            self.spin.show_help_nav_keys(self.win)
            self.spin.show_help_body(self.win)
            for line in ['   ENTER - set next boot to entry AND reboot now',
                         '   ENTER (in help) - back to the boot entries']:
                self.win.add_body(line)
        else:
            self.win.add_header(self.get_keys_line(), attr=cs.A_BOLD)
            for entry in self.entries:
                self.win.add_body(self.format_entry(entry))

    def picked(self):
        """ The entry under the cursor (or None) """
        pos = self.win.pick_pos
        if 0 <= pos < len(self.entries):
            return self.entries[pos]
        return None

    def choose(self, action):
        """ Record the choice, which ends the main loop (logged by the caller,
            once curses has let go of the screen) """
        entry = self.picked()
        if entry is not None:
            self.choice = (action, entry)

    def do_key(self, key):
        """ Handle one key from prompt() """
        if not key:
            return
        if key == cs.KEY_ENTER or key == 10:
            if self.opts.help_mode:
                self.opts.help_mode = False
                return
            self.choose(REBOOT)
            return
        if key in self.spin.keys:
            self.spin.do_key(key, self.win)
            self.do_actions()

    def do_actions(self):
        """ Handle keys that are category='action' """
        quit_, self.opts.quit = self.opts.quit, False
        if quit_:
            raise UserCancelled()

        boot_next, self.opts.next = self.opts.next, False
        if boot_next and not self.opts.help_mode:
            self.choose(SET_NEXT)

    def pick(self):
        """ Run the menu until an entry is chosen; raises UserCancelled on quit """
        try:
            while self.choice is None:
                self.draw()
                self.win.render()
                self.do_key(self.win.prompt(seconds=300))
                self.win.clear()
        except KeyboardInterrupt as exc:
            raise UserCancelled() from exc
        finally:
            self.win.stop_curses()
        return self.choice
