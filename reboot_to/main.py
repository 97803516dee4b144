#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
reboot-to: pick a UEFI boot entry (menu or command line), make it the
one-time boot target with efibootmgr, and reboot into it
"""
# pylint: disable=broad-exception-caught
import sys
import logging
import argparse
import traceback
from console_window import ConsoleWindow

from reboot_to import __version__
from reboot_to.efiboot import EFIBOOTMGR, REBOOT_CMD, EfiBootMgr, Rebooter
from reboot_to.errors import (EXIT_INTERNAL, EXIT_OK, ExecutableNotFound,
                              RebootToError, UserCancelled)
from reboot_to.menu import BootMenu
from reboot_to.runner import CommandRunner
from reboot_to.selector import (BY_ANY, BY_ID, BY_NAME, REBOOT, SET_NEXT,
                                DirectSelection, InteractiveSelection, lookup)

_log = logging.getLogger(__name__)

_log_debug = _log.debug


def setup_logging(verbose=False):
    """ Log to stderr; DEBUG if verbose, else WARNING """
    log = logging.getLogger('reboot_to')
    for handler in list(log.handlers):
        log.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(levelname)s: %(name)s: %(message)s'))
    log.addHandler(handler)
    log.setLevel(logging.DEBUG if verbose else logging.WARNING)


def build_parser():
    """ The command line """
    parser = argparse.ArgumentParser(
        prog='reboot-to',
        description='Reboot (once) into another UEFI boot entry, chosen in a'
        ' menu or on the command line. DEST is a boot number (e.g., 0003 or 3;'
        ' see --list) or an exact boot entry label.'
        f' Runs "{EFIBOOTMGR}" and "{REBOOT_CMD}"; needs root.')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('-l', '--list', action='store_true',
                       help='list the boot entries and their IDs')
    group.add_argument('-r', '--reboot-to', metavar='DEST',
                       help='reboot to DEST (ID first, then exact label)')
    group.add_argument('--id', metavar='ID',
                       help='reboot to the boot entry with this ID')
    group.add_argument('--name', metavar='LABEL',
                       help='reboot to the boot entry with exactly this label')
    group.add_argument('-n', '--next', metavar='DEST',
                       help='set DEST as the next (one-time) boot, but do not reboot')
    parser.add_argument('--reboot-cmd', default=REBOOT_CMD, metavar='CMD',
                        help=f'command that reboots the machine [dflt="{REBOOT_CMD}"]')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='debug logging to stderr')
    parser.add_argument('-V', '--version', action='version',
                        version=f'%(prog)s {__version__}')
    return parser


def get_selection(opts):
    """ DirectSelection or InteractiveSelection from the parsed options """
    if opts.reboot_to is not None:
        return DirectSelection(opts.reboot_to, by=BY_ANY)
    if opts.id is not None:
        return DirectSelection(opts.id, by=BY_ID)
    if opts.name is not None:
        return DirectSelection(opts.name, by=BY_NAME)
    if opts.next is not None:
        return DirectSelection(opts.next, by=BY_ANY, action=SET_NEXT)
    return InteractiveSelection()


def format_listing(listing):
    """ Lines of 'MRK ID* LABEL' for --list """
    lines = []
    for entry in listing.entries:
        star = '*' if entry.active else ' '
        lines.append(f'{listing.marker(entry):>3} {entry.ident}{star} {entry.label}')
    return '\n'.join(lines)


def check_prereqs(runner, progs):
    """ Fail before touching anything if a needed program is missing """
    for prog in progs:
        if runner.which(prog) is None:
            raise ExecutableNotFound(prog)


def run_pipeline(selection, efi, rebooter, menu_class=None, out=None):
    """ List -> select -> set BootNext -> (maybe) reboot.

    The reboot only happens after BootNext was set successfully; any
    error propagates and ends the run.
    """
    out = out if out else print
    menu_class = menu_class if menu_class else BootMenu
    listing = efi.list_entries()

    if isinstance(selection, InteractiveSelection):
        action, entry = menu_class(listing).pick()
    else:
        entry = lookup(listing.entries, selection.token, selection.by)
        action = selection.action
    _log_debug('selected %s (%s) to %s', entry.ident, entry.label, action)

    efi.set_next(entry.ident)
    out(f'Next boot set to {entry.ident} ({entry.label})')
    if action != REBOOT:
        return entry

    out('Rebooting ...')
    try:
        rebooter.reboot()
    except RebootToError:
        out(f'NOTE: BootNext is set to {entry.ident}; reboot manually,'
            f' or clear it with "{EFIBOOTMGR} --delete-bootnext"')
        raise
    return entry


def main(argv=None):
    """ The program; returns the exit code """
    opts = build_parser().parse_args(argv)
    setup_logging(opts.verbose)
    try:
        runner = CommandRunner()
        efi = EfiBootMgr(runner=runner)
        if opts.list:
            check_prereqs(runner, [EFIBOOTMGR])
            print(format_listing(efi.list_entries()))
            return EXIT_OK

        selection = get_selection(opts)
        try:
            rebooter = Rebooter(runner=runner, command=opts.reboot_cmd)
        except ValueError as exc:
            raise RebootToError(f'bad --reboot-cmd [{exc}]') from exc
        progs = [EFIBOOTMGR]
        if getattr(selection, 'action', REBOOT) == REBOOT:
            progs.append(rebooter.argv[0])
        check_prereqs(runner, progs)

        run_pipeline(selection, efi, rebooter)
    except KeyboardInterrupt:
        print(f'ERROR: {UserCancelled()}', file=sys.stderr)
        return UserCancelled.exit_code
    except RebootToError as exc:
        print(f'ERROR: {exc}', file=sys.stderr)
        return exc.exit_code
    return EXIT_OK


def run():
    """ Entry point for the console script """
    try:
        sys.exit(main())
    except Exception as exce:
        ConsoleWindow.stop_curses()
        print("exception:", str(exce))
        print(traceback.format_exc())
        sys.exit(EXIT_INTERNAL)


if __name__ == '__main__':
    run()
