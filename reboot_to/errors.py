#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exceptions raised by reboot-to; each one ends the run with its own exit code.
"""
# pylint: disable=too-few-public-methods

EXIT_OK = 0
EXIT_INTERNAL = 1
EXIT_USAGE = 2  # argparse


class RebootToError(Exception):
    """Base class of all reboot-to exceptions."""
    exit_code = EXIT_INTERNAL


class ExecutableNotFound(RebootToError):
    """A required program (efibootmgr, shutdown, ...) is not on $PATH."""
    exit_code = 3

    def __init__(self, prog):
        super().__init__(f'cannot find {prog!r} on $PATH')
        self.prog = prog


class SubprocessFailure(RebootToError):
    """A command exited nonzero for a reason not otherwise classified."""
    exit_code = 9

    def __init__(self, argv, returncode, output=''):
        cmd = ' '.join(argv)
        msg = f'{cmd!r} exited with status {returncode}'
        output = (output or '').strip()
        if output:
            msg += f': {output}'
        super().__init__(msg)
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output


class ListingFailure(SubprocessFailure):
    """The listing command ran but failed (e.g., non-UEFI firmware)."""
    exit_code = 4


class ListingParseFailure(RebootToError):
    """The listing command's output cannot be trusted as a boot menu."""
    exit_code = 5


class NotFound(RebootToError):
    """Direct-mode lookup matched no boot entry."""
    exit_code = 6

    def __init__(self, token):
        super().__init__(f'no UEFI boot entry matches {token!r}')
        self.token = token


class AmbiguousMatch(RebootToError):
    """Direct-mode lookup matched more than one boot entry."""
    exit_code = 7

    def __init__(self, token, idents):
        idents = list(idents)
        super().__init__(f'{token!r} matches several boot entries'
                         f' ({", ".join(idents)}); select one by ID')
        self.token = token
        self.idents = idents


class PermissionDenied(RebootToError):
    """A privileged command was refused; re-run as root."""
    exit_code = 8

    def __init__(self, argv, detail=''):
        cmd = ' '.join(argv)
        msg = f'permission denied running {cmd!r}'
        detail = (detail or '').strip()
        if detail:
            msg += f' [{detail}]'
        msg += '; re-run with elevated privileges (e.g., sudo)'
        super().__init__(msg)
        self.argv = list(argv)
        self.detail = detail


class UserCancelled(RebootToError):
    """The user aborted; nothing was changed."""
    exit_code = 10

    def __init__(self, msg='cancelled; nothing changed'):
        super().__init__(msg)
