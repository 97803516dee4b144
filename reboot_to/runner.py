#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thin wrapper for running the external programs (efibootmgr, shutdown).

Anything with a 'run(command, args)' method returning a CommandResult can
stand in for CommandRunner (the tests use a fake one).
"""
import re
import shutil
import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from reboot_to.errors import (ExecutableNotFound, PermissionDenied,
                              SubprocessFailure)

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_warn = _log.warning

# How efibootmgr, shutdown/systemctl and sudo word a refusal.
PERMISSION_RE = re.compile(r'permission denied|operation not permitted'
                           r'|must be (?:run as )?(?:root|superuser)'
                           r'|authentication (?:is )?required|access denied'
                           r'|not privileged|insufficient privileges',
                           re.IGNORECASE)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one finished command.

    Attributes:
        argv: the full command line that was run
        returncode: exit status of the command
        stdout: captured standard output (bytes; decoding is the caller's job)
        stderr: captured standard error (decoded, lenient)
    """
    argv: tuple
    returncode: int
    stdout: bytes = b''
    stderr: str = ''

    @property
    def ok(self):
        """ True if the command exited zero """
        return self.returncode == 0

    def text(self):
        """ stdout decoded as UTF-8 (raises UnicodeDecodeError) """
        return self.stdout.decode('utf-8')


class CommandRunner:
    """ Runs commands to completion with captured output """

    @staticmethod
    def which(command: str) -> Optional[str]:
        """ Resolve a program name on $PATH """
        return shutil.which(command)

    def run(self, command: str, args: List[str]) -> CommandResult:
        """ Run 'command' with 'args' and wait for it to exit.

        Raises ExecutableNotFound if the program is not on $PATH, and
        PermissionDenied if the OS refuses to execute it; a nonzero exit
        is NOT an exception here (see raise_for_status()).
        """
        path = self.which(command)
        if path is None:
            raise ExecutableNotFound(command)
        argv = [path, *args]
        _log_debug('running: %s', ' '.join(argv))
        try:
            proc = subprocess.run(argv, capture_output=True, check=False)
        except FileNotFoundError as exc:
            raise ExecutableNotFound(command) from exc
        except PermissionError as exc:
            raise PermissionDenied([command, *args], str(exc)) from exc
        stderr = proc.stderr.decode('utf-8', errors='replace')
        _log_debug('%s exited with status %d', command, proc.returncode)
        if stderr.strip():
            _log_debug('%s stderr: %s', command, stderr.strip())
        return CommandResult(argv=(command, *args), returncode=proc.returncode,
                             stdout=proc.stdout, stderr=stderr)


def looks_like_permission_problem(result: CommandResult) -> bool:
    """ Does a failed command's output read like a privilege refusal? """
    text = result.stderr + '\n' + result.stdout.decode('utf-8', errors='replace')
    return bool(PERMISSION_RE.search(text))


def raise_for_status(result: CommandResult, failure=SubprocessFailure):
    """ Turn a nonzero exit into PermissionDenied or 'failure'.

    'failure' is a SubprocessFailure subclass so that callers (e.g., the
    listing) can report their own exit code for a plain failure.
    """
    if result.ok:
        return result
    detail = result.stderr.strip() or result.stdout.decode(
        'utf-8', errors='replace').strip()
    if looks_like_permission_problem(result):
        _log_warn('%s refused: %s', result.argv[0], detail)
        raise PermissionDenied(result.argv, detail)
    raise failure(result.argv, result.returncode, detail)
