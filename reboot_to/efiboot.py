#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Reading and setting UEFI boot entries via efibootmgr, plus the reboot itself.
"""
# pylint: disable=too-few-public-methods
import re
import sys
import shlex
import logging
from dataclasses import dataclass
from typing import Optional

from reboot_to.errors import ListingFailure, ListingParseFailure
from reboot_to.runner import CommandRunner, raise_for_status

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info

EFIBOOTMGR = 'efibootmgr'
REBOOT_CMD = 'shutdown -r now'

# Use slots for memory efficiency and typo protection on Python 3.10+
_dataclass_kwargs = {'slots': True} if sys.version_info >= (3, 10) else {}

# Boot0024* Linux Boot Manager<TAB>HD(4,GPT,cd15e3b1-...)
# The device path after the TAB is only printed by newer efibootmgr;
# the '*' (active) marker may be absent.
ENTRY_RE = re.compile(r'^Boot([0-9a-f]{4})(\*?)[ \t]+([^\t]*)', re.IGNORECASE)
FIELD_RE = re.compile(r'^(BootCurrent|BootNext|BootOrder|Timeout):\s*(.*?)\s*$')


@dataclass(frozen=True, **_dataclass_kwargs)
class BootEntry:
    """One boot entry from 'efibootmgr'.

    Attributes:
        ident: boot number as printed (e.g., '0007')
        label: human-readable label (e.g., 'Ubuntu')
        active: True if efibootmgr marked the entry with '*'

    Example:
        'Boot0007* Ubuntu<TAB>HD(...)' => ident='0007', label='Ubuntu', active=True
    """
    ident: str
    label: str
    active: bool = False


@dataclass(frozen=True, **_dataclass_kwargs)
class BootListing:
    """ The digested output of one 'efibootmgr' run """
    entries: tuple = ()
    current: Optional[str] = None
    next: Optional[str] = None
    order: tuple = ()
    timeout: Optional[str] = None

    def marker(self, entry):
        """ 'nxt'/'cur' if the entry is BootNext/BootCurrent, else '' """
        if self.next is not None and entry.ident.upper() == self.next.upper():
            return 'nxt'
        if self.current is not None and entry.ident.upper() == self.current.upper():
            return 'cur'
        return ''


def parse_listing(text):
    """ Digest the output of 'efibootmgr' into a BootListing.

    Lines that are not entries or known fields are skipped. Raises
    ListingParseFailure if there are no entries or a boot number repeats.
    """
    entries, seen, fields = [], set(), {}
    for line in text.splitlines():
        mat = FIELD_RE.match(line)
        if mat:
            fields[mat.group(1)] = mat.group(2)
            continue

        mat = ENTRY_RE.match(line)
        if not mat:
            if line.strip():
                _log_debug('skipping line: %r', line)
            continue
        ident, star, label = mat.group(1), mat.group(2), mat.group(3).strip()
        if not label:
            _log_debug('skipping entry without label: %r', line)
            continue
        if ident.upper() in seen:
            raise ListingParseFailure(f'boot entry {ident} is listed twice')
        seen.add(ident.upper())
        entries.append(BootEntry(ident=ident, label=label, active=bool(star)))

    if not entries:
        raise ListingParseFailure(f'no boot entries found in {EFIBOOTMGR} output')

    def none_if_blank(value):
        value = (value or '').strip()
        return None if value in ('', '---') else value

    order = tuple(x.strip() for x in fields.get('BootOrder', '').split(',') if x.strip())
    return BootListing(entries=tuple(entries),
                       current=none_if_blank(fields.get('BootCurrent')),
                       next=none_if_blank(fields.get('BootNext')),
                       order=order,
                       timeout=none_if_blank(fields.get('Timeout')))


class EfiBootMgr:
    """ Read the boot entries and set BootNext via efibootmgr """

    def __init__(self, runner=None, program=EFIBOOTMGR):
        self.runner = runner if runner else CommandRunner()
        self.program = program

    def list_entries(self):
        """ Run 'efibootmgr' and parse its listing """
        result = self.runner.run(self.program, [])
        raise_for_status(result, failure=ListingFailure)
        try:
            text = result.text()
        except UnicodeDecodeError as exc:
            raise ListingParseFailure(f'{self.program} output is not UTF-8 [{exc}]') from exc
        listing = parse_listing(text)
        _log_info('found %d boot entries', len(listing.entries))
        return listing

    def set_next(self, ident):
        """ Make 'ident' the one-time boot target (BootNext) """
        result = self.runner.run(self.program, ['--bootnext', ident])
        raise_for_status(result)
        _log_info('BootNext set to %s', ident)
        return result


class Rebooter:
    """ Restart the machine with the system's reboot command """

    def __init__(self, runner=None, command=REBOOT_CMD):
        self.runner = runner if runner else CommandRunner()
        self.argv = shlex.split(command) if isinstance(command, str) else list(command)
        if not self.argv:
            raise ValueError('empty reboot command')

    def reboot(self):
        """ Run the reboot command; normally the process does not outlive it """
        _log_info('rebooting: %s', ' '.join(self.argv))
        result = self.runner.run(self.argv[0], self.argv[1:])
        raise_for_status(result)
        return result
