#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Choosing the boot entry: directly from a command-line token, or via the menu.
"""
# pylint: disable=too-few-public-methods
import re
import logging
from dataclasses import dataclass

from reboot_to.errors import AmbiguousMatch, NotFound

_log = logging.getLogger(__name__)

_log_debug = _log.debug

BY_ANY, BY_ID, BY_NAME = 'any', 'id', 'name'

REBOOT, SET_NEXT = 'reboot', 'next'  # what to do with the chosen entry


@dataclass(frozen=True)
class DirectSelection:
    """ Entry named on the command line; 'by' restricts what 'token' may match """
    token: str
    by: str = BY_ANY
    action: str = REBOOT


@dataclass(frozen=True)
class InteractiveSelection:
    """ Entry picked in the terminal menu (which also picks the action) """


def normalize_ident(token):
    """ '1' -> '0001', '00af' -> '00AF'; None if not a boot number """
    token = token.strip()
    if not re.match(r'[0-9a-f]{1,4}$', token, re.IGNORECASE):
        return None
    return token.upper().zfill(4)


def lookup(entries, token, by=BY_ANY):
    """ Find the single entry named by 'token'.

    A boot number match wins over a label match; labels must match exactly.
    Raises NotFound for no match and AmbiguousMatch for several.
    """
    if by in (BY_ANY, BY_ID):
        ident = normalize_ident(token)
        if ident is not None:
            for entry in entries:
                if entry.ident.upper().zfill(4) == ident:
                    _log_debug('%r matched boot number %s', token, entry.ident)
                    return entry
    if by in (BY_ANY, BY_NAME):
        hits = [entry for entry in entries if entry.label == token]
        if len(hits) > 1:
            raise AmbiguousMatch(token, [entry.ident for entry in hits])
        if hits:
            _log_debug('%r matched label of %s', token, hits[0].ident)
            return hits[0]
    raise NotFound(token)
