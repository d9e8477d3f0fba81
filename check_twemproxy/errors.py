# -*- coding: utf-8 -*-
"""Exception taxonomy for the twemproxy check."""
from __future__ import annotations


class CheckError(Exception):
    """Base class for every failure the check reports as UNKNOWN."""


class ArgumentError(CheckError):
    """Bad or missing command line input."""


class FetchError(CheckError):
    """Stats endpoint unreachable or returned an unusable payload."""


class StoreError(CheckError):
    """Persisted snapshot unreadable, corrupt or not writable."""


class SnapshotFormatError(CheckError, ValueError):
    """Payload does not have the cluster -> server -> counters shape."""
