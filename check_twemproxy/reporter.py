# filename: check_twemproxy/reporter.py
# -*- coding: utf-8 -*-
"""Verdict, status line and verbose dump in monitoring-plugin format."""
from __future__ import annotations

import json
from enum import IntEnum
from typing import Iterable, List

from .evaluator import ProblemTally
from .models import Snapshot

__all__ = ["Status", "decide", "status_line", "unknown_line", "verbose_lines"]

PREFIX = "TWEMPROXY"


class Status(IntEnum):
    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


def decide(tally: ProblemTally, warning: int, critical: int) -> Status:
    """Only disconnects cross thresholds; timeouts are reported but never escalate."""
    if tally.disconnects > critical:
        return Status.CRITICAL
    if tally.disconnects > warning:
        return Status.WARNING
    return Status.OK


def _join(items: Iterable[str]) -> str:
    return ",".join(sorted(items))


def perfdata(tally: ProblemTally) -> str:
    return ";".join([
        f"disconnects={tally.disconnects}",
        f"timeouts={tally.timeouts}",
        f"clusters=[{_join(tally.clusters)}]",
        f"disconnected_shards={_join(tally.disconnected)}",
        f"timedout_shards={_join(tally.timedout)}",
    ])


def status_line(status: Status, host: str, tally: ProblemTally) -> str:
    if status is Status.OK:
        return f"{PREFIX} OK : {host}"
    parts: List[str] = []
    if tally.disconnected:
        parts.append(f"disconnected {_join(tally.disconnected)}")
    if tally.timedout:
        parts.append(f"timed out {_join(tally.timedout)}")
    message = host
    if parts:
        message += " " + ", ".join(parts)
    if tally.clusters:
        message += f" in clusters {_join(tally.clusters)}"
    return f"{PREFIX} {status.name} : {message} | {perfdata(tally)}"


def unknown_line(message: str) -> str:
    return f"{PREFIX} {Status.UNKNOWN.name} : {message}"


def verbose_lines(snapshot: Snapshot) -> List[str]:
    return [
        f"{cluster} {server} {json.dumps(snapshot.raw_counters(cluster, server), sort_keys=True)}"
        for cluster, server, _ in snapshot.iter_servers()
    ]
