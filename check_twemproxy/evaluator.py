# filename: check_twemproxy/evaluator.py
# -*- coding: utf-8 -*-
"""
Delta evaluation between two snapshots.

Neither snapshot alone says much: a shard with zero connections may just be
between reconnects. What matters is whether counters moved since the last
check:

* ``server_timedout`` changed -> timeout event.
* ``server_connections == 0`` and ``requests`` did not advance -> disconnect.
  A shard that is absent from the previous snapshot has no evidence of
  progress and counts as disconnected too.

Without a previous snapshot nothing is compared; that run only records the
baseline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Set

from loguru import logger

from .models import Snapshot

__all__ = ["ProblemTally", "evaluate"]


@dataclass
class ProblemTally:
    disconnects: int = 0
    timeouts: int = 0
    clusters: Set[str] = field(default_factory=set)
    disconnected: Set[str] = field(default_factory=set)
    timedout: Set[str] = field(default_factory=set)

    @property
    def has_problems(self) -> bool:
        return bool(self.disconnects or self.timeouts)


def evaluate(current: Snapshot, previous: Optional[Snapshot]) -> ProblemTally:
    tally = ProblemTally()
    if previous is None:
        return tally

    for cluster, server, now in current.iter_servers():
        before = previous.server(cluster, server)

        if before is not None and now.server_timedout - before.server_timedout != 0:
            tally.timeouts += 1
            tally.clusters.add(cluster)
            tally.timedout.add(server)

        if now.server_connections > 0:
            continue
        if before is not None and now.requests - before.requests > 0:
            # no connection right now, but requests were served since the last check
            continue

        tally.disconnects += 1
        tally.disconnected.add(server)
        tally.clusters.add(cluster)

    if tally.has_problems:
        logger.debug("evaluation: {} disconnects, {} timeouts in {}", tally.disconnects, tally.timeouts,
                     sorted(tally.clusters))
    return tally
