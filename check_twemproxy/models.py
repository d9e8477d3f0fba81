# filename: check_twemproxy/models.py
# -*- coding: utf-8 -*-
"""
Typed view of a twemproxy stats document.

The proxy reports one JSON object per host. Pools (clusters) are nested
objects keyed by pool name, servers are nested objects inside a pool. Scalar
siblings (``service``, ``uptime``, ``client_connections`` ...) are metadata
and get skipped while parsing. Everything else must validate.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, Iterator, Optional, Tuple

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError, field_validator

from .errors import SnapshotFormatError

__all__ = ["ServerCounters", "Snapshot"]


class ServerCounters(BaseModel):
    model_config = ConfigDict(extra="allow")

    server_connections: int
    requests: int
    server_timedout: int

    @field_validator("server_connections", "requests", "server_timedout", mode="before")
    @classmethod
    def _no_bool(cls, v: Any) -> Any:
        # bool is an int subclass, pydantic would take true as 1
        if isinstance(v, bool):
            raise ValueError("counter must be a number, not a boolean")
        return v

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class Snapshot(BaseModel):
    clusters: Dict[str, Dict[str, ServerCounters]] = {}

    _raw: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    @classmethod
    def from_payload(cls, payload: Any) -> "Snapshot":
        """Build a snapshot from a decoded stats document."""
        if not isinstance(payload, dict):
            raise SnapshotFormatError(
                f"stats payload must be a JSON object, got {type(payload).__name__}"
            )
        clusters: Dict[str, Dict[str, Any]] = {}
        for name, pool in payload.items():
            if not isinstance(pool, dict):
                continue
            clusters[name] = {sid: counters for sid, counters in pool.items() if isinstance(counters, dict)}
        try:
            snap = cls(clusters=clusters)
        except ValidationError as exc:
            raise SnapshotFormatError(_summarize(exc)) from exc
        snap._raw = copy.deepcopy(payload)
        return snap

    def to_payload(self) -> Dict[str, Any]:
        """Document to persist: the raw payload when known, else the parsed counters."""
        if self._raw is not None:
            return self._raw
        return {
            name: {sid: counters.as_dict() for sid, counters in servers.items()}
            for name, servers in self.clusters.items()
        }

    def __eq__(self, other: object) -> bool:
        # the raw document is bookkeeping, equality is about the counters
        if not isinstance(other, Snapshot):
            return NotImplemented
        return self.clusters == other.clusters

    def raw_counters(self, cluster: str, server: str) -> Dict[str, Any]:
        """Counter map as the proxy reported it, falling back to the parsed values."""
        if self._raw is not None:
            raw = (self._raw.get(cluster) or {}).get(server)
            if isinstance(raw, dict):
                return raw
        counters = self.server(cluster, server)
        return counters.as_dict() if counters is not None else {}

    def server(self, cluster: str, server: str) -> Optional[ServerCounters]:
        return self.clusters.get(cluster, {}).get(server)

    def iter_servers(self) -> Iterator[Tuple[str, str, ServerCounters]]:
        for name, servers in self.clusters.items():
            for sid, counters in servers.items():
                yield name, sid, counters


def _summarize(exc: ValidationError) -> str:
    first = exc.errors()[0]
    # loc is ("clusters", <cluster>, <server>, <field>)
    where = "/".join(str(p) for p in first.get("loc", ())[1:])
    return f"invalid stats for {where or 'snapshot'}: {first.get('msg', 'validation error')}"
