# filename: check_twemproxy/fetcher.py
# -*- coding: utf-8 -*-
"""
Status fetcher.

twemproxy serves its stats on a plain TCP port: connect, the proxy writes one
JSON document and closes the connection. Some deployments put an HTTP sidecar
in front of that port, hence the optional ``http`` transport.
"""
from __future__ import annotations

import json
import socket
import time
from typing import Any, Optional

import httpx
from loguru import logger

from .errors import FetchError, SnapshotFormatError
from .models import Snapshot

__all__ = ["fetch_status", "read_tcp", "read_http"]

CHUNK = 65536


def read_tcp(host: str, port: int, timeout: float) -> bytes:
    """Read everything the stats port sends until it closes the connection."""
    chunks = []
    with socket.create_connection((host, port), timeout=timeout) as sock:
        sock.settimeout(timeout)
        while True:
            data = sock.recv(CHUNK)
            if not data:
                break
            chunks.append(data)
    return b"".join(chunks)


def read_http(host: str, port: int, timeout: float, client: Optional[httpx.Client] = None) -> bytes:
    url = f"http://{host}:{port}/"
    if client is not None:
        resp = client.get(url, timeout=timeout)
        resp.raise_for_status()
        return resp.content
    with httpx.Client(timeout=timeout, headers={"User-Agent": "check-twemproxy/1.0"}) as own:
        resp = own.get(url)
        resp.raise_for_status()
        return resp.content


def _decode(body: bytes) -> Any:
    if not body.strip():
        raise FetchError("empty reply from stats endpoint")
    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise FetchError(f"stats endpoint returned invalid JSON: {exc}") from exc


def fetch_status(
    host: str,
    port: int,
    *,
    timeout: float = 5.0,
    transport: str = "tcp",
    client: Optional[httpx.Client] = None,
) -> Snapshot:
    """Fetch and parse the current stats of ``host:port``. Raises FetchError on any failure."""
    t0 = time.monotonic()
    try:
        if transport == "tcp":
            body = read_tcp(host, port, timeout)
        elif transport == "http":
            body = read_http(host, port, timeout, client=client)
        else:
            raise FetchError(f"unsupported transport: {transport}")
    except httpx.HTTPStatusError as exc:
        raise FetchError(f"stats endpoint {host}:{port} answered HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"cannot fetch stats from {host}:{port}: {exc}") from exc
    except OSError as exc:
        raise FetchError(f"cannot fetch stats from {host}:{port}: {exc}") from exc

    logger.debug("fetched {} bytes from {}:{} via {} in {} ms", len(body), host, port, transport,
                 int((time.monotonic() - t0) * 1000))
    payload = _decode(body)
    try:
        return Snapshot.from_payload(payload)
    except SnapshotFormatError as exc:
        raise FetchError(str(exc)) from exc
