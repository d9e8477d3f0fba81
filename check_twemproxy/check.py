# filename: check_twemproxy/check.py
# -*- coding: utf-8 -*-
"""One check run: fetch, compare with the last snapshot, persist, report."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from loguru import logger

from .evaluator import evaluate
from .fetcher import fetch_status
from .models import Snapshot
from .reporter import Status, decide, status_line, unknown_line, verbose_lines
from .settings import CheckConfig
from .store import SnapshotStore

__all__ = ["CheckResult", "run_check"]

Fetch = Callable[..., Snapshot]


@dataclass
class CheckResult:
    status: Status
    lines: List[str] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return int(self.status)


def run_check(config: CheckConfig, store: SnapshotStore, fetch: Optional[Fetch] = None) -> CheckResult:
    """Never raises: every failure after argument parsing becomes UNKNOWN."""
    fetch = fetch or fetch_status
    try:
        current = fetch(config.host, config.port, timeout=config.timeout, transport=config.transport)
        previous = store.load(config.host)
        if previous is None:
            logger.info("no usable previous snapshot for {}, recording baseline", config.host)
        tally = evaluate(current, previous)
        store.save(config.host, current)
        status = decide(tally, config.warning, config.critical)
        lines = [status_line(status, config.host, tally)]
        if config.verbose:
            lines.extend(verbose_lines(current))
    except Exception as exc:  # pylint: disable=broad-except
        logger.error("check of {}:{} failed: {}", config.host, config.port, exc)
        logger.opt(exception=exc).debug("traceback")
        return CheckResult(Status.UNKNOWN, [unknown_line(str(exc) or type(exc).__name__)])
    return CheckResult(status, lines)
