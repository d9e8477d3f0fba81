# check_twemproxy/__init__.py
from .check import CheckResult, run_check
from .evaluator import ProblemTally, evaluate
from .fetcher import fetch_status
from .models import ServerCounters, Snapshot
from .reporter import Status
from .store import SnapshotStore

__version__ = "1.0.0"

__all__ = [
    "CheckResult",
    "ProblemTally",
    "ServerCounters",
    "Snapshot",
    "SnapshotStore",
    "Status",
    "evaluate",
    "fetch_status",
    "run_check",
]
