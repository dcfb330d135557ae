"""Process list collection through psutil."""

from __future__ import annotations

import getpass
import logging
import time

import psutil

from process_tracker.core.errors import ProviderUnavailable
from process_tracker.models import RawObservation

_PROCESS_ATTRS = [
    "pid",
    "name",
    "exe",
    "status",
    "username",
    "create_time",
]

# psutil reports idle desktop applications as sleeping; only these count as gone.
_NOT_RUNNING_STATUSES = frozenset(
    {
        psutil.STATUS_STOPPED,
        psutil.STATUS_TRACING_STOP,
        psutil.STATUS_ZOMBIE,
        psutil.STATUS_DEAD,
    }
)

logger = logging.getLogger(__name__)


def _current_username() -> str | None:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return None


def _owned_by(username: str | None, owner: str | None) -> bool:
    if username is None or owner is None:
        return True
    # Windows reports DOMAIN\user
    return owner == username or owner.rsplit("\\", 1)[-1] == username


def collect_raw_observations(all_users: bool = False) -> list[RawObservation]:
    """Return one observation per live process visible to the current user."""

    timestamp = time.time()
    username = None if all_users else _current_username()
    observations: list[RawObservation] = []
    try:
        for proc in psutil.process_iter(attrs=_PROCESS_ATTRS):
            try:
                info = proc.info
                if not all_users and not _owned_by(username, info.get("username")):
                    continue
                status = str(info.get("status") or "")
                create_time = float(info.get("create_time") or timestamp)
                observations.append(
                    RawObservation(
                        identity=str(info.get("name") or ""),
                        path=str(info.get("exe") or ""),
                        is_running=bool(status) and status not in _NOT_RUNNING_STATUSES,
                        run_time_seconds=max(0, int(timestamp - create_time)),
                    )
                )
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
    except (psutil.Error, OSError) as exc:
        raise ProviderUnavailable(f"Could not enumerate processes: {exc}") from exc

    logger.debug("Collected %d raw process observations", len(observations))
    return observations
