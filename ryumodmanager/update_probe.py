"""Background check for a newer release.

The check runs on a daemon thread started early in the run and is joined with
a bounded wait near the end. A join that times out only stops waiting: the
thread keeps running and its result is never read.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Generic, TypeVar

import requests

from .constants import AUTHOR, RELEASE_NAME_MARKER, REPO, VERSION
from .models import ReleaseInfo, UpdateCheckResult, UpdateStatus
from .tooling import ReleaseLookup

API_BASE = "https://api.github.com"

T = TypeVar("T")


class ReleaseClient:
    """Minimal GitHub client for the latest release of a repository."""

    def __init__(self, timeout: float = 10.0, session: requests.Session | None = None) -> None:
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "Accept": "application/vnd.github+json",
            "User-Agent": REPO,
        })

    def latest_release(self, owner: str, repo: str) -> ReleaseInfo | None:
        url = f"{API_BASE}/repos/{owner}/{repo}/releases/latest"
        resp = self._session.get(url, timeout=self._timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        body: dict[str, Any] = resp.json()
        return ReleaseInfo(
            tag=str(body.get("tag_name") or ""),
            name=str(body.get("name") or ""),
            url=str(body.get("html_url") or ""),
        )


def check_for_updates(
    lookup: ReleaseLookup,
    current_version: str = VERSION,
    owner: str = AUTHOR,
    repo: str = REPO,
) -> UpdateCheckResult:
    try:
        release = lookup.latest_release(owner, repo)
    except (requests.RequestException, ValueError) as exc:
        return UpdateCheckResult(UpdateStatus.FAILED, current_version, error=str(exc))

    if release is not None and RELEASE_NAME_MARKER in release.name and release.tag != current_version:
        return UpdateCheckResult(UpdateStatus.AVAILABLE, current_version, release=release)
    return UpdateCheckResult(UpdateStatus.UP_TO_DATE, current_version, release=release)


class BackgroundTask(Generic[T]):
    """Runs ``work`` once on a daemon thread; ``join`` waits at most ``timeout`` seconds."""

    def __init__(self, work: Callable[[], T], name: str = "background-task") -> None:
        self._work = work
        self._done = threading.Event()
        self._result: T | None = None
        self._error: BaseException | None = None
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def _run(self) -> None:
        try:
            self._result = self._work()
        except Exception as exc:
            self._error = exc
        finally:
            self._done.set()

    def start(self) -> "BackgroundTask[T]":
        self._thread.start()
        return self

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def join(self, timeout: float) -> T | None:
        """Return the result, or None if the work failed or did not finish in time."""

        if not self._done.wait(timeout):
            return None
        if self._error is not None:
            return None
        return self._result

    @property
    def error(self) -> BaseException | None:
        return self._error


class UpdateProbe:
    def __init__(self, lookup: ReleaseLookup, current_version: str = VERSION) -> None:
        self._lookup = lookup
        self._current_version = current_version
        self._task: BackgroundTask[UpdateCheckResult] | None = None

    @property
    def started(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        if self._task is not None:
            return
        self._task = BackgroundTask(
            lambda: check_for_updates(self._lookup, self._current_version),
            name="update-probe",
        ).start()

    def join(self, timeout: float) -> UpdateCheckResult:
        if self._task is None:
            return UpdateCheckResult(UpdateStatus.FAILED, self._current_version, error="Update check was not started")
        result = self._task.join(timeout)
        if result is None:
            error = self._task.error
            reason = str(error) if error is not None else f"No answer within {timeout:g}s"
            return UpdateCheckResult(UpdateStatus.FAILED, self._current_version, error=reason)
        return result
