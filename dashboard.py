"""
Dashboard view state, concurrent resource loading and role/tab layout.

The three dashboard resources (submissions, lessons, stats) are loaded in
parallel and joined before rendering. Each resource keeps its own fetch
status, so one failing source leaves only its own section empty.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from seed_data import DEFAULT_STUDENT, DEFAULT_TEACHER

logger = logging.getLogger(__name__)

RESOURCES = ("submissions", "lessons", "stats")


class FetchStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class ResourceState:
    status: FetchStatus = FetchStatus.IDLE
    data: list = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.SUCCESS


@dataclass
class DashboardState:
    resources: dict[str, ResourceState] = field(
        default_factory=lambda: {name: ResourceState() for name in RESOURCES}
    )

    def __getitem__(self, name: str) -> ResourceState:
        return self.resources[name]

    @property
    def loading(self) -> bool:
        return any(r.status is FetchStatus.LOADING for r in self.resources.values())

    @property
    def failed(self) -> list[str]:
        return [name for name, r in self.resources.items() if r.status is FetchStatus.ERROR]


def load_dashboard(loaders: Mapping[str, Callable[[], list]], max_workers: int = 3) -> DashboardState:
    """Run every loader concurrently and collect the results.

    A loader that raises is logged and its resource is left at the empty
    default with status ``error``. Nothing is retried.
    """
    state = DashboardState(resources={name: ResourceState() for name in loaders})
    for res in state.resources.values():
        res.status = FetchStatus.LOADING

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {name: pool.submit(loader) for name, loader in loaders.items()}
        for name, future in futures.items():
            res = state.resources[name]
            try:
                res.data = list(future.result())
                res.status = FetchStatus.SUCCESS
            except Exception as exc:
                logger.error("Failed to fetch %s: %s", name, exc, exc_info=True)
                res.data = []
                res.status = FetchStatus.ERROR
                res.error = str(exc)
    return state


# ── Roles and tabs ─────────────────────────────────────────


class Role(str, enum.Enum):
    TEACHER = "teacher"
    STUDENT = "student"

    @property
    def other(self) -> "Role":
        return Role.STUDENT if self is Role.TEACHER else Role.TEACHER

    @classmethod
    def parse(cls, value: Any) -> "Role":
        try:
            return cls(value)
        except ValueError:
            return cls.TEACHER


@dataclass(frozen=True)
class Tab:
    id: str
    label: str


TABS: dict[Role, tuple[Tab, ...]] = {
    Role.TEACHER: (
        Tab("stats", "Stats"),
        Tab("marking", "Marking"),
        Tab("profile", "Profile"),
    ),
    Role.STUDENT: (
        Tab("soma", "Soma"),
        Tab("practice", "Practice"),
        Tab("submit", "Submit"),
    ),
}


def tabs_for(role: Role) -> tuple[Tab, ...]:
    return TABS[role]


def resolve_tab(role: Role, tab_id: str | None) -> Tab:
    """Pick the requested tab for ``role``, falling back to its first tab."""
    tabs = TABS[role]
    for tab in tabs:
        if tab.id == tab_id:
            return tab
    return tabs[0]


def user_for(role: Role) -> dict:
    return DEFAULT_TEACHER if role is Role.TEACHER else DEFAULT_STUDENT
