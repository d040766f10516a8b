"""Candidate-window policies.

A policy decides which open windows are scanned for matches: a fixed policy
name or a predicate over a buffer.
"""

from __future__ import annotations

from typing import Callable, Iterable, Union

from .buffer import Buffer
from .model import CandidateWindow

POLICY_CURRENT = "current-buffer-only"
POLICY_SAME_KIND = "same-kind-as-current"
POLICY_ALL = "all-open"
WINDOW_POLICIES = (POLICY_CURRENT, POLICY_SAME_KIND, POLICY_ALL)

# Short policy names kept for older configs.
POLICY_ALIASES = {
    "current": POLICY_CURRENT,
    "filetype": POLICY_SAME_KIND,
    "all": POLICY_ALL,
}

WindowPolicy = Union[str, Callable[[Buffer], bool]]


class UnknownPolicyError(ValueError):
    """A window policy name is not recognized."""


def normalize_policy(policy: WindowPolicy) -> WindowPolicy:
    """Return the canonical policy, resolving aliases.

    Raises ``UnknownPolicyError`` for unknown names and non-callable values.
    """
    if callable(policy):
        return policy
    if isinstance(policy, str):
        canonical = POLICY_ALIASES.get(policy, policy)
        if canonical in WINDOW_POLICIES:
            return canonical
    raise UnknownPolicyError(f"Invalid window policy: {policy!r}")


def _keeps(policy: WindowPolicy, current_kind: str, buffer: Buffer) -> bool:
    if policy == POLICY_ALL:
        return True
    if policy == POLICY_SAME_KIND:
        return buffer.kind == current_kind
    return bool(policy(buffer))  # type: ignore[operator]


def resolve_windows(
    policy: WindowPolicy,
    current: CandidateWindow,
    open_windows: Iterable[CandidateWindow],
) -> list[CandidateWindow]:
    """Select the windows to scan for one pass.

    ``current`` is the window holding the selection; it comes first when the
    policy keeps it. Windows are deduplicated by identity.
    """
    policy = normalize_policy(policy)
    if policy == POLICY_CURRENT:
        return [current]

    current_kind = current.buffer.kind
    selected: list[CandidateWindow] = []
    seen: set[int] = set()
    for window in (current, *open_windows):
        if id(window) in seen:
            continue
        seen.add(id(window))
        if _keeps(policy, current_kind, window.buffer):
            selected.append(window)
    return selected
