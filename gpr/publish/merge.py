"""Track release merging.

``merge_releases`` is a pure function: the same inputs always produce the
same release list, and the incoming release appears exactly once.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from gpr.publish.model import ReleaseStatus, TrackRelease

__all__ = ["MergePolicy", "merge_releases"]


class MergePolicy(Enum):
    """How the incoming release is combined with a track's releases.

    REPLACE: the track ends up with the incoming release only.
    APPEND: existing releases are kept in order and the incoming release
        is added last.
    HALT_PREVIOUS: like APPEND, and every surviving in-progress rollout is
        halted so that only the new release keeps rolling out.
    """

    REPLACE = "replace"
    APPEND = "append"
    HALT_PREVIOUS = "halt-previous"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> MergePolicy | None:
        for policy in cls:
            if policy.value == value:
                return policy
        return None


DEFAULT_MERGE_POLICY = MergePolicy.APPEND


def _shares_version_code(release: TrackRelease, incoming: TrackRelease) -> bool:
    return bool(set(release.version_codes) & set(incoming.version_codes))


def merge_releases(
    existing: Sequence[TrackRelease],
    incoming: TrackRelease,
    policy: MergePolicy = DEFAULT_MERGE_POLICY,
) -> tuple[TrackRelease, ...]:
    """Compute a track's new release list.

    Releases that already carry one of the incoming version codes are
    dropped (the incoming release supersedes them). Survivors keep their
    relative order.

    Args:
        existing: Releases currently on the track
        incoming: The release being published
        policy: Merge policy

    Returns:
        The merged release list, with ``incoming`` last
    """
    if policy is MergePolicy.REPLACE:
        return (incoming,)

    survivors = [r for r in existing if not _shares_version_code(r, incoming)]

    if policy is MergePolicy.HALT_PREVIOUS:
        survivors = [
            r.with_status(ReleaseStatus.HALTED) if r.status is ReleaseStatus.IN_PROGRESS else r
            for r in survivors
        ]

    return (*survivors, incoming)
