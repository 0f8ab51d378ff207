"""Typed publish configuration.

The CLI collects raw option values; ``build_publish_config`` validates them
and returns a frozen ``PublishConfig``. Validation runs before any network
call so configuration mistakes fail fast.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from gpr.core.result import Err, Ok, Result
from gpr.publish.errors import ConfigError, ConfigInvalid
from gpr.publish.merge import DEFAULT_MERGE_POLICY, MergePolicy
from gpr.publish.metadata import Metadata, load_metadata
from gpr.publish.model import ReleaseStatus

__all__ = [
    "PublishConfig",
    "build_publish_config",
    "resolve_credentials",
    "CREDENTIALS_ENV",
    "DEFAULT_TRACK",
    "DEFAULT_STATUS",
    "MAX_UPDATE_PRIORITY",
]

CREDENTIALS_ENV = "GOOGLE_APPLICATION_CREDENTIALS"
DEFAULT_TRACK = "internal"
DEFAULT_STATUS = ReleaseStatus.DRAFT
MAX_UPDATE_PRIORITY = 5


@dataclass(frozen=True, slots=True)
class PublishConfig:
    """Validated inputs of one publish run.

    Attributes:
        release_directory: Directory holding the release artifacts
        credentials_path: Service-account JSON key file
        track: Target track name
        status: Status of the new release
        release_name: Explicit release name (None derives it from the package)
        user_fraction: Rollout fraction, only sent for staged statuses
        update_priority: In-app update priority (0-5)
        metadata: Optional store-listing metadata
        changes_not_sent_for_review: Ask Play not to send the commit for review
        merge_policy: How the release is merged into the track
        github_token: Token for the GitHub API used by tool provisioning
    """

    release_directory: Path
    credentials_path: Path
    track: str = DEFAULT_TRACK
    status: ReleaseStatus = DEFAULT_STATUS
    release_name: str | None = None
    user_fraction: float | None = None
    update_priority: int | None = None
    metadata: Metadata | None = None
    changes_not_sent_for_review: bool = False
    merge_policy: MergePolicy = DEFAULT_MERGE_POLICY
    github_token: str | None = None


def resolve_credentials(explicit: str | None) -> Path | None:
    """Return the credentials path from the option or GOOGLE_APPLICATION_CREDENTIALS."""
    value = (explicit or "").strip() or os.environ.get(CREDENTIALS_ENV, "").strip()
    return Path(value).expanduser() if value else None


def build_publish_config(
    *,
    release_directory: str | None,
    credentials: str | None,
    track: str | None = None,
    status: str | None = None,
    release_name: str | None = None,
    user_fraction: float | None = None,
    update_priority: int | None = None,
    metadata: str | None = None,
    changes_not_sent_for_review: bool = False,
    merge_policy: str | None = None,
    github_token: str | None = None,
    cwd: Path | None = None,
) -> Result[PublishConfig, ConfigError]:
    """Validate raw inputs into a PublishConfig.

    Args:
        release_directory: Directory with artifacts (required)
        credentials: Service-account key path; falls back to the environment
        track: Track name (default "internal")
        status: draft, inProgress, completed or halted (default draft)
        release_name: Optional explicit release name
        user_fraction: Fraction in (0, 1)
        update_priority: Integer 0..5
        metadata: Inline JSON or path to a JSON file
        changes_not_sent_for_review: Commit without sending for review
        merge_policy: replace, append or halt-previous
        github_token: Token for GitHub API calls
        cwd: Base directory for relative paths (default: process cwd)

    Returns:
        Ok with PublishConfig, or Err with the first problem found
    """
    base = cwd or Path.cwd()

    if not release_directory or not release_directory.strip():
        return Err(ConfigInvalid(field="release-directory", reason="is required"))
    directory = Path(release_directory.strip()).expanduser()
    if not directory.is_absolute():
        directory = base / directory

    credentials_path = resolve_credentials(credentials)
    if credentials_path is None:
        return Err(
            ConfigInvalid(
                field="credentials",
                reason=f"missing service account credentials; pass --credentials or set {CREDENTIALS_ENV}",
            )
        )
    if not credentials_path.is_file():
        return Err(
            ConfigInvalid(field="credentials", reason=f"file not found: {credentials_path}")
        )

    parsed_status = DEFAULT_STATUS
    if status:
        found = ReleaseStatus.parse(status.strip())
        if found is None:
            allowed = ", ".join(s.value for s in ReleaseStatus)
            return Err(ConfigInvalid(field="release-status", reason=f"must be one of: {allowed}"))
        parsed_status = found

    if user_fraction is not None and not 0.0 < user_fraction < 1.0:
        return Err(ConfigInvalid(field="user-fraction", reason="must be in (0, 1)"))

    if update_priority is not None and not 0 <= update_priority <= MAX_UPDATE_PRIORITY:
        return Err(
            ConfigInvalid(
                field="in-app-update-priority",
                reason=f"must be between 0 and {MAX_UPDATE_PRIORITY}",
            )
        )

    policy = DEFAULT_MERGE_POLICY
    if merge_policy:
        found_policy = MergePolicy.parse(merge_policy.strip())
        if found_policy is None:
            allowed = ", ".join(p.value for p in MergePolicy)
            return Err(ConfigInvalid(field="merge-policy", reason=f"must be one of: {allowed}"))
        policy = found_policy

    parsed_metadata: Metadata | None = None
    if metadata and metadata.strip():
        mres = load_metadata(metadata, cwd=base)
        if isinstance(mres, Err):
            return mres
        parsed_metadata = mres.value

    return Ok(
        PublishConfig(
            release_directory=directory,
            credentials_path=credentials_path,
            track=(track or "").strip() or DEFAULT_TRACK,
            status=parsed_status,
            release_name=(release_name or "").strip() or None,
            user_fraction=user_fraction,
            update_priority=update_priority,
            metadata=parsed_metadata,
            changes_not_sent_for_review=changes_not_sent_for_review,
            merge_policy=policy,
            github_token=(github_token or "").strip() or None,
        )
    )
