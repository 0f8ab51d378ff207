from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from gpr.cli.context import build_context
from gpr.core.config import build_publish_config
from gpr.core.result import Err
from gpr.output.console import ConsoleProtocol, Style
from gpr.output.errors import print_publish_error, publish_error_exit_code
from gpr.publish.errors import PublishError
from gpr.publish.extractor import MetadataExtractor
from gpr.publish.service import publish_release


def _fail(error: PublishError, console: ConsoleProtocol) -> NoReturn:
    print_publish_error(error, console)
    raise typer.Exit(code=publish_error_exit_code(error))


def publish(
    release_directory: str | None = typer.Option(
        None,
        "--release-directory",
        envvar="GPR_RELEASE_DIRECTORY",
        help="Directory with the .apk or .aab to publish (plus optional .obb/.zip).",
    ),
    credentials: str | None = typer.Option(
        None,
        "--credentials",
        envvar="GPR_CREDENTIALS",
        help="Service account JSON key (default: $GOOGLE_APPLICATION_CREDENTIALS).",
    ),
    track: str = typer.Option("internal", "--track", envvar="GPR_TRACK", help="Target track."),
    release_status: str = typer.Option(
        "draft",
        "--release-status",
        envvar="GPR_RELEASE_STATUS",
        help="draft, inProgress, completed or halted.",
    ),
    release_name: str | None = typer.Option(
        None,
        "--release-name",
        envvar="GPR_RELEASE_NAME",
        help="Release name (default: '<versionCode> (<versionName>)').",
    ),
    user_fraction: float | None = typer.Option(
        None,
        "--user-fraction",
        envvar="GPR_USER_FRACTION",
        help="Rollout fraction in (0, 1); only used for inProgress/halted.",
    ),
    in_app_update_priority: int | None = typer.Option(
        None,
        "--in-app-update-priority",
        envvar="GPR_IN_APP_UPDATE_PRIORITY",
        help="In-app update priority, 0 to 5.",
    ),
    metadata: str | None = typer.Option(
        None,
        "--metadata",
        envvar="GPR_METADATA",
        help="Store listing metadata: inline JSON or path to a JSON file.",
    ),
    changes_not_sent_for_review: bool = typer.Option(
        False,
        "--changes-not-sent-for-review",
        envvar="GPR_CHANGES_NOT_SENT_FOR_REVIEW",
        help="Commit without sending the changes for review.",
    ),
    merge_policy: str = typer.Option(
        "append",
        "--merge-policy",
        envvar="GPR_MERGE_POLICY",
        help="replace, append or halt-previous.",
    ),
    github_token: str | None = typer.Option(
        None,
        "--github-token",
        envvar=["GPR_GITHUB_TOKEN", "GITHUB_TOKEN"],
        help="GitHub token for downloading bundletool.",
    ),
) -> None:
    """Publish a release directory to a Google Play track."""
    ctx = build_context()
    console = ctx.console

    config = build_publish_config(
        release_directory=release_directory,
        credentials=credentials,
        track=track,
        status=release_status,
        release_name=release_name,
        user_fraction=user_fraction,
        update_priority=in_app_update_priority,
        metadata=metadata,
        changes_not_sent_for_review=changes_not_sent_for_review,
        merge_policy=merge_policy,
        github_token=github_token,
        cwd=Path.cwd(),
    )
    if isinstance(config, Err):
        _fail(config.error, console)

    extractor = MetadataExtractor(
        resolver=ctx.resolver(),
        provisioner=ctx.provisioner(github_token=config.value.github_token),
    )
    outcome = publish_release(config=config.value, console=console, extractor=extractor)
    if isinstance(outcome, Err):
        _fail(outcome.error, console)

    result = outcome.value
    console.success(
        f"{result.package_name} {result.release.name} committed to {result.track} "
        f"(edit {result.edit_id})"
    )
    console.print(" -> ".join(str(s) for s in result.states), Style.DIM)
