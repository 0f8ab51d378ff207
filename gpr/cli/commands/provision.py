from __future__ import annotations

import typer

from gpr.cli.context import build_context
from gpr.core.result import Err
from gpr.output.errors import print_publish_error, publish_error_exit_code
from gpr.tools.provisioner import BUNDLETOOL


def provision(
    github_token: str | None = typer.Option(
        None,
        "--github-token",
        envvar=["GPR_GITHUB_TOKEN", "GITHUB_TOKEN"],
        help="GitHub token for the releases API.",
    ),
) -> None:
    """Install bundletool into the tool cache and print its location."""
    ctx = build_context()
    provisioner = ctx.provisioner(github_token=github_token)

    result = provisioner.ensure(BUNDLETOOL)
    if isinstance(result, Err):
        print_publish_error(result.error, ctx.console)
        raise typer.Exit(code=publish_error_exit_code(result.error))

    locator = result.value
    ctx.console.success(f"{BUNDLETOOL.id} {locator.version or ''}".rstrip())
    ctx.console.print(str(locator.path))
