"""End-to-end publish pipeline.

    list directory -> classify -> extract package info -> edit session

Everything before the edit session is local; a bad release directory or a
broken artifact fails before the Play API client is even built.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from gpr.core.result import Err, Result
from gpr.output.console import Style
from gpr.publish.classifier import classify_assets, list_release_directory
from gpr.publish.client import GooglePlayClient, PlayApiError, PublisherClient
from gpr.publish.errors import EditOpenFailed, PublishError
from gpr.publish.session import EditSessionOrchestrator, PublishOutcome

if TYPE_CHECKING:
    from gpr.core.config import PublishConfig
    from gpr.output.console import ConsoleProtocol
    from gpr.publish.extractor import MetadataExtractor

__all__ = ["ClientFactory", "publish_release"]

ClientFactory = Callable[[Path], Result[PublisherClient, PlayApiError]]


def _google_client(key_file: Path) -> Result[PublisherClient, PlayApiError]:
    return GooglePlayClient.from_service_account(key_file)


def publish_release(
    *,
    config: PublishConfig,
    console: ConsoleProtocol,
    extractor: MetadataExtractor,
    client_factory: ClientFactory = _google_client,
) -> Result[PublishOutcome, PublishError]:
    """Publish the release directory named in ``config``."""
    files = list_release_directory(config.release_directory)
    if isinstance(files, Err):
        return files

    classified = classify_assets(config.release_directory, files.value)
    if isinstance(classified, Err):
        return classified
    assets = classified.value
    console.print(f"{assets.kind}: {assets.primary.name}", Style.DIM)

    package = extractor.extract(assets.primary, assets.kind)
    if isinstance(package, Err):
        return package
    info = package.value
    console.info(f"{info.package_name} {info.release_name}")

    client = client_factory(config.credentials_path)
    if isinstance(client, Err):
        return Err(EditOpenFailed(package_name=info.package_name, reason=str(client.error)))

    orchestrator = EditSessionOrchestrator(client.value, console, config)
    return orchestrator.run(assets.with_package(info))
