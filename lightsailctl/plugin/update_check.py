"""
Warn when a newer lightsailctl is available.

The latest release is advertised by the Lightsail container API metadata
under the name "lightsailctlVersion". Failing to find out is never an
error, it only shows up in the debug log.
"""

__all__ = ["UpdateCheckError", "check_for_updates", "get_latest_version"]

import logging
from typing import Protocol

from lightsailctl.core import VERSION, Context, Semver
from lightsailctl.core.exceptions import BaseError

logger = logging.getLogger(__name__)

LATEST_VERSION_METADATA_NAME = "lightsailctlVersion"
DOWNLOAD_URL = (
    "https://lightsail.aws.amazon.com/ls/docs/en_us/articles/"
    "amazon-lightsail-install-software"
)


class UpdateCheckError(BaseError):
    status_code = 500


class ContainerAPIMetadataGetter(Protocol):
    def get_container_api_metadata(
        self, context: Context | None = None
    ) -> list[dict[str, str]]: ...


def check_for_updates(
    getter: ContainerAPIMetadataGetter,
    in_use: Semver = VERSION,
    context: Context | None = None,
) -> Semver | None:
    try:
        available = get_latest_version(getter, context)
    except UpdateCheckError as e:
        logger.debug("%s", e)
        return None
    if in_use < available:
        logger.warning(
            "WARNING: You are using lightsailctl %s, but %s is available.\n"
            "To download, visit %s",
            in_use,
            available,
            DOWNLOAD_URL,
        )
    return available


def get_latest_version(
    getter: ContainerAPIMetadataGetter,
    context: Context | None = None,
) -> Semver:
    try:
        metadata = getter.get_container_api_metadata(context)
    except Exception as e:
        raise UpdateCheckError(
            f"could not get latest lightsailctl version: {e}"
        ) from e

    raw = ""
    for item in metadata:
        if item.get("name") == LATEST_VERSION_METADATA_NAME:
            raw = item.get("value", "")
    if not raw:
        raise UpdateCheckError(
            "latest lightsailctl version was not in "
            "GetContainerAPIMetadata response"
        )
    version = Semver(raw)
    if not version.is_valid():
        raise UpdateCheckError(
            f'latest lightsailctl version is not a semver: "{raw}"'
        )
    return version
