"""
Docker Engine provider for the container service push.
"""

__all__ = ["DockerEngine"]

import json
import logging
from typing import Any, Iterator
from urllib.parse import quote

import docker
import requests
from docker.auth import encode_header
from docker.errors import create_api_error_from_http_exception
from docker.utils import parse_repository_tag, version_gte
from lightsailctl.core import Context, Provider

from .._config import DEFAULT_PLATFORM
from .._models import RemoteImageAddress
from ..exceptions import TagError

logger = logging.getLogger(__name__)

# First Engine API version accepting the platform of a push.
PUSH_PLATFORM_API_VERSION = "1.46"


class DockerEngine(Provider):
    platform: str
    timeout: int | None
    nparams: dict[str, Any]

    _client: Any
    _init: bool = False
    _api_timeout: Any = None

    def __init__(
        self,
        platform: str = DEFAULT_PLATFORM,
        timeout: int | None = None,
        client: Any = None,
        nparams: dict[str, Any] = dict(),
        **kwargs,
    ):
        """Initialize.

        Args:
            platform:
                Platform to push, "os/arch".
            timeout:
                Default timeout in seconds for engine API calls.
            client:
                Docker client to use instead of one built from the
                environment.
            nparams:
                Additional parameters for docker.from_env.
        """
        self.platform = platform
        self.timeout = timeout
        self.nparams = nparams
        self._client = client
        self._init = client is not None
        super().__init__(**kwargs)

    def __setup__(self, context: Context | None = None) -> None:
        if self._init:
            return
        self._client = docker.from_env(version="auto", **self.nparams)
        self._init = True

    def tag_image(
        self, source: str, target: str, context: Context | None = None
    ) -> None:
        api = self._api(context)
        repository, tag = parse_repository_tag(target)
        if not api.tag(source, repository, tag=tag):
            raise TagError(f"tag {source!r} as {target!r} was not created")

    def untag_image(
        self, reference: str, context: Context | None = None
    ) -> None:
        api = self._api(context)
        api.remove_image(reference)

    def push_image(
        self,
        address: RemoteImageAddress,
        context: Context | None = None,
    ) -> Iterator[bytes]:
        api = self._api(context)
        repository, tag = parse_repository_tag(address.reference())
        params: dict[str, Any] = {"tag": tag}
        if version_gte(api.api_version, PUSH_PLATFORM_API_VERSION):
            os_name, architecture = self.platform.split("/", 1)
            params["platform"] = json.dumps(
                {"os": os_name, "architecture": architecture}
            )
        headers = {
            "X-Registry-Auth": encode_header(address.credential.auth_config())
        }
        url = (
            f"{api.base_url}/v{api.api_version}/images/"
            f"{quote(repository, safe='/:')}/push"
        )
        logger.debug("push %s (params: %s)", address.reference(), params)
        response = api.post(
            url,
            params=params,
            headers=headers,
            stream=True,
            timeout=api.timeout,
        )
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            try:
                # Raises docker.errors.APIError with the engine's message.
                create_api_error_from_http_exception(e)
            finally:
                response.close()
        return self._stream(response)

    def _stream(self, response: requests.Response) -> Iterator[bytes]:
        try:
            yield from response.iter_content(chunk_size=None)
        finally:
            response.close()

    def _api(self, context: Context | None) -> Any:
        self.__setup__(context)
        api = self._client.api
        if self._api_timeout is None:
            # Client default, restored for calls without a deadline.
            self._api_timeout = api.timeout
        if context is not None:
            context.raise_if_done()
            remaining = context.remaining()
            if remaining is not None:
                api.timeout = max(remaining, 1)
                return api
        api.timeout = (
            self.timeout if self.timeout is not None else self._api_timeout
        )
        return api

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._init = False
        self._api_timeout = None
