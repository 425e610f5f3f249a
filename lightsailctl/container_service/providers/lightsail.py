"""
Amazon Lightsail provider for the container service push.
"""

__all__ = ["Lightsail"]

from typing import Any

import boto3
from botocore.config import Config
from lightsailctl.core import VERSION, Context, Provider

from .._config import STAGING_REPOSITORY_SUFFIX
from .._models import RegisteredImage, RegistryCredential


class Lightsail(Provider):
    region: str | None
    profile_name: str | None
    endpoint_url: str | None
    verify: bool | str | None
    nparams: dict[str, Any]

    _client: Any
    _init: bool = False

    def __init__(
        self,
        region: str | None = None,
        profile_name: str | None = None,
        endpoint_url: str | None = None,
        verify: bool | str | None = None,
        client: Any = None,
        nparams: dict[str, Any] = dict(),
        **kwargs,
    ):
        """Initialize.

        Args:
            region:
                AWS region of the container service.
                If None, uses the region from the AWS configuration.
            profile_name:
                AWS profile name to use for authentication.
            endpoint_url:
                Lightsail API endpoint override.
            verify:
                False to skip TLS verification, or a path to a CA bundle.
            client:
                Lightsail client to use instead of building one.
            nparams:
                Additional parameters for the Lightsail client.
        """
        self.region = region
        self.profile_name = profile_name
        self.endpoint_url = endpoint_url
        self.verify = verify
        self.nparams = nparams
        self._client = client
        self._init = client is not None
        super().__init__(**kwargs)

    def __setup__(self, context: Context | None = None) -> None:
        if self._init:
            return

        session_kwargs = {}
        if self.profile_name:
            session_kwargs["profile_name"] = self.profile_name
        if self.region:
            session_kwargs["region_name"] = self.region
        session = boto3.Session(**session_kwargs)

        client_kwargs: dict[str, Any] = dict(
            config=Config(user_agent_extra=f"lightsailctl/{VERSION}")
        )
        if self.endpoint_url:
            client_kwargs["endpoint_url"] = self.endpoint_url
        if self.verify is not None:
            client_kwargs["verify"] = self.verify
        client_kwargs.update(self.nparams)
        self._client = session.client("lightsail", **client_kwargs)
        self._init = True

    def create_registry_login(
        self, context: Context | None = None
    ) -> RegistryCredential:
        """Get temporary credentials for the service's "sr" repository.

        The "sr" repository only retains image tags that get registered
        with a container service, so it keeps images strictly related to
        Lightsail container service deployments.
        """
        self._prepare(context)
        response = self._client.create_container_service_registry_login()
        login = response["registryLogin"]
        return RegistryCredential(
            username=login.get("username", ""),
            password=login.get("password", ""),
            server_address=(
                login.get("registry", "") + STAGING_REPOSITORY_SUFFIX
            ),
        )

    def register_image(
        self,
        service_name: str,
        label: str,
        digest: str,
        context: Context | None = None,
    ) -> RegisteredImage:
        self._prepare(context)
        response = self._client.register_container_image(
            serviceName=service_name,
            label=label,
            digest=digest,
        )
        image = response["containerImage"]
        return RegisteredImage(
            image=image.get("image", ""),
            digest=image.get("digest", ""),
        )

    def get_container_api_metadata(
        self, context: Context | None = None
    ) -> list[dict[str, str]]:
        self._prepare(context)
        response = self._client.get_container_api_metadata()
        return response.get("metadata", [])

    def _prepare(self, context: Context | None) -> None:
        self.__setup__(context)
        if context is not None:
            context.raise_if_done()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._init = False
