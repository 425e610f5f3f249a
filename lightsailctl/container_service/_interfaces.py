from typing import Iterable, Protocol

from lightsailctl.core import Context

from ._models import RegisteredImage, RegistryCredential, RemoteImageAddress


class RegistryLoginCreator(Protocol):
    def create_registry_login(
        self, context: Context | None = None
    ) -> RegistryCredential: ...


class ImageRegistrar(Protocol):
    def register_image(
        self,
        service_name: str,
        label: str,
        digest: str,
        context: Context | None = None,
    ) -> RegisteredImage: ...


class ImageTagger(Protocol):
    def tag_image(
        self, source: str, target: str, context: Context | None = None
    ) -> None: ...


class ImageUntagger(Protocol):
    def untag_image(
        self, reference: str, context: Context | None = None
    ) -> None: ...


class ImagePusher(Protocol):
    def push_image(
        self, address: RemoteImageAddress, context: Context | None = None
    ) -> Iterable[bytes | str]:
        """Start the push and return the raw status stream."""
        ...


class LightsailImageOperator(RegistryLoginCreator, ImageRegistrar, Protocol):
    pass


class ImageOperator(ImageTagger, ImageUntagger, ImagePusher, Protocol):
    pass
