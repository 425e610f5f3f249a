"""
Push a local image to a Lightsail container service and register it.

    login -> tag -> push -> register, then untag

Every step needs the previous one to succeed. Once the image is tagged,
the temporary tag is always removed, and a failure to remove it is only
logged.
"""

__all__ = ["PushOrchestrator", "platform_error_re"]

import logging
import re
import sys
from contextlib import contextmanager
from typing import Iterable, Iterator, TextIO

from lightsailctl.core import Context, Response, run_async
from lightsailctl.core.exceptions import DeadlineExceededError

from ._config import CLEANUP_GRACE_SECONDS, DEFAULT_PLATFORM
from ._interfaces import ImageOperator, LightsailImageOperator
from ._models import (
    PushRequest,
    PushResult,
    RegisteredImage,
    RegistryCredential,
    RemoteImageAddress,
)
from .exceptions import (
    AuthenticationError,
    ContainerServiceError,
    MissingDigestError,
    PlatformMismatchError,
    PushError,
    RegistrationError,
    StatusStreamError,
    TagError,
    UntagError,
)
from .status_stream import (
    StatusStreamFilter,
    decode_status_records,
    display_status_stream,
)
from .unique_tag import UniqueTagGenerator

logger = logging.getLogger(__name__)


def platform_error_re(platform: str) -> re.Pattern[str]:
    return re.compile(
        r"does not (provide|match) the specified platform "
        + re.escape(f"({platform})")
    )


@contextmanager
def _raise_as(error_type: type[ContainerServiceError]) -> Iterator[None]:
    try:
        yield
    except (ContainerServiceError, DeadlineExceededError):
        raise
    except Exception as e:
        raise error_type(str(e)) from e


class PushOrchestrator:
    lightsail: LightsailImageOperator
    engine: ImageOperator
    tag_generator: UniqueTagGenerator
    platform: str
    cleanup_grace: float

    def __init__(
        self,
        lightsail: LightsailImageOperator,
        engine: ImageOperator,
        tag_generator: UniqueTagGenerator | None = None,
        platform: str = DEFAULT_PLATFORM,
        out: TextIO | None = None,
        progress_out: TextIO | None = None,
        cleanup_grace: float = CLEANUP_GRACE_SECONDS,
    ):
        """Initialize.

        Args:
            lightsail:
                Registry login and image registration calls.
            engine:
                Local container engine calls.
            tag_generator:
                Source of temporary push tags.
            platform:
                Platform the pushed image must provide, "os/arch".
            out:
                Where the confirmation is printed. Defaults to stdout.
            progress_out:
                Where push progress is rendered. Defaults to stderr.
            cleanup_grace:
                Seconds allowed for removing the temporary tag once the
                caller's deadline has passed.
        """
        self.lightsail = lightsail
        self.engine = engine
        self.tag_generator = tag_generator or UniqueTagGenerator()
        self.platform = platform
        self.cleanup_grace = cleanup_grace
        self._out = out
        self._progress_out = progress_out

    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    @property
    def progress_out(self) -> TextIO:
        return self._progress_out or sys.stderr

    def push(
        self,
        request: PushRequest,
        context: Context | None = None,
    ) -> Response[PushResult]:
        """Push and register the image.

        Args:
            request: What to push and where to register it.
            context: Deadline and cancellation for every remote call.

        Returns:
            Digest of the pushed image and its registered name.
        """
        context = context or Context()
        credential = self._login(context)
        address = RemoteImageAddress(
            credential=credential, tag=self.tag_generator.generate()
        )
        reference = address.reference()

        with _raise_as(TagError):
            self.engine.tag_image(
                request.local_image_reference, reference, context
            )
        try:
            digest = self._push(address, context)
            registered = self._register(request, digest, context)
            self._print_confirmation(request, registered)
        finally:
            self._try_untag(reference, context)

        result = PushResult(
            content_digest=registered.digest,
            registered_image_locator=registered.image,
        )
        return Response(result=result, context=context)

    async def apush(
        self,
        request: PushRequest,
        context: Context | None = None,
    ) -> Response[PushResult]:
        return await run_async(self.push, request, context)

    def _login(self, context: Context) -> RegistryCredential:
        with _raise_as(AuthenticationError):
            return self.lightsail.create_registry_login(context)

    def _push(self, address: RemoteImageAddress, context: Context) -> str:
        try:
            stream = self.engine.push_image(address, context)
        except (ContainerServiceError, DeadlineExceededError):
            raise
        except Exception as e:
            self._raise_if_platform_mismatch(str(e), e)
            raise PushError(str(e)) from e

        status_filter = StatusStreamFilter(
            decode_status_records(stream),
            skips=(address.server_address, address.tag),
        )
        try:
            display_status_stream(
                status_filter,
                self.progress_out,
                status_filter.extract_digest_from_aux,
            )
        except StatusStreamError as e:
            self._raise_if_platform_mismatch(e.message, e)
            raise PushError(e.message) from e
        except (ContainerServiceError, DeadlineExceededError):
            raise
        except Exception as e:
            raise PushError(str(e)) from e
        finally:
            _close(stream)

        digest = status_filter.digest
        if not digest:
            raise MissingDigestError(
                "image push response does not contain the image digest"
            )
        return digest

    def _raise_if_platform_mismatch(
        self, message: str, cause: Exception
    ) -> None:
        if platform_error_re(self.platform).search(message):
            raise PlatformMismatchError(self.platform) from cause

    def _register(
        self, request: PushRequest, digest: str, context: Context
    ) -> RegisteredImage:
        with _raise_as(RegistrationError):
            return self.lightsail.register_image(
                request.service_name, request.label, digest, context
            )

    def _try_untag(self, reference: str, context: Context) -> None:
        try:
            self.engine.untag_image(
                reference, context.for_cleanup(self.cleanup_grace)
            )
        except Exception as e:
            logger.warning("%s", UntagError(str(e)))

    def _print_confirmation(
        self, request: PushRequest, registered: RegisteredImage
    ) -> None:
        print(
            f"Digest: {registered.digest}\n"
            f'Image "{request.local_image_reference}" registered.\n'
            f'Refer to this image as "{registered.image}" in deployments.',
            file=self.out,
        )


def _close(stream: Iterable[bytes | str]) -> None:
    close = getattr(stream, "close", None)
    if callable(close):
        close()
