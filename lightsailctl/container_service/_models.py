from typing import Any

from lightsailctl.core import DataModel, DataModelField
from pydantic import ConfigDict, field_validator


class PushRequest(DataModel):
    """Push request.

    Args:
        service_name:
            Lightsail container service to register the image with.
        local_image_reference:
            Local image to push, e.g. "nginx:latest".
        label:
            Label for the registered image.
    """

    model_config = ConfigDict(frozen=True)

    service_name: str = DataModelField(min_length=1)
    local_image_reference: str = DataModelField(min_length=1)
    label: str = DataModelField(min_length=1)


class RegistryCredential(DataModel):
    """Short-lived credential for the service's staging repository.

    Args:
        username:
            Registry username.
        password:
            Registry password.
        server_address:
            Registry address including the staging repository suffix.
    """

    username: str
    password: str = DataModelField(repr=False)
    server_address: str

    def auth_config(self) -> dict[str, str]:
        return {
            "username": self.username,
            "password": self.password,
            "serveraddress": self.server_address,
        }


class RemoteImageAddress(DataModel):
    """Everything needed to push an image to the remote repository."""

    credential: RegistryCredential
    tag: str

    @property
    def server_address(self) -> str:
        return self.credential.server_address

    def reference(self) -> str:
        return f"{self.credential.server_address}:{self.tag}"


class RegisteredImage(DataModel):
    image: str
    digest: str


class PushResult(DataModel):
    """Push result.

    Args:
        content_digest:
            Digest of the pushed image, "sha256:<hex>".
        registered_image_locator:
            Name to refer to the image in deployments.
    """

    content_digest: str
    registered_image_locator: str


class StatusErrorDetail(DataModel):
    code: int | None = None
    message: str = ""

    @field_validator("message", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class StatusRecord(DataModel):
    """One message of the engine's push status stream."""

    status: str = ""
    id: str = ""
    progress: str = ""
    progress_detail: dict[str, Any] | None = DataModelField(
        alias="progressDetail", default=None
    )
    stream: str = ""
    aux: Any = None
    error_detail: StatusErrorDetail | None = DataModelField(
        alias="errorDetail", default=None
    )
    error: str = ""

    @field_validator(
        "status", "id", "progress", "stream", "error", mode="before"
    )
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        # Engines may send null for any text field.
        return "" if value is None else value

    @property
    def error_message(self) -> str | None:
        if self.error_detail is not None and self.error_detail.message:
            return self.error_detail.message
        if self.error:
            return self.error
        return None

    def has_progress(self) -> bool:
        if self.progress:
            return True
        detail = self.progress_detail or {}
        return bool(detail.get("current") or detail.get("total"))
