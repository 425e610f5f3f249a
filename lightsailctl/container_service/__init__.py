from ._config import DEFAULT_PLATFORM, STAGING_REPOSITORY_SUFFIX
from ._interfaces import (
    ImageOperator,
    ImagePusher,
    ImageRegistrar,
    ImageTagger,
    ImageUntagger,
    LightsailImageOperator,
    RegistryLoginCreator,
)
from ._models import (
    PushRequest,
    PushResult,
    RegisteredImage,
    RegistryCredential,
    RemoteImageAddress,
    StatusRecord,
)
from .orchestrator import PushOrchestrator
from .status_stream import (
    StatusRenderer,
    StatusStreamFilter,
    decode_status_records,
    display_status_stream,
)
from .unique_tag import UniqueTagGenerator

__all__ = [
    "PushOrchestrator",
    "PushRequest",
    "PushResult",
    "RegisteredImage",
    "RegistryCredential",
    "RemoteImageAddress",
    "StatusRecord",
    "StatusRenderer",
    "StatusStreamFilter",
    "UniqueTagGenerator",
    "ImageOperator",
    "ImagePusher",
    "ImageRegistrar",
    "ImageTagger",
    "ImageUntagger",
    "LightsailImageOperator",
    "RegistryLoginCreator",
    "DEFAULT_PLATFORM",
    "STAGING_REPOSITORY_SUFFIX",
    "decode_status_records",
    "display_status_stream",
]
