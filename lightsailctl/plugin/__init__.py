from ._models import OperationConfig, PluginInput, PushContainerImagePayload
from .main import (
    invoke_operation,
    parse_input,
    parse_push_container_image_payload,
    plugin_main,
)
from .update_check import check_for_updates

__all__ = [
    "OperationConfig",
    "PluginInput",
    "PushContainerImagePayload",
    "check_for_updates",
    "invoke_operation",
    "parse_input",
    "parse_push_container_image_payload",
    "plugin_main",
]
