from ._async_helper import run_async
from ._context import Context
from ._log_helper import setup_logging
from ._provider import Provider
from ._response import Response
from .data_model import DataModel, DataModelField
from .time import Time
from .version import VERSION, Semver

__all__ = [
    "Context",
    "DataModel",
    "DataModelField",
    "Provider",
    "Response",
    "Semver",
    "Time",
    "VERSION",
    "run_async",
    "setup_logging",
]
