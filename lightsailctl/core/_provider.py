from typing import Any

from ._context import Context


class Provider:
    __handle__: str | None
    __type__: str

    def __init__(self, **kwargs: Any):
        self.__handle__ = kwargs.pop("__handle__", None)
        self.__type__ = kwargs.pop("__type__", self.__class__.__module__)
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __setup__(self, context: Context | None = None) -> None:
        pass

    def close(self) -> None:
        pass
