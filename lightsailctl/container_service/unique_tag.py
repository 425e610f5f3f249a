"""
Unique tags for images pushed to the staging repository.

A tag looks like "1593224653252075123-c5h66p35cpjmg": the wall clock in
nanoseconds, then 8 random bytes in unpadded base-32 over the alphabet
"0123456789abcdefghijklmnopqrstuv" (13 characters).
"""

__all__ = ["UniqueTagGenerator", "encode_base32"]

import base64
import secrets
from typing import Callable

from lightsailctl.core import Time
from lightsailctl.core.exceptions import InternalError

RANDOM_BYTES = 8

_STANDARD_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_TAG_ALPHABET = "0123456789abcdefghijklmnopqrstuv"
_TRANSLATION = str.maketrans(_STANDARD_ALPHABET, _TAG_ALPHABET)


def encode_base32(data: bytes) -> str:
    encoded = base64.b32encode(data).decode("ascii").rstrip("=")
    return encoded.translate(_TRANSLATION)


class UniqueTagGenerator:
    def __init__(
        self,
        now_ns: Callable[[], int] | None = None,
        random_bytes: Callable[[int], bytes] | None = None,
    ):
        """Initialize.

        Args:
            now_ns:
                Time source returning nanoseconds since epoch.
                Defaults to the wall clock.
            random_bytes:
                Random source returning the requested number of bytes.
                Defaults to a cryptographically strong source.
        """
        self._now_ns = now_ns or Time.now_ns
        self._random_bytes = random_bytes or secrets.token_bytes

    def generate(self) -> str:
        return f"{self._now_ns()}-{self._random_suffix()}"

    def _random_suffix(self) -> str:
        data = self._random_bytes(RANDOM_BYTES)
        if len(data) != RANDOM_BYTES:
            raise InternalError(
                f"random source returned {len(data)} bytes, "
                f"want {RANDOM_BYTES}"
            )
        return encode_base32(data)
