"""
Push status stream.

A container engine reports push progress as a stream of JSON objects, one
per line. Records flow through a chain of generators, one at a time:

    decode_status_records -> StatusStreamFilter -> StatusRenderer

so a slow renderer throttles reading from the engine and nothing past the
current line is buffered.

The image digest arrives in one of two shapes. Newer engines put it in
the status text of a record near the end of the stream:

    {"status": "latest: digest: sha256:cafe...9012 size: 1819"}

Older engines send it in the auxiliary payload of a record:

    {"aux": {"Tag": "latest", "Digest": "sha256:cafe...9012"}}
"""

__all__ = [
    "DIGEST_STATUS_RE",
    "StatusRenderer",
    "StatusStreamFilter",
    "decode_status_records",
    "display_status_stream",
]

import json
import logging
import re
from typing import Callable, Iterable, Iterator, TextIO

import requests

from ._models import StatusRecord
from .exceptions import StatusStreamError

logger = logging.getLogger(__name__)

DIGEST_STATUS_RE = re.compile(r"digest: (sha256:[a-f0-9]{64})")

_CLEAR_LINE = "\x1b[2K\r"


def decode_status_records(
    chunks: Iterable[bytes | str],
) -> Iterator[StatusRecord]:
    """Decode a chunked status stream into records.

    Chunks do not need to line up with records. A line that is not a JSON
    object, or a failure reading the chunks, ends decoding: it is logged
    and the records produced so far remain valid.
    """
    pending = b""
    try:
        for chunk in chunks:
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            pending += chunk
            *lines, pending = pending.split(b"\n")
            for line in lines:
                if not line.strip():
                    continue
                record = _decode_record(line)
                if record is None:
                    return
                yield record
    except (OSError, requests.exceptions.RequestException) as e:
        logger.warning("read status stream: %s", e)
        return
    if pending.strip():
        record = _decode_record(pending)
        if record is not None:
            yield record


def _decode_record(line: bytes) -> StatusRecord | None:
    try:
        obj = json.loads(line)
        if not isinstance(obj, dict):
            raise ValueError(f"status record is not an object: {line!r}")
        return StatusRecord.from_dict(obj)
    except ValueError as e:
        logger.warning("decode status stream: %s", e)
        return None


class StatusStreamFilter:
    """Forward status records, minus the noisy ones, and spot the digest.

    Records whose status contains any of the `skips` substrings are
    dropped. Every record, dropped or not, is checked for a digest in its
    status text first, so the digest line is caught even when it mentions
    the tag.
    """

    def __init__(
        self,
        records: Iterable[StatusRecord],
        skips: Iterable[str] = (),
    ):
        self._records = records
        self._skips = tuple(skip for skip in skips if skip)
        self.status_digest: str | None = None
        self.aux_digest: str | None = None

    def __iter__(self) -> Iterator[StatusRecord]:
        for record in self._records:
            if self.status_digest is None:
                match = DIGEST_STATUS_RE.search(record.status)
                if match is not None:
                    self.status_digest = match.group(1)
            if any(skip in record.status for skip in self._skips):
                continue
            yield record

    def extract_digest_from_aux(self, record: StatusRecord) -> None:
        aux = record.aux
        if not isinstance(aux, dict):
            logger.warning(
                "extract digest: aux payload is not an object: %s",
                json.dumps(aux),
            )
            return
        digest = next(
            (value for key, value in aux.items() if key.lower() == "digest"),
            "",
        )
        if not isinstance(digest, str):
            logger.warning(
                "extract digest: digest is not a string: %s",
                json.dumps(digest),
            )
            return
        if digest and self.aux_digest is None:
            self.aux_digest = digest

    @property
    def digest(self) -> str | None:
        # Newer engines' status text wins over the aux payload.
        return self.status_digest or self.aux_digest


class StatusRenderer:
    """Render status records the way the docker CLI does.

    On a terminal, progress records update their own line in place.
    Elsewhere progress bars are dropped and every other record is printed
    on its own line.
    """

    def __init__(self, out: TextIO, is_terminal: bool | None = None):
        self.out = out
        self.is_terminal = (
            _is_terminal(out) if is_terminal is None else is_terminal
        )
        self._lines: dict[str, int] = {}

    def render(self, record: StatusRecord) -> None:
        message = record.error_message
        if message is not None:
            code = record.error_detail.code if record.error_detail else None
            if code == 401:
                raise StatusStreamError("authentication is required", code)
            raise StatusStreamError(message, code)

        if not self.is_terminal:
            if not record.has_progress():
                self.out.write(self._format(record, "\n"))
                self.out.flush()
            return

        tracked = record.progress_detail is not None or bool(record.progress)
        diff = 0
        if record.id and tracked:
            line = self._lines.get(record.id)
            if line is None:
                line = len(self._lines)
                self._lines[record.id] = line
                self.out.write("\n")
            diff = len(self._lines) - line
            self.out.write(f"\x1b[{diff}A")
        else:
            self._lines = {}
        if tracked:
            self.out.write(_CLEAR_LINE + self._format(record, "\r"))
        else:
            self.out.write(self._format(record, "\n"))
        if diff:
            self.out.write(f"\x1b[{diff}B")
        self.out.flush()

    def _format(self, record: StatusRecord, end: str) -> str:
        prefix = f"{record.id}: " if record.id else ""
        if record.progress and self.is_terminal:
            return f"{prefix}{record.status} {record.progress}{end}"
        if record.stream:
            return f"{prefix}{record.stream}"
        return f"{prefix}{record.status}{end}"


def display_status_stream(
    records: Iterable[StatusRecord],
    out: TextIO,
    aux_callback: Callable[[StatusRecord], None] | None = None,
) -> None:
    """Render records in arrival order.

    Records with an aux payload go to `aux_callback` instead of `out`.
    An error record stops rendering with StatusStreamError.
    """
    renderer = StatusRenderer(out)
    for record in records:
        if record.aux is not None:
            if aux_callback is not None:
                aux_callback(record)
            continue
        renderer.render(record)


def _is_terminal(out: TextIO) -> bool:
    isatty = getattr(out, "isatty", None)
    return bool(isatty is not None and isatty())
