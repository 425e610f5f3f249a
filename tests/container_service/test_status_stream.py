import io
import logging

import pytest
import requests

from lightsailctl.container_service import (
    StatusRecord,
    StatusRenderer,
    StatusStreamFilter,
    decode_status_records,
    display_status_stream,
)
from lightsailctl.container_service.exceptions import StatusStreamError

EXAMPLE_DIGEST = (
    "sha256:cafe1234cafe1234cafe1234cafe1234cafe1234cafe1234abce5678cdef9012"
)
OTHER_DIGEST = "sha256:" + "0" * 64


def records(*lines: str) -> list[StatusRecord]:
    return list(decode_status_records([line + "\n" for line in lines]))


def test_filter_skips_statuses():
    status_filter = StatusStreamFilter(
        records(
            '{"status":"keep me"}',
            '{"status":"xyz skip1 abc"}',
            '{"status":"also keep me!"}',
            '{"status":"\\tskip2"}',
        ),
        skips=["skip1", "skip2"],
    )

    assert [r.status for r in status_filter] == ["keep me", "also keep me!"]
    assert status_filter.digest is None


def test_filter_extracts_digest_from_status():
    status_filter = StatusStreamFilter(
        records(
            '{"status":"Pushed","id":"d3a003bc9307"}',
            f'{{"status":"v2: digest: {EXAMPLE_DIGEST} size: 1819"}}',
        ),
        skips=["v2"],
    )
    forwarded = iter(status_filter)

    assert next(forwarded).status == "Pushed"
    assert status_filter.digest is None
    with pytest.raises(StopIteration):
        next(forwarded)
    assert status_filter.digest == EXAMPLE_DIGEST


def test_filter_reports_digest_before_end_of_stream():
    status_filter = StatusStreamFilter(
        records(
            f'{{"status":"latest: digest: {EXAMPLE_DIGEST} size: 1819"}}',
            '{"status":"trailing"}',
        )
    )
    forwarded = iter(status_filter)

    next(forwarded)

    assert status_filter.digest == EXAMPLE_DIGEST


def test_filter_ignores_malformed_digest():
    status_filter = StatusStreamFilter(
        records('{"status":"digest: sha256:CAFE size: 1"}')
    )

    list(status_filter)

    assert status_filter.digest is None


def test_filter_status_digest_wins_over_aux():
    status_filter = StatusStreamFilter(
        records(f'{{"status":"latest: digest: {EXAMPLE_DIGEST} size: 1"}}')
    )
    list(status_filter)

    status_filter.extract_digest_from_aux(
        StatusRecord(aux={"Digest": OTHER_DIGEST})
    )

    assert status_filter.aux_digest == OTHER_DIGEST
    assert status_filter.digest == EXAMPLE_DIGEST


def test_extract_digest_from_aux(caplog):
    status_filter = StatusStreamFilter([])

    with caplog.at_level(logging.WARNING, logger="lightsailctl"):
        status_filter.extract_digest_from_aux(StatusRecord(aux=42))
    assert status_filter.digest is None
    assert "extract digest" in caplog.text

    status_filter.extract_digest_from_aux(
        StatusRecord(aux={"digest": EXAMPLE_DIGEST})
    )
    assert status_filter.digest == EXAMPLE_DIGEST

    status_filter.extract_digest_from_aux(
        StatusRecord(aux={"Digest": OTHER_DIGEST})
    )
    assert status_filter.digest == EXAMPLE_DIGEST


def test_decode_handles_split_chunks():
    data = (
        b'{"status":"Waiting","progressDetail":{},"id":"4f4fb700ef54"}\r\n'
        b'{"status":"Pushed","id":"4f4fb700ef54"}\r\n'
        b'{"aux":{"digest":"' + EXAMPLE_DIGEST.encode() + b'"}}'
    )
    chunks = [data[i : i + 5] for i in range(0, len(data), 5)]

    decoded = list(decode_status_records(chunks))

    assert [r.status for r in decoded] == ["Waiting", "Pushed", ""]
    assert decoded[0].progress_detail == {}
    assert decoded[2].aux == {"digest": EXAMPLE_DIGEST}


def test_decode_stops_at_malformed_record(caplog):
    with caplog.at_level(logging.WARNING, logger="lightsailctl"):
        decoded = records(
            '{"status":"first"}',
            "{not json",
            '{"status":"never seen"}',
        )

    assert [r.status for r in decoded] == ["first"]
    assert "decode status stream" in caplog.text


def test_decode_stops_at_non_object_record():
    decoded = records('{"status":"first"}', "42", '{"status":"second"}')

    assert [r.status for r in decoded] == ["first"]


def test_decode_is_lazy():
    def chunks():
        yield b'{"status":"first"}\n'
        raise AssertionError("read past the first record")

    decoded = decode_status_records(chunks())

    assert next(decoded).status == "first"


def test_display_status_stream():
    out = io.StringIO()
    aux_records = []

    display_status_stream(
        records(
            '{"status":"Preparing","progressDetail":{},"id":"d3a003bc9307"}',
            '{"status":"Pushing",'
            '"progressDetail":{"current":512,"total":2048},'
            '"progress":"[=====>      ]  512B/2.048kB","id":"d3a003bc9307"}',
            '{"status":"Pushed","progressDetail":{},"id":"d3a003bc9307"}',
            '{"aux":{"Tag":"latest","Digest":"sha256:abc","Size":1}}',
            '{"status":"done"}',
        ),
        out,
        aux_records.append,
    )

    assert out.getvalue() == (
        "d3a003bc9307: Preparing\nd3a003bc9307: Pushed\ndone\n"
    )
    assert len(aux_records) == 1
    assert aux_records[0].aux["Tag"] == "latest"


def test_display_status_stream_raises_error_record():
    out = io.StringIO()

    with pytest.raises(StatusStreamError) as exc_info:
        display_status_stream(
            records(
                '{"status":"Preparing"}',
                '{"errorDetail":{"message":"denied"},"error":"denied"}',
                '{"status":"never rendered"}',
            ),
            out,
        )

    assert exc_info.value.message == "denied"
    assert out.getvalue() == "Preparing\n"


def test_display_status_stream_authentication_required():
    with pytest.raises(StatusStreamError) as exc_info:
        display_status_stream(
            records('{"errorDetail":{"code":401,"message":"unauthorized"}}'),
            io.StringIO(),
        )

    assert exc_info.value.message == "authentication is required"


def test_renderer_updates_progress_in_place_on_terminal():
    out = io.StringIO()
    renderer = StatusRenderer(out, is_terminal=True)

    for record in records(
        '{"status":"Pushing","progressDetail":{"current":1,"total":2},'
        '"progress":"[==>  ]","id":"aaa"}',
        '{"status":"Pushed","progressDetail":{},"id":"aaa"}',
    ):
        renderer.render(record)

    text = out.getvalue()
    assert "aaa: Pushing [==>  ]\r" in text
    assert "aaa: Pushed\r" in text
    assert "\x1b[1A" in text
    assert "\x1b[2K" in text


@pytest.mark.parametrize(
    "error",
    [
        ConnectionResetError("connection reset by peer"),
        requests.exceptions.ChunkedEncodingError("connection broken"),
    ],
)
def test_decode_stops_at_read_error(caplog, error: Exception):
    def chunks():
        yield b'{"status":"first"}\n{"status":"sec'
        raise error

    with caplog.at_level(logging.WARNING, logger="lightsailctl"):
        decoded = list(decode_status_records(chunks()))

    assert [r.status for r in decoded] == ["first"]
    assert "read status stream" in caplog.text


def test_decode_null_text_fields():
    status_filter = StatusStreamFilter(
        records(
            '{"status":null,"id":"x","progress":null,"stream":null}',
            '{"errorDetail":null,"error":null,"id":null}',
            f'{{"status":"latest: digest: {EXAMPLE_DIGEST} size: 1819"}}',
        )
    )

    forwarded = list(status_filter)

    assert [(r.status, r.id) for r in forwarded] == [
        ("", "x"),
        ("", ""),
        (f"latest: digest: {EXAMPLE_DIGEST} size: 1819", ""),
    ]
    assert forwarded[1].error_message is None
    assert status_filter.digest == EXAMPLE_DIGEST


def test_decode_null_error_message():
    (record,) = records('{"errorDetail":{"message":null},"error":"denied"}')

    assert record.error_message == "denied"
