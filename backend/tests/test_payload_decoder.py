"""Unit tests for payload repair and decoding."""

from __future__ import annotations

import logging

import pytest

from lesson_content.block_splitter import parse_document
from lesson_content.content_models import (
    ChartData,
    Decoded,
    Failed,
    FigureSearch,
    MixedContent,
    TableData,
)
from lesson_content.payload_decoder import (
    build_search_url,
    decode_payload,
    repair_payload_json,
)


class RecordingSink:
    """Failure sink that remembers every reported payload."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str]] = []

    def __call__(self, kind: str, raw_inner: str, reason: str) -> None:
        self.calls.append((kind, raw_inner, reason))


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ('  {"a": 1}  ', '{"a": 1}'),
        ('```json\n{"a": 1}\n```', '{"a": 1}'),
        ('```\n{"a": 1}\n```', '{"a": 1}'),
        ('```json {"a": 1}', '{"a": 1}'),
        ('{"a": 1}\n```', '{"a": 1}'),
        ('{"a": [1, 2, ], "b": {"c": 3 ,\n}, }', '{"a": [1, 2], "b": {"c": 3 }}'),
    ],
)
def test_repair_payload_json(raw: str, expected: str) -> None:
    assert repair_payload_json(raw) == expected


def test_repair_leaves_escapes_untouched() -> None:
    raw = r'{"headers": ["Say \"hi\"", "C:\\temp"], "rows": []}'

    assert repair_payload_json(raw) == raw


def test_trailing_comma_table_from_document() -> None:
    items = parse_document('[TABLE_DATA]{"headers":["A","B"],"rows":[["1","2"],]}[/TABLE_DATA]')

    (item,) = items
    assert isinstance(item, MixedContent)
    (token,) = item.tokens
    assert token.outcome == Decoded(
        kind="TABLE_DATA",
        value=TableData(headers=("A", "B"), rows=(("1", "2"),)),
    )


def test_escaped_quotes_survive_decoding(sink: RecordingSink) -> None:
    outcome = decode_payload("TABLE_DATA", r'{"headers":["Say \"hi\""],"rows":[]}', failure_sink=sink)

    assert outcome == Decoded(kind="TABLE_DATA", value=TableData(headers=('Say "hi"',), rows=()))
    assert sink.calls == []


def test_ragged_rows_are_accepted() -> None:
    outcome = decode_payload(
        "TABLE_DATA",
        '{"headers": ["A", "B"], "rows": [["1"], ["2", 3.5, true, null], "loose"]}',
    )

    assert isinstance(outcome, Decoded)
    assert outcome.value.rows == (("1",), ("2", 3.5, "true", ""), ("loose",))


@pytest.mark.parametrize(
    "raw",
    [
        '{"headers": ["A"]}',
        '{"rows": []}',
        '{"headers": "A", "rows": []}',
        '[["A"], []]',
    ],
)
def test_table_requires_headers_and_rows(raw: str, sink: RecordingSink) -> None:
    outcome = decode_payload("TABLE_DATA", raw, failure_sink=sink)

    assert outcome == Failed(kind="TABLE_DATA", reason="missing headers or rows")
    assert sink.calls == [("TABLE_DATA", raw, "missing headers or rows")]


def test_chart_is_forwarded_as_is() -> None:
    raw = '```json\n{"type": "line", "data": {"labels": ["a"], "values": [1,]},}\n```'

    outcome = decode_payload("CHART_DATA", raw)

    assert outcome == Decoded(
        kind="CHART_DATA",
        value=ChartData(spec={"type": "line", "data": {"labels": ["a"], "values": [1]}}),
    )


def test_figure_search_builds_search_link() -> None:
    outcome = decode_payload(
        "SEARCH_PROMPT",
        '{"query": " cell division diagram "}',
        search_base_url="https://images.example.com/search",
    )

    assert outcome == Decoded(
        kind="SEARCH_PROMPT",
        value=FigureSearch(
            query="cell division diagram",
            search_url="https://images.example.com/search?q=cell+division+diagram",
        ),
    )


def test_default_search_link_keeps_image_filter() -> None:
    assert build_search_url("a&b") == "https://www.google.com/search?tbm=isch&q=a%26b"


@pytest.mark.parametrize("raw", ["{}", '{"query": ""}', '{"query": 42}', '["query"]'])
def test_missing_query(raw: str, sink: RecordingSink) -> None:
    outcome = decode_payload("SEARCH_PROMPT", raw, failure_sink=sink)

    assert outcome == Failed(kind="SEARCH_PROMPT", reason="missing query")
    assert outcome.placeholder == "Could not process the figure search suggestion."
    assert sink.calls == [("SEARCH_PROMPT", raw, "missing query")]


def test_invalid_json_is_reported_once(sink: RecordingSink) -> None:
    raw = "{'headers': ['A'], 'rows': []}"

    outcome = decode_payload("TABLE_DATA", raw, failure_sink=sink)

    assert outcome == Failed(kind="TABLE_DATA", reason="invalid JSON")
    assert outcome.placeholder == "Could not display the table."
    assert sink.calls == [("TABLE_DATA", raw, "invalid JSON")]


def test_unknown_kind_fails(sink: RecordingSink) -> None:
    outcome = decode_payload("IMAGE_DATA", "{}", failure_sink=sink)  # type: ignore[arg-type]

    assert outcome == Failed(kind="IMAGE_DATA", reason="unsupported payload kind")


def test_default_sink_logs_original_text(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="lesson_content.payload_decoder"):
        decode_payload("CHART_DATA", "{oops")

    assert "CHART_DATA" in caplog.text
    assert "{oops" in caplog.text


def test_failure_is_local_to_one_payload(sink: RecordingSink) -> None:
    raw = (
        '[SEARCH_PROMPT]{}[/SEARCH_PROMPT] and '
        '[SEARCH_PROMPT]{"query": "volcano cross section"}[/SEARCH_PROMPT]'
    )

    (item,) = parse_document(raw, failure_sink=sink)

    outcomes = [token.outcome for token in item.tokens if hasattr(token, "outcome")]
    assert [outcome.ok for outcome in outcomes] == [False, True]
    assert len(sink.calls) == 1


def test_oversized_integer_fails_only_its_payload(sink: RecordingSink) -> None:
    raw = '{"v": ' + "1" * 5000 + "}"

    (item,) = parse_document(f"x [CHART_DATA]{raw}[/CHART_DATA] y", failure_sink=sink)

    (_, token, _) = item.tokens
    assert token.outcome == Failed(kind="CHART_DATA", reason="invalid JSON")
    assert sink.calls == [("CHART_DATA", raw, "invalid JSON")]


@pytest.mark.parametrize(
    "raw",
    ['{"v": NaN}', '{"v": Infinity}', '[-Infinity]', '{"v": 1e400}', '{"v": -1e999}'],
)
def test_non_finite_numbers_are_invalid_json(raw: str, sink: RecordingSink) -> None:
    outcome = decode_payload("CHART_DATA", raw, failure_sink=sink)

    assert outcome == Failed(kind="CHART_DATA", reason="invalid JSON")
    assert sink.calls == [("CHART_DATA", raw, "invalid JSON")]


def test_raising_sink_is_logged_and_ignored(caplog: pytest.LogCaptureFixture) -> None:
    def broken_sink(kind: str, raw_inner: str, reason: str) -> None:
        raise RuntimeError("sink offline")

    with caplog.at_level(logging.ERROR, logger="lesson_content.payload_decoder"):
        outcome = decode_payload("SEARCH_PROMPT", "{}", failure_sink=broken_sink)

    assert outcome == Failed(kind="SEARCH_PROMPT", reason="missing query")
    assert "Failure sink raised" in caplog.text
    assert "sink offline" in caplog.text
