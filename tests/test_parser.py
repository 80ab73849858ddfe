from __future__ import annotations

from models.records import RadiationRecord
from services.parser import parse_feed, parse_float, parse_int, parse_line


def test_parse_line_well_formed() -> None:
    record = parse_line("01/06/2024 10:00:00,60,20,18.5,0.12,1000")

    assert record == RadiationRecord(
        timestamp="01/06/2024 10:00:00",
        elapsed_seconds=60,
        cpm=20,
        avg_cpm=18.5,
        avg_usv=0.12,
        total_events=1000,
    )
    assert f"{record.avg_cpm:.2f}" == "18.50"
    assert f"{record.avg_usv:.3f}" == "0.120"


def test_parse_line_trims_timestamp() -> None:
    record = parse_line("  01/06/2024 10:00:00 ,1,2,3,4,5")

    assert record.timestamp == "01/06/2024 10:00:00"


def test_parse_line_non_numeric_fields_become_zero() -> None:
    record = parse_line("01/06/2024 10:00:00,abc,,n/a,bad,#REF!")

    assert record.timestamp == "01/06/2024 10:00:00"
    assert record.elapsed_seconds == 0
    assert record.cpm == 0
    assert record.avg_cpm == 0.0
    assert record.avg_usv == 0.0
    assert record.total_events == 0


def test_parse_line_missing_trailing_fields() -> None:
    record = parse_line("01/06/2024 10:00:00,60,20")

    assert record.cpm == 20
    assert record.avg_cpm == 0.0
    assert record.total_events == 0


def test_numeric_prefixes_are_kept() -> None:
    assert parse_int("12.7") == 12
    assert parse_int(" 22\r") == 22
    assert parse_int("-3") == -3
    assert parse_int("x12") == 0
    assert parse_int(None) == 0
    assert parse_float("0.55uSv") == 0.55
    assert parse_float(".5") == 0.5
    assert parse_float("1e-2") == 0.01
    assert parse_float("1e999") == 0.0
    assert parse_float("-Infinity") == 0.0
    assert parse_float("NaN") == 0.0


def test_parse_feed_skips_header_and_blank_timestamps() -> None:
    text = (
        "timestamp,seconds,cpm,avg_cpm,avg_uSv,total_events\n"
        "01/06/2024 10:00:00,60,20,18.5,0.12,1000\n"
        " ,60,21,18.7,0.13,1021\n"
        ",,,,,\n"
        "01/06/2024 10:02:00,60,abc,19.0,0.14,1043\n"
    )

    records = parse_feed(text)

    assert [record.timestamp for record in records] == [
        "01/06/2024 10:00:00",
        "01/06/2024 10:02:00",
    ]
    assert records[1].cpm == 0


def test_parse_feed_header_is_never_inspected() -> None:
    text = "01/06/2024 09:59:00,60,19,18.0,0.11,980\n01/06/2024 10:00:00,60,20,18.5,0.12,1000"

    records = parse_feed(text)

    assert len(records) == 1
    assert records[0].timestamp == "01/06/2024 10:00:00"


def test_parse_feed_handles_crlf_and_trailing_newlines() -> None:
    text = "header\r\n01/06/2024 10:00:00,60,20,18.5,0.12,1000\r\n\r\n\n"

    records = parse_feed(text)

    assert len(records) == 1
    assert records[0].total_events == 1000


def test_parse_feed_empty_input() -> None:
    assert parse_feed("") == []
    assert parse_feed("header only\n") == []
