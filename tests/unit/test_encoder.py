"""Unit tests for RFC 5545 encoding of calendar records."""

from datetime import date

import pytest
from icalendar import Calendar

from icalgen.builder import CalendarBuilder
from icalgen.encoder import build_ical_calendar, encode_calendar, encode_event
from icalgen.exceptions import ContractViolationError, EncodingInvariantError
from icalgen.records import CalendarRecord
from icalgen.validator import validate_document
from tests.fixtures.calendar_documents import FIXED_STAMP, fixed_clock, sequential_ids


def _record(data) -> CalendarRecord:
    result = validate_document(data)
    assert result.is_valid, result.errors
    return CalendarBuilder(clock=fixed_clock, id_factory=sequential_ids()).build(result.document)


def _lines(text: str) -> list[str]:
    return [line for line in text.split("\r\n") if line]


def _event_lines(text: str) -> list[str]:
    lines = _lines(text)
    return lines[lines.index("BEGIN:VEVENT") : lines.index("END:VEVENT") + 1]


@pytest.mark.unit
@pytest.mark.critical_path
class TestCalendarEncoding:
    """Calendar level properties and overall layout."""

    def test_all_day_calendar_encodes_expected_document(self, documents):
        """Single all-day event produces the complete expected document."""
        text = encode_calendar(_record(documents.all_day_document()))

        assert _lines(text) == [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            "PRODID:-//Paqrat76//ical-gen-app//EN",
            "CALSCALE:GREGORIAN",
            "NAME:All-Day Event Calendar",
            "X-WR-CALNAME:All-Day Event Calendar",
            "BEGIN:VEVENT",
            "UID:00000000-0000-4000-8000-000000000001",
            f"DTSTAMP:{FIXED_STAMP}",
            "CLASS:PUBLIC",
            "DTSTART;VALUE=DATE:20260224",
            "TRANSP:TRANSPARENT",
            "SUMMARY:All-Day Test Event",
            "END:VEVENT",
            "END:VCALENDAR",
        ]

    def test_lines_are_crlf_terminated(self, documents):
        """No bare LF line endings are produced."""
        text = encode_calendar(_record(documents.timed_document()))

        assert text.startswith("BEGIN:VCALENDAR\r\n")
        assert "\n" not in text.replace("\r\n", "")

    def test_description_adds_calendar_description_properties(self, documents):
        """A calendar description is written as DESCRIPTION and X-WR-CALDESC."""
        data = documents.document([documents.all_day_event()], description="Team holidays")

        lines = _lines(encode_calendar(_record(data)))

        calendar_lines = lines[: lines.index("BEGIN:VEVENT")]
        assert "DESCRIPTION:Team holidays" in calendar_lines
        assert "X-WR-CALDESC:Team holidays" in calendar_lines

    def test_missing_description_is_omitted(self, documents):
        """No empty description properties are written."""
        text = encode_calendar(_record(documents.all_day_document()))

        assert "DESCRIPTION" not in text
        assert "X-WR-CALDESC" not in text

    def test_events_are_encoded_in_input_order(self, documents):
        """N events produce N VEVENT blocks in document order."""
        data = documents.document(
            [
                documents.timed_event(summary="one"),
                documents.all_day_event(summary="two"),
                documents.timed_event(summary="three"),
            ]
        )

        lines = _lines(encode_calendar(_record(data)))

        assert lines.count("BEGIN:VEVENT") == 3
        assert lines.count("END:VEVENT") == 3
        summaries = [line for line in lines if line.startswith("SUMMARY:")]
        assert summaries == ["SUMMARY:one", "SUMMARY:two", "SUMMARY:three"]
        uids = [line for line in lines if line.startswith("UID:")]
        assert uids == [f"UID:00000000-0000-4000-8000-00000000000{n}" for n in (1, 2, 3)]

    def test_encoding_is_deterministic(self, documents):
        """Encoding the same record twice gives identical text."""
        record = _record(documents.timed_document())

        assert encode_calendar(record) == encode_calendar(record)

    def test_build_ical_calendar_returns_component_tree(self, documents):
        """The component tree carries one VEVENT per record event."""
        calendar = build_ical_calendar(_record(documents.timed_document()))

        assert calendar.name == "VCALENDAR"
        assert [component.name for component in calendar.subcomponents] == ["VEVENT"]

    def test_none_record_is_a_contract_violation(self):
        """encode_calendar requires a record."""
        with pytest.raises(ContractViolationError, match="record is required"):
            encode_calendar(None)


@pytest.mark.unit
@pytest.mark.critical_path
class TestEventEncoding:
    """VEVENT property values."""

    def test_timed_event_is_encoded_in_utc(self, documents):
        """Offsets are converted to UTC instants and the event is opaque."""
        lines = _event_lines(encode_calendar(_record(documents.timed_document())))

        assert "DTSTART:20260224T140000Z" in lines
        assert "DTEND:20260224T150000Z" in lines
        assert "TRANSP:OPAQUE" in lines
        assert "CLASS:PUBLIC" in lines
        assert f"DTSTAMP:{FIXED_STAMP}" in lines

    def test_fractional_seconds_are_dropped(self, documents):
        """Instants are written with second precision."""
        event = documents.timed_event(start="2026-02-23T10:30:00.123-04:00", end="2026-02-23T11:15:00.456-04:00")

        lines = _event_lines(encode_calendar(_record(documents.document([event]))))

        assert "DTSTART:20260223T143000Z" in lines
        assert "DTEND:20260223T151500Z" in lines

    def test_all_day_event_has_no_end(self, documents):
        """All-day events are written with a DATE start only."""
        lines = _event_lines(encode_calendar(_record(documents.all_day_document())))

        assert "DTSTART;VALUE=DATE:20260224" in lines
        assert not any(line.startswith("DTEND") for line in lines)
        assert "TRANSP:TRANSPARENT" in lines

    def test_optional_event_properties(self, documents):
        """Description, location and categories are written when present."""
        event = documents.timed_event(
            description="Quarterly review",
            location="Room 4",
            categories=["Work", "Review"],
        )

        lines = _event_lines(encode_calendar(_record(documents.document([event]))))

        assert "DESCRIPTION:Quarterly review" in lines
        assert "LOCATION:Room 4" in lines
        assert "CATEGORIES:Work,Review" in lines

    def test_absent_optional_event_properties_are_omitted(self, documents):
        """No empty properties are produced for missing optional fields."""
        lines = _event_lines(encode_calendar(_record(documents.timed_document())))

        for prefix in ("DESCRIPTION", "LOCATION", "CATEGORIES", "RRULE", "RDATE", "EXDATE"):
            assert not any(line.startswith(prefix) for line in lines)

    def test_categories_keep_order_and_duplicates(self, documents):
        """Categories are written as given, with commas escaped."""
        event = documents.all_day_event(categories=["Work", "Team, Sync", "Work"])

        lines = _event_lines(encode_calendar(_record(documents.document([event]))))

        assert "CATEGORIES:Work,Team\\, Sync,Work" in lines

    def test_recurrence_rule_is_written_verbatim(self, documents):
        """The rule body is copied without reordering its parts."""
        event = documents.all_day_event(recurrenceRule="RRULE:INTERVAL=2;FREQ=WEEKLY;BYDAY=MO,WE")

        lines = _event_lines(encode_calendar(_record(documents.document([event]))))

        assert "RRULE:INTERVAL=2;FREQ=WEEKLY;BYDAY=MO,WE" in lines

    def test_all_day_exception_dates_use_date_values(self, documents):
        """All-day EXDATE values are DATE values on one property."""
        event = documents.all_day_event(
            recurrenceRule="RRULE:FREQ=WEEKLY",
            exceptionDates=["2026-03-03", "2026-03-10"],
        )

        lines = _event_lines(encode_calendar(_record(documents.document([event]))))

        assert "EXDATE;VALUE=DATE:20260303,20260310" in lines

    def test_timed_recurrence_dates_use_utc_values(self, documents):
        """Timed RDATE values are converted to UTC."""
        event = documents.timed_event(recurrenceDates=["2026-03-03T10:00:00-04:00"])

        lines = _event_lines(encode_calendar(_record(documents.document([event]))))

        assert "RDATE:20260303T140000Z" in lines

    def test_text_is_escaped_and_round_trips(self, documents):
        """Commas, semicolons, backslashes and newlines survive a parse."""
        summary = 'Lunch, "Bistro"; bring \\ cash\nand smiles'
        event = documents.timed_event(summary=summary, location="Café Müller")

        text = encode_calendar(_record(documents.document([event])))

        assert 'SUMMARY:Lunch\\, "Bistro"\\; bring \\\\ cash\\nand smiles' in _lines(text)
        parsed = Calendar.from_ical(text)
        vevent = parsed.walk("VEVENT")[0]
        assert str(vevent.get("SUMMARY")) == summary
        assert str(vevent.get("LOCATION")) == "Café Müller"

    def test_long_lines_are_folded_at_75_octets(self, documents):
        """Every physical line fits in 75 octets and unfolds to the original."""
        description = ("Überraschung im Büro " * 12).strip()
        event = documents.timed_event(description=description, summary="x" * 200)

        text = encode_calendar(_record(documents.document([event])))

        physical_lines = text.split("\r\n")
        assert all(len(line.encode("utf-8")) <= 75 for line in physical_lines)
        assert any(line.startswith(" ") for line in physical_lines)
        vevent = Calendar.from_ical(text).walk("VEVENT")[0]
        assert str(vevent.get("DESCRIPTION")) == description
        assert str(vevent.get("SUMMARY")) == "x" * 200


@pytest.mark.unit
class TestEncodingInvariants:
    """Records that cannot be encoded."""

    def test_event_without_timing_raises(self, documents):
        """An event with neither variant is an invariant violation."""
        record = _record(documents.timed_document())
        broken = record.events[0].model_copy(update={"timing": None})

        with pytest.raises(EncodingInvariantError, match="no all-day or timed variant"):
            encode_event(broken)

    def test_invariant_error_propagates_from_encode_calendar(self, documents):
        """The failure is not swallowed by the calendar encoder."""
        record = _record(documents.timed_document())
        broken = record.model_copy(update={"events": (record.events[0].model_copy(update={"timing": None}),)})

        with pytest.raises(EncodingInvariantError) as exc_info:
            encode_calendar(broken)

        assert exc_info.value.source == "encode_calendar"

    def test_mismatched_date_list_raises(self, documents):
        """A timed event with DATE exception values cannot be encoded."""
        record = _record(documents.timed_document())
        broken = record.events[0].model_copy(update={"exception_dates": (date(2026, 3, 3),)})

        with pytest.raises(EncodingInvariantError, match="date list values"):
            encode_event(broken)
