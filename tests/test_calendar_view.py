"""
Tests for the booking page view models and pt-BR labels.
"""

from datetime import date, datetime

from app.services.calendar_view import build_month, build_time_picker, select_time, shift_month
from app.utils.dates import describe_date, describe_full_date, hour_label, month_title, week_day_name


def test_labels():
    assert week_day_name(date(2030, 1, 6)) == "domingo"
    assert week_day_name(date(2030, 1, 7)) == "segunda-feira"
    assert describe_date(date(2024, 1, 4)) == "04 de janeiro"
    assert describe_full_date(date(2024, 3, 15)) == "15 de março de 2024"
    assert hour_label(8) == "08:00h"
    assert month_title(12) == "Dezembro"


def test_select_time_zeroes_minutes():
    assert select_time(date(2030, 1, 7), 14) == datetime(2030, 1, 7, 14, 0, 0)


class TestTimePicker:
    def test_unavailable_hours_are_disabled(self):
        picker = build_time_picker(
            date(2030, 1, 7), {"possibleTimes": [8, 9, 10], "availableTimes": [8, 10]}
        )

        assert picker["week_day"] == "segunda-feira"
        assert picker["described_date"] == "07 de janeiro"
        assert [(s["label"], s["disabled"]) for s in picker["slots"]] == [
            ("08:00h", False),
            ("09:00h", True),
            ("10:00h", False),
        ]
        assert picker["slots"][0]["datetime"] == "2030-01-07T08:00:00"

    def test_no_availability_yet_renders_no_slots(self):
        assert build_time_picker(date(2030, 1, 7), None)["slots"] == []


class TestMonth:
    def test_shift_month_wraps_years(self):
        assert shift_month(2030, 1, -1) == (2029, 12)
        assert shift_month(2030, 12, 1) == (2031, 1)

    def test_grid_starts_on_sunday_and_pads(self):
        month = build_month(2030, 1, None, today=date(2029, 1, 1))

        first_week = month["weeks"][0]
        # 2030-01-01 is a Tuesday
        assert [d["day"] for d in first_week] == [30, 31, 1, 2, 3, 4, 5]
        assert first_week[0]["disabled"] and first_week[1]["disabled"]
        assert not first_week[2]["disabled"]
        assert month["title"] == "Janeiro"
        assert month["previous"] == "2029-12"
        assert month["next"] == "2030-02"

    def test_blocked_and_past_days_are_disabled(self):
        blocked = {"blockedWeekDays": [0, 6], "blockedDates": [15]}

        month = build_month(2030, 1, blocked, today=date(2030, 1, 10), selected_date=date(2030, 1, 16))

        days = {d["date"]: d for week in month["weeks"] for d in week}
        assert days["2030-01-09"]["disabled"]  # Past
        assert days["2030-01-12"]["disabled"]  # Saturday
        assert days["2030-01-13"]["disabled"]  # Sunday
        assert days["2030-01-15"]["disabled"]  # Fully booked
        assert not days["2030-01-10"]["disabled"]
        assert days["2030-01-16"]["selected"]
