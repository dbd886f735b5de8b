"""
Pytest test module for metric value extraction and row coercion.

Test Classes:
- TestMetricRowCoercion: Lenient conversion of store records
- TestGetMetricValue: Metric key to row field mapping
- TestRounding: Half-up rounding and window labels
"""

import math
from datetime import date, datetime
from decimal import Decimal

import pytest

from metric_insights.models import MetricKey
from metric_insights.services.metric_values import (
    MetricRow,
    calculate_total,
    get_metric_value,
    round_half_up,
    window_label,
)
from metric_insights.tests.conftest import make_record, make_row


class TestMetricRowCoercion:
    """Tests for MetricRow.from_record."""

    def test_numeric_strings_and_decimals_are_converted(self) -> None:
        row = MetricRow.from_record(make_record(date(2026, 1, 10), users='42', events=Decimal('7.5')))

        assert row.users == 42.0
        assert row.events == 7.5

    @pytest.mark.parametrize('bad_value', [None, 'abc', float('nan'), float('inf'), True])
    def test_unusable_numbers_become_none(self, bad_value) -> None:
        row = MetricRow.from_record(make_record(date(2026, 1, 10), users=bad_value))

        assert row.users is None
        assert get_metric_value(row, MetricKey.ACTIVE_USERS) == 0.0

    def test_datetime_and_iso_string_dates(self) -> None:
        from_datetime = MetricRow.from_record(make_record(datetime(2026, 1, 10, 13, 30)))
        from_string = MetricRow.from_record(make_record('2026-01-10T00:00:00Z'))

        assert from_datetime.date == date(2026, 1, 10)
        assert from_string.date == date(2026, 1, 10)

    def test_unparseable_date_becomes_none(self) -> None:
        row = MetricRow.from_record(make_record('not-a-date'))

        assert row.date is None

    def test_blank_text_becomes_none(self) -> None:
        row = make_row(channel='   ', device='', geo=None)

        assert row.channel is None
        assert row.device is None
        assert row.geo is None

    def test_text_is_stripped(self) -> None:
        row = make_row(channel='  Referral ')

        assert row.channel == 'Referral'

    def test_row_is_immutable(self) -> None:
        row = make_row(users=10)

        with pytest.raises(AttributeError):
            row.users = 20  # type: ignore[misc]


class TestGetMetricValue:
    """Tests for get_metric_value and calculate_total."""

    def test_active_users_reads_users(self) -> None:
        assert get_metric_value(make_row(users=12, events=99), MetricKey.ACTIVE_USERS) == 12

    def test_event_count_reads_events(self) -> None:
        assert get_metric_value(make_row(users=12, events=99), MetricKey.EVENT_COUNT) == 99

    def test_new_users_reads_users(self) -> None:
        assert get_metric_value(make_row(users=12, events=99), MetricKey.NEW_USERS) == 12

    def test_time_to_lead_submit_is_zero(self) -> None:
        assert get_metric_value(make_row(users=12, events=99), MetricKey.AVG_TIME_TO_LEAD_SUBMIT) == 0.0

    def test_missing_values_count_as_zero(self) -> None:
        rows = [make_row(users=None), make_row(users=5), make_row(users='x')]

        assert calculate_total(rows, MetricKey.ACTIVE_USERS) == 5.0

    def test_total_of_empty_rows_is_zero(self) -> None:
        assert calculate_total([], MetricKey.EVENT_COUNT) == 0.0


class TestRounding:
    """Tests for round_half_up and window_label."""

    @pytest.mark.parametrize('value, digits, expected', [
        (12.25, 1, 12.3),
        (0.05, 1, 0.1),
        (-12.25, 1, -12.2),
        (40.0, 1, 40.0),
        (199.5, 0, 200.0),
        (-199.5, 0, -199.0),
        (0.125, 2, 0.13),
    ])
    def test_halves_round_towards_positive_infinity(self, value, digits, expected) -> None:
        assert math.isclose(round_half_up(value, digits), expected)

    def test_window_label(self) -> None:
        assert window_label(7) == '7 days'
        assert window_label(14) == '14 days'
