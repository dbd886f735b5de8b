"""
Pytest test module for the two-window metric loader.

Test Classes:
- TestSplitWindows: Cutoff semantics
- TestLoadMetricWindows: Query parameters and window assembly via a mock pool
"""

from datetime import date, timedelta
from unittest.mock import AsyncMock, patch

import pytest

from metric_insights.services.metric_loader import (
    MetricWindows,
    fetch_metric_rows,
    load_metric_windows,
    split_windows,
)
from metric_insights.tests.conftest import AS_OF, make_record, make_row


LOADER_POOL = 'metric_insights.services.metric_loader.get_db_pool'


class TestSplitWindows:
    """Tests for split_windows."""

    def test_cutoff_day_belongs_to_current(self) -> None:
        cutoff = date(2026, 1, 8)
        rows = [make_row(cutoff), make_row(cutoff - timedelta(days=1))]

        current, previous = split_windows(rows, cutoff)

        assert [r.date for r in current] == [cutoff]
        assert [r.date for r in previous] == [cutoff - timedelta(days=1)]

    def test_rows_without_date_are_dropped(self) -> None:
        rows = [make_row('garbage'), make_row(date(2026, 1, 10))]

        current, previous = split_windows(rows, date(2026, 1, 8))

        assert len(current) == 1
        assert previous == []

    def test_order_is_preserved(self) -> None:
        days = [date(2026, 1, 14), date(2026, 1, 12), date(2026, 1, 9)]

        current, _ = split_windows([make_row(d) for d in days], date(2026, 1, 8))

        assert [r.date for r in current] == days


class TestLoadMetricWindows:
    """Tests for fetch_metric_rows and load_metric_windows."""

    @pytest.mark.asyncio
    async def test_queries_two_windows_back(self, mock_db_pool: AsyncMock, mock_conn: AsyncMock) -> None:
        with patch(LOADER_POOL, new=AsyncMock(return_value=mock_db_pool)):
            await load_metric_windows('site-1', as_of=AS_OF)

        query, site_id, since = mock_conn.fetch.call_args.args
        assert 'FROM ga4_daily' in query
        assert 'ORDER BY date DESC' in query
        assert site_id == 'site-1'
        assert since == AS_OF - timedelta(days=14)

    @pytest.mark.asyncio
    async def test_rows_are_split_at_window_boundary(self, mock_db_pool: AsyncMock, mock_conn: AsyncMock) -> None:
        mock_conn.fetch.return_value = [
            make_record(AS_OF, users=10),
            make_record(AS_OF - timedelta(days=7), users=20),
            make_record(AS_OF - timedelta(days=8), users=30),
            make_record(AS_OF - timedelta(days=14), users=40),
        ]

        with patch(LOADER_POOL, new=AsyncMock(return_value=mock_db_pool)):
            windows = await load_metric_windows('site-1', as_of=AS_OF)

        assert isinstance(windows, MetricWindows)
        assert [r.users for r in windows.current] == [10.0, 20.0]
        assert [r.users for r in windows.previous] == [30.0, 40.0]
        assert windows.window_days == 7
        assert windows.label == '7 days'

    @pytest.mark.asyncio
    async def test_window_length_follows_settings(
        self,
        monkeypatch: pytest.MonkeyPatch,
        mock_db_pool: AsyncMock,
        mock_conn: AsyncMock,
    ) -> None:
        from metric_insights.core.config import get_settings

        monkeypatch.setenv('COMPARISON_WINDOW_DAYS', '14')
        get_settings.cache_clear()

        with patch(LOADER_POOL, new=AsyncMock(return_value=mock_db_pool)):
            windows = await load_metric_windows('site-1', as_of=AS_OF)

        assert mock_conn.fetch.call_args.args[2] == AS_OF - timedelta(days=28)
        assert windows.label == '14 days'

    @pytest.mark.asyncio
    async def test_fetch_errors_propagate(self, mock_db_pool: AsyncMock, mock_conn: AsyncMock) -> None:
        mock_conn.fetch.side_effect = RuntimeError('connection reset')

        with patch(LOADER_POOL, new=AsyncMock(return_value=mock_db_pool)):
            with pytest.raises(RuntimeError, match='connection reset'):
                await fetch_metric_rows('site-1', AS_OF)
