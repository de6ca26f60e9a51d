"""Tests for the aggregator fan-out/fan-in."""

import asyncio
from datetime import date, datetime

import pytest

from app.export.aggregator import aggregate
from app.export.domains import ExportDomain
from app.export.selection import resolve_selection
from app.utils.errors import DomainReadError
from tests.fakes import FakeReader


class TestAggregate:
    """Test suite for aggregate()."""

    @pytest.mark.asyncio
    async def test_bundle_contains_exactly_flagged_domains(
        self, make_readers, sample_financial_goals, sample_habits
    ):
        """Test that only flagged domains are present."""
        readers = make_readers(
            financial_goals=FakeReader(ExportDomain.FINANCIAL_GOALS, sample_financial_goals),
            habits=FakeReader(ExportDomain.HABITS, sample_habits),
        )
        plan = resolve_selection({"financialGoals": True, "journalEntries": True})

        bundle = await aggregate(plan, "user_1", readers)

        assert list(bundle) == ["financialGoals", "journalEntries"]
        assert "habits" not in bundle
        assert bundle["journalEntries"] == []
        assert readers[ExportDomain.HABITS].calls == []

    @pytest.mark.asyncio
    async def test_empty_plan_returns_empty_bundle(self, make_readers):
        """Test that excluding everything is not an error."""
        readers = make_readers()

        bundle = await aggregate(resolve_selection({}), "user_1", readers)

        assert bundle == {}
        assert all(reader.calls == [] for reader in readers.values())

    @pytest.mark.asyncio
    async def test_records_scoped_to_user(self, make_readers, sample_financial_goals):
        """Test that another user's records never leak into the bundle."""
        readers = make_readers(
            financial_goals=FakeReader(ExportDomain.FINANCIAL_GOALS, sample_financial_goals),
        )

        bundle = await aggregate(resolve_selection({"financialGoals": True}), "user_1", readers)

        assert {r["user_id"] for r in bundle["financialGoals"]} == {"user_1"}
        assert [r["id"] for r in bundle["financialGoals"]] == ["fg_1", "fg_2"]

    @pytest.mark.asyncio
    async def test_range_and_options_forwarded(self, make_readers, sample_financial_goals):
        """Test that readers receive the range and domain extras."""
        readers = make_readers(
            financial_goals=FakeReader(ExportDomain.FINANCIAL_GOALS, sample_financial_goals),
        )
        plan = resolve_selection(
            {"financialGoals": True, "habits": True},
            date_from="2024-01-01",
            date_to="2024-12-31",
            days=7,
        )

        bundle = await aggregate(plan, "user_1", readers)

        assert [r["id"] for r in bundle["financialGoals"]] == ["fg_1"]
        habits_call = readers[ExportDomain.HABITS].calls[0]
        assert habits_call["days"] == 7
        assert habits_call["date_range"].start == date(2024, 1, 1)

    @pytest.mark.asyncio
    async def test_every_record_within_range(self, make_readers):
        """Test that records in the bundle fall within the requested range."""
        records = [
            {"id": f"s_{d}", "user_id": "user_1", "date": date(2024, 1, d)}
            for d in (1, 10, 20, 31)
        ]
        readers = make_readers(
            snapshots=FakeReader(ExportDomain.SNAPSHOTS, records, date_key="date"),
        )
        plan = resolve_selection(
            {"progressSnapshots": True}, date_from="2024-01-05", date_to="2024-01-20"
        )

        bundle = await aggregate(plan, "user_1", readers)

        date_range = plan.included[0].date_range
        assert [r["id"] for r in bundle["progressSnapshots"]] == ["s_10", "s_20"]
        assert all(date_range.contains(r["date"]) for r in bundle["progressSnapshots"])

    @pytest.mark.asyncio
    async def test_idempotent(self, make_readers, sample_financial_goals, sample_habits):
        """Test that identical inputs yield identical bundles."""
        readers = make_readers(
            financial_goals=FakeReader(ExportDomain.FINANCIAL_GOALS, sample_financial_goals),
            habits=FakeReader(ExportDomain.HABITS, sample_habits),
        )
        plan = resolve_selection({"financialGoals": True, "habits": True})

        first = await aggregate(plan, "user_1", readers)
        second = await aggregate(plan, "user_1", readers)

        assert first == second
        assert list(first) == list(second)

    @pytest.mark.asyncio
    async def test_reader_failure_names_domain(self, make_readers):
        """Test that a failing reader fails the whole export."""
        readers = make_readers(
            budgets=FakeReader(ExportDomain.BUDGETS, error=ConnectionError("db down")),
        )
        plan = resolve_selection({"habits": True, "budgets": True})

        with pytest.raises(DomainReadError) as exc_info:
            await aggregate(plan, "user_1", readers)

        assert exc_info.value.domain == "budgets"
        assert exc_info.value.details["domain"] == "budgets"
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_failure_cancels_siblings(self, make_readers):
        """Test that in-flight readers are cancelled when one fails."""
        slow = FakeReader(ExportDomain.JOURNALS, delay=5.0)
        readers = make_readers(
            journals=slow,
            habits=FakeReader(ExportDomain.HABITS, error=RuntimeError("boom")),
        )
        plan = resolve_selection({"habits": True, "journalEntries": True})

        with pytest.raises(DomainReadError) as exc_info:
            await aggregate(plan, "user_1", readers)

        assert exc_info.value.domain == "habits"
        assert slow.cancelled is True

    @pytest.mark.asyncio
    async def test_missing_reader(self):
        """Test that an unregistered domain is a read error."""
        plan = resolve_selection({"systems": True})

        with pytest.raises(DomainReadError) as exc_info:
            await aggregate(plan, "user_1", {})

        assert exc_info.value.domain == "systems"

    @pytest.mark.asyncio
    async def test_external_cancellation_propagates(self, make_readers):
        """Test that cancelling the request cancels the readers."""
        slow = FakeReader(ExportDomain.HABITS, delay=5.0)
        readers = make_readers(habits=slow)
        plan = resolve_selection({"habits": True})

        task = asyncio.create_task(aggregate(plan, "user_1", readers))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert slow.cancelled is True

    @pytest.mark.asyncio
    async def test_readers_run_concurrently(self, make_readers):
        """Test that readers overlap instead of running one after another."""
        readers = make_readers(
            habits=FakeReader(ExportDomain.HABITS, delay=0.2),
            budgets=FakeReader(ExportDomain.BUDGETS, delay=0.2),
            journals=FakeReader(ExportDomain.JOURNALS, delay=0.2),
        )
        plan = resolve_selection({"habits": True, "budgets": True, "journalEntries": True})

        started = datetime.now()
        await aggregate(plan, "user_1", readers)
        elapsed = (datetime.now() - started).total_seconds()

        assert elapsed < 0.5
