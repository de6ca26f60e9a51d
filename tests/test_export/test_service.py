"""Tests for ExportService."""

from datetime import datetime

import pytest

from app.export.domains import ExportDomain
from app.export.encoder import TabularFile
from app.export.service import ExportService
from app.utils.errors import DomainReadError, ValidationError
from tests.fakes import FakeProfileReader, FakeReader


@pytest.fixture
def profiles():
    return FakeProfileReader({
        "user_1": {
            "id": "user_1",
            "email": "ana@example.com",
            "name": "Ana",
            "created_at": datetime(2023, 6, 1, 12, 0),
        }
    })


@pytest.fixture
def service(make_readers, profiles, sample_financial_goals, sample_habits):
    readers = make_readers(
        financial_goals=FakeReader(ExportDomain.FINANCIAL_GOALS, sample_financial_goals),
        habits=FakeReader(ExportDomain.HABITS, sample_habits),
        budgets=FakeReader(
            ExportDomain.BUDGETS,
            [{"id": "b_1", "user_id": "user_1", "year": 2024, "month": 1, "income": 4000}],
        ),
    )
    return ExportService(readers=readers, profile_reader=profiles)


class TestExportUserData:
    """Test suite for the multi-domain export."""

    @pytest.mark.asyncio
    async def test_csv_habits_only(self, service):
        """Test CSV export of habits with a 7-day window."""
        files = await service.export_user_data(
            "user_1", {"habits": True}, format="csv", days=7
        )

        assert set(files) == {"habits.csv"}
        header = files["habits.csv"].split("\n")[0]
        assert header == (
            "id,user_id,name,frequency,current_streak,is_active,created_at,check_ins,quantity_unit"
        )
        assert service.readers[ExportDomain.HABITS].calls[0]["days"] == 7

    @pytest.mark.asyncio
    async def test_json_returns_bundle(self, service):
        """Test that JSON mode returns domain key -> records."""
        bundle = await service.export_user_data(
            "user_1", {"includeFinancialGoals": True, "budgets": True}
        )

        assert list(bundle) == ["financialGoals", "budgets"]
        assert [g["id"] for g in bundle["financialGoals"]] == ["fg_1", "fg_2"]

    @pytest.mark.asyncio
    async def test_nothing_selected(self, service):
        """Test that an empty selection is an empty result in both formats."""
        assert await service.export_user_data("user_1", {}) == {}
        assert await service.export_user_data("user_1", {}, format="csv") == {}

    @pytest.mark.asyncio
    async def test_invalid_date_rejected_before_reading(self, service):
        """Test that a bad dateTo fails before any reader runs."""
        with pytest.raises(ValidationError) as exc_info:
            await service.export_user_data(
                "user_1", {"habits": True}, date_from="2024-01-01", date_to="not-a-date"
            )

        assert exc_info.value.field == "dateTo"
        assert all(reader.calls == [] for reader in service.readers.values())

    @pytest.mark.asyncio
    async def test_invalid_format_rejected_before_reading(self, service):
        """Test that an unknown format fails before any reader runs."""
        with pytest.raises(ValidationError):
            await service.export_user_data("user_1", {"habits": True}, format="xml")

        assert all(reader.calls == [] for reader in service.readers.values())

    @pytest.mark.asyncio
    async def test_non_boolean_flag_rejected_before_reading(self, service):
        """Test that a string flag is not silently treated as true."""
        with pytest.raises(ValidationError) as exc_info:
            await service.export_user_data("user_1", {"includeHabits": "false"})

        assert exc_info.value.field == "includeHabits"
        assert all(reader.calls == [] for reader in service.readers.values())

    @pytest.mark.asyncio
    async def test_reader_failure_propagates(self, make_readers):
        """Test that a failing reader surfaces as DomainReadError."""
        service = ExportService(
            readers=make_readers(
                journals=FakeReader(ExportDomain.JOURNALS, error=ConnectionError("down")),
            ),
            profile_reader=FakeProfileReader(),
        )

        with pytest.raises(DomainReadError) as exc_info:
            await service.export_user_data("user_1", {"journalEntries": True}, format="csv")

        assert exc_info.value.domain == "journalEntries"


class TestSingleDomainExports:
    """Test suite for per-domain exports."""

    @pytest.mark.asyncio
    async def test_financial_goals_json(self, service):
        """Test that JSON mode returns the records list."""
        goals = await service.export_financial_goals("user_1")

        assert [g["id"] for g in goals] == ["fg_1", "fg_2"]

    @pytest.mark.asyncio
    async def test_financial_goals_csv(self, service):
        """Test that CSV mode returns an escaped TabularFile."""
        result = await service.export_financial_goals("user_1", "csv")

        assert isinstance(result, TabularFile)
        assert result.filename == "financial_goals.csv"
        assert result.media_type == "text/csv"
        assert '"Save, invest, retire"' in result.content
        assert '"Keep ""untouchable"""' in result.content

    @pytest.mark.asyncio
    async def test_habits_days_forwarded(self, service):
        """Test that a numeric string window reaches the reader as int."""
        await service.export_habits("user_1", days="14")

        assert service.readers[ExportDomain.HABITS].calls[0]["days"] == 14

    @pytest.mark.asyncio
    async def test_habits_invalid_days_default(self, service):
        """Test that days=0 falls back to 30."""
        await service.export_habits("user_1", days=0)

        assert service.readers[ExportDomain.HABITS].calls[0]["days"] == 30

    @pytest.mark.asyncio
    async def test_budgets_year(self, service):
        """Test that the year is forwarded and names the file."""
        result = await service.export_budgets("user_1", "2024", "csv")

        assert result.filename == "budgets_2024.csv"
        assert result.content.startswith("id,user_id,year,month,income")
        assert service.readers[ExportDomain.BUDGETS].calls[0]["year"] == 2024

    @pytest.mark.asyncio
    @pytest.mark.parametrize("year", ["abc", None, True, 12, 10000])
    async def test_budgets_invalid_year(self, service, year):
        """Test that invalid years fail before reading."""
        with pytest.raises(ValidationError) as exc_info:
            await service.export_budgets("user_1", year)

        assert exc_info.value.field == "year"
        assert service.readers[ExportDomain.BUDGETS].calls == []


class TestExportSummary:
    """Test suite for the summary."""

    @pytest.mark.asyncio
    async def test_summary(self, service):
        """Test per-domain counts plus habit check-ins in the total."""
        summary = await service.get_export_summary("user_1")

        assert summary.counts["financialGoals"] == 2
        assert summary.counts["habits"] == 2
        assert summary.counts["budgets"] == 1
        assert summary.habit_check_ins == 1
        assert summary.total_records == 6
        assert len(summary.counts) == len(ExportDomain)


class TestGetProfile:
    """Test suite for the profile read."""

    @pytest.mark.asyncio
    async def test_known_user(self, service):
        """Test that the profile carries id, email, name and created_at."""
        profile = await service.get_profile("user_1")

        assert profile == {
            "id": "user_1",
            "email": "ana@example.com",
            "name": "Ana",
            "created_at": datetime(2023, 6, 1, 12, 0),
        }

    @pytest.mark.asyncio
    async def test_unknown_user(self, service):
        """Test that a missing user yields None, not an error."""
        assert await service.get_profile("ghost") is None

    @pytest.mark.asyncio
    async def test_failure_is_domain_read_error(self, make_readers):
        """Test that a profile failure is reported under the profile name."""
        service = ExportService(
            readers=make_readers(),
            profile_reader=FakeProfileReader(error=ConnectionError("down")),
        )

        with pytest.raises(DomainReadError) as exc_info:
            await service.get_profile("user_1")

        assert exc_info.value.domain == "profile"
