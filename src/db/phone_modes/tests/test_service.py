"""
Unit tests for PhoneModeService.

Runs the service against the in-memory repository so that validation,
conflict handling and bulk classification are exercised end to end.
"""

import pytest

from src.db.phone_modes.constants import UNKNOWN_MODE, PhoneMode
from src.db.phone_modes.exceptions import (
    InvalidModeError,
    PhoneModeConflictError,
    PhoneModeNotFoundError,
    PhoneModeValidationError,
)


class TestLookup:
    @pytest.mark.asyncio
    async def test_lookup_found(self, service, repository):
        await repository.insert("+19191919191", PhoneMode.OTP)

        result = await service.lookup("+19191919191", from_number="+1555", call_sid="CA1")

        assert result.called_number == "+19191919191"
        assert result.mode == "OTP"
        assert result.from_number == "+1555"
        assert result.call_sid == "CA1"

    @pytest.mark.asyncio
    async def test_lookup_miss_is_unknown(self, service):
        result = await service.lookup("+10000000000")

        assert result.mode == UNKNOWN_MODE
        assert result.called_number == "+10000000000"

    @pytest.mark.asyncio
    async def test_lookup_without_number_is_unknown(self, service, repository):
        """A blank number never reaches the store."""
        result = await service.lookup("  ")

        assert result.called_number == ""
        assert result.mode == UNKNOWN_MODE

    @pytest.mark.asyncio
    async def test_lookup_trims_number(self, service, repository):
        await repository.insert("+17753055823", PhoneMode.CALL)

        result = await service.lookup(" +17753055823 ")

        assert result.mode == "CALL"


class TestAddNumber:
    @pytest.mark.asyncio
    async def test_add_number_normalizes_and_commits(self, service, repository):
        record = await service.add_number("  +15550001111 ", "OTP")

        assert record.number == "+15550001111"
        assert record.mode == "OTP"
        repository.session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "number,mode", [(None, "CALL"), ("", "CALL"), ("+1555", None), ("+1555", "")]
    )
    async def test_add_number_requires_both_fields(self, service, number, mode):
        with pytest.raises(PhoneModeValidationError, match="required"):
            await service.add_number(number, mode)

    @pytest.mark.asyncio
    async def test_add_number_rejects_invalid_mode(self, service, repository):
        with pytest.raises(InvalidModeError):
            await service.add_number("+1555", "SMS")

        assert await repository.count() == 0

    @pytest.mark.asyncio
    async def test_add_number_mode_is_case_sensitive(self, service):
        with pytest.raises(InvalidModeError):
            await service.add_number("+1555", "call")

    @pytest.mark.asyncio
    async def test_add_number_rejects_blank_number(self, service, repository):
        with pytest.raises(PhoneModeValidationError, match="empty"):
            await service.add_number("   ", "CALL")

        assert await repository.count() == 0

    @pytest.mark.asyncio
    async def test_add_duplicate_number_conflicts(self, service, repository):
        await service.add_number("+1555", "CALL")

        with pytest.raises(PhoneModeConflictError):
            await service.add_number(" +1555 ", "OTP")

        assert await repository.count() == 1
        only = (await repository.list_all())[0]
        assert only.mode == "CALL"


class TestUpdateMode:
    @pytest.mark.asyncio
    async def test_update_mode(self, service, repository):
        record = await repository.insert("+1555", PhoneMode.CALL)

        updated = await service.update_mode(record.id, "OTP")

        assert updated.id == record.id
        assert updated.mode == "OTP"
        repository.session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_mode_invalid_value_leaves_mode(self, service, repository):
        record = await repository.insert("+1555", PhoneMode.CALL)

        with pytest.raises(InvalidModeError):
            await service.update_mode(record.id, "SMS")

        assert (await repository.get_by_id(record.id)).mode == "CALL"

    @pytest.mark.asyncio
    async def test_update_mode_requires_fields(self, service):
        with pytest.raises(PhoneModeValidationError, match="required"):
            await service.update_mode(None, "CALL")

    @pytest.mark.asyncio
    async def test_update_mode_unknown_id(self, service):
        with pytest.raises(PhoneModeNotFoundError):
            await service.update_mode("missing-id", "CALL")


class TestDeleteNumber:
    @pytest.mark.asyncio
    async def test_delete_returns_removed_record(self, service, repository):
        record = await repository.insert("+1555", PhoneMode.OTP)

        removed = await service.delete_number(record.id)

        assert removed.number == "+1555"
        assert await repository.count() == 0

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, service):
        with pytest.raises(PhoneModeNotFoundError):
            await service.delete_number("missing-id")


class TestListAndStats:
    @pytest.mark.asyncio
    async def test_list_is_newest_first(self, service, repository):
        await repository.insert("+1A", PhoneMode.CALL)
        await repository.insert("+1B", PhoneMode.OTP)

        records = await service.list_numbers()

        assert [r.number for r in records] == ["+1B", "+1A"]

    @pytest.mark.asyncio
    async def test_stats_counts_per_mode(self, service, repository):
        await repository.insert("+1A", PhoneMode.CALL)
        await repository.insert("+1B", PhoneMode.CALL)
        await repository.insert("+1C", PhoneMode.OTP)

        stats = await service.get_stats()

        assert (stats.total, stats.call, stats.otp) == (3, 2, 1)
        assert stats.timestamp is not None


class TestBulkAdd:
    @pytest.mark.asyncio
    async def test_mixed_batch(self, service, repository):
        """Each item is classified on its own; one bad item never blocks the rest."""
        results = await service.bulk_add(
            [
                {"number": "+1A", "mode": "CALL"},
                {"number": "+1A", "mode": "OTP"},
                {"number": "", "mode": "CALL"},
                {"number": "+1B", "mode": "BAD"},
            ]
        )

        assert [r.number for r in results.added] == ["+1A"]
        assert results.added[0].mode == "CALL"
        assert [(s.number, s.reason) for s in results.skipped] == [("+1A", "exists")]
        assert [(e.number, e.error) for e in results.errors] == [
            ("", "Invalid number"),
            ("+1B", "Invalid mode"),
        ]
        assert await repository.count() == 1

        stats = await service.get_stats()
        assert (stats.total, stats.call, stats.otp) == (1, 1, 0)

    @pytest.mark.asyncio
    async def test_missing_mode_defaults_to_call(self, service):
        results = await service.bulk_add([{"number": "+1A"}, {"number": "+1B", "mode": None}])

        assert [r.mode for r in results.added] == ["CALL", "CALL"]

    @pytest.mark.asyncio
    async def test_existing_number_is_skipped(self, service, repository):
        await repository.insert("+1A", PhoneMode.OTP)

        results = await service.bulk_add([{"number": " +1A ", "mode": "CALL"}])

        assert results.added == []
        assert results.skipped[0].number == "+1A"
        assert (await repository.find_by_number("+1A")).mode == "OTP"

    @pytest.mark.asyncio
    async def test_non_object_items_are_errors(self, service):
        results = await service.bulk_add(["+1A", None, {"number": "+1B"}])

        assert len(results.errors) == 2
        assert [r.number for r in results.added] == ["+1B"]

    @pytest.mark.asyncio
    async def test_unexpected_item_failure_is_isolated(self, service, repository):
        original_insert = repository.insert

        async def flaky_insert(number, mode):
            if number == "+1BOOM":
                raise RuntimeError("connection reset")
            return await original_insert(number, mode)

        repository.insert = flaky_insert

        results = await service.bulk_add(
            [{"number": "+1BOOM"}, {"number": "+1OK", "mode": "OTP"}]
        )

        assert [(e.number, e.error) for e in results.errors] == [
            ("+1BOOM", "Failed to add number")
        ]
        assert [r.number for r in results.added] == ["+1OK"]
