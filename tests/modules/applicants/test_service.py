"""
Applicants service tests against a SQLite store.

These tests cover:
- Pagination (newest first, page math, limit clamping)
- Lookup by numeric id or applicant_id
- Statistics
- Offer and fee flag updates
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from admissions.modules.applicants.models import Applicant
from admissions.modules.applicants.repository import is_numeric_identifier
from admissions.modules.applicants.service import (
    MAX_PAGE_SIZE,
    ApplicantNotFoundError,
    get_applicant,
    get_stats,
    list_applicants,
    set_fee_paid,
    set_offer_issued,
)


@pytest.fixture
def seed_applicants(orm_store):
    async def _seed():
        base = datetime(2025, 3, 1, 9, 0, 0)
        rows = [
            ("APP001", "PGP", "admitted", True, True),
            ("APP002", "PGP", "under_review", False, False),
            ("APP003", "PhD", "rejected", False, False),
            ("APP004", "EPhD", "under_review", True, False),
            ("APP005", "EMBA", "admitted", True, True),
        ]
        for i, (code, program, status, offer, fee) in enumerate(rows):
            orm_store.add(
                Applicant(
                    applicant_id=code,
                    name=f"Applicant {i + 1}",
                    program_applied_for=program,
                    application_status=status,
                    offer_issued=offer,
                    fee_paid=fee,
                    created_at=base + timedelta(days=i),
                )
            )
        await orm_store.commit()

    return _seed


class TestIdentifier:
    @pytest.mark.parametrize(("value", "numeric"), [("12", True), ("APP001", False), ("١٢", False), ("", False)])
    def test_numeric_identifier(self, value, numeric):
        assert is_numeric_identifier(value) is numeric


class TestListApplicants:
    @pytest.mark.asyncio
    async def test_newest_first_with_pagination(self, orm_store, seed_applicants):
        await seed_applicants()

        data = await list_applicants(orm_store, page=1, limit=2)

        assert [a.applicant_id for a in data.applicants] == ["APP005", "APP004"]
        assert data.pagination.total_applicants == 5
        assert data.pagination.total_pages == 3
        assert data.pagination.model_dump(by_alias=True) == {
            "currentPage": 1,
            "totalPages": 3,
            "totalApplicants": 5,
            "limit": 2,
        }

    @pytest.mark.asyncio
    async def test_last_page(self, orm_store, seed_applicants):
        await seed_applicants()

        data = await list_applicants(orm_store, page=3, limit=2)

        assert [a.applicant_id for a in data.applicants] == ["APP001"]

    @pytest.mark.asyncio
    async def test_limit_is_clamped(self, orm_store):
        data = await list_applicants(orm_store, page=0, limit=1000)

        assert data.pagination.limit == MAX_PAGE_SIZE
        assert data.pagination.current_page == 1
        assert data.pagination.total_pages == 0
        assert data.applicants == []


class TestGetApplicant:
    @pytest.mark.asyncio
    async def test_by_numeric_id(self, orm_store, seed_applicants):
        await seed_applicants()

        applicant = await get_applicant(orm_store, "3")

        assert applicant.applicant_id == "APP003"

    @pytest.mark.asyncio
    async def test_by_applicant_id(self, orm_store, seed_applicants):
        await seed_applicants()

        applicant = await get_applicant(orm_store, "APP004")

        assert applicant.program_applied_for == "EPhD"

    @pytest.mark.asyncio
    async def test_not_found(self, orm_store):
        with pytest.raises(ApplicantNotFoundError) as exc_info:
            await get_applicant(orm_store, "APP999")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Applicant not found"


class TestStats:
    @pytest.mark.asyncio
    async def test_counts(self, orm_store, seed_applicants):
        await seed_applicants()

        stats = await get_stats(orm_store)

        assert stats.model_dump() == {
            "total_applicants": 5,
            "admitted": 2,
            "under_review": 2,
            "rejected": 1,
            "offers_issued": 3,
            "fees_paid": 2,
            "pgp_applicants": 2,
            "phd_applicants": 1,
            "ephd_applicants": 1,
            "emba_applicants": 1,
        }

    @pytest.mark.asyncio
    async def test_empty_table(self, orm_store):
        stats = await get_stats(orm_store)

        assert stats.total_applicants == 0
        assert stats.offers_issued == 0


class TestFlagUpdates:
    @pytest.mark.asyncio
    async def test_set_offer_by_applicant_id(self, orm_store, seed_applicants):
        await seed_applicants()

        await set_offer_issued(orm_store, "APP002", True)
        stored = await orm_store.scalar(select(Applicant.offer_issued).where(Applicant.applicant_id == "APP002"))
        assert stored is True

    @pytest.mark.asyncio
    async def test_set_fee_by_id(self, orm_store, seed_applicants):
        await seed_applicants()

        await set_fee_paid(orm_store, "1", False)
        stored = await orm_store.scalar(select(Applicant.fee_paid).where(Applicant.applicant_id == "APP001"))
        assert stored is False

    @pytest.mark.asyncio
    async def test_update_missing_applicant(self, orm_store):
        with pytest.raises(ApplicantNotFoundError):
            await set_offer_issued(orm_store, "42", True)

        with pytest.raises(ApplicantNotFoundError):
            await set_fee_paid(orm_store, "APP404", True)
