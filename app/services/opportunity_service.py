"""
OpportunityService: persistence rules of the sync gateway for deals.

Rules enforced here:
- Reads never fail the caller: a store error yields an empty list
- Bulk writes are insert-or-update by id, all-or-nothing per request
- An existing row only has UPSERT_UPDATE_COLUMNS overwritten
- Rows absent from a bulk payload are left untouched; deals are never deleted
"""
import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.models.opportunity import Opportunity
from app.repositories.opportunity_repo import OpportunityRepository
from app.schemas.deal import Deal, WIRE_TO_COLUMN

logger = logging.getLogger(__name__)


# Columns a bulk upsert may change on a row that already exists
UPSERT_UPDATE_COLUMNS = (
    "stage",
    "contact_name",
    "email",
    "phone",
    "website",
    "revenue_range",
    "notes",
    "assigned_to",
)


class DuplicateRecordError(Exception):
    """Raised when a plain insert hits an existing id."""
    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Record {record_id} already exists")


def opportunity_to_deal(opportunity: Opportunity, assigned_to_name: Optional[str] = None) -> Deal:
    """Store row -> Deal, column by column through WIRE_TO_COLUMN."""
    values = {column: getattr(opportunity, column) for column in WIRE_TO_COLUMN.values()}
    values["assigned_to_name"] = assigned_to_name
    return Deal.model_validate(values)


def deal_to_columns(deal: Deal) -> dict:
    """Deal -> column values for the opportunities table."""
    values = deal.model_dump(include=set(WIRE_TO_COLUMN.values()))
    if values.get("created_at") is None:
        # Let the column default stamp new rows
        values.pop("created_at", None)
    return values


class OpportunityService:
    def __init__(self, repo: OpportunityRepository):
        self.repo = repo

    async def list_deals(self) -> list[Deal]:
        """Every stored deal with its assignee name. Returns [] if the store read fails."""
        try:
            rows = await self.repo.list_with_assignee_name()
            return [opportunity_to_deal(opp, name) for opp, name in rows]
        except (SQLAlchemyError, ValidationError) as e:
            logger.error(f"Failed to load opportunities, returning empty list: {e}")
            return []

    async def create_deal(self, deal: Deal) -> Deal:
        """Insert exactly one deal. No upsert."""
        if await self.repo.get_by_id(deal.id) is not None:
            raise DuplicateRecordError(deal.id)

        opportunity = await self.repo.create(Opportunity(**deal_to_columns(deal)))
        logger.info(f"Opportunity {opportunity.id} created in stage {opportunity.stage.value}")
        return opportunity_to_deal(opportunity, deal.assigned_to_name)

    async def bulk_upsert(self, deals: list[Deal]) -> int:
        """
        Insert unseen ids, update the fixed column subset of known ones.

        Runs inside the request transaction: any error propagates and the
        session rollback discards the whole batch. Returns the number of
        records processed.
        """
        existing = await self.repo.get_many([deal.id for deal in deals])
        inserted = updated = 0

        for deal in deals:
            values = deal_to_columns(deal)
            row = existing.get(deal.id)
            if row is None:
                # A repeated id later in the same batch updates this new row
                existing[deal.id] = await self.repo.create(Opportunity(**values))
                inserted += 1
                continue
            for column in UPSERT_UPDATE_COLUMNS:
                setattr(row, column, values[column])
            updated += 1

        await self.repo.save()
        logger.info(f"Bulk upsert: {inserted} inserted, {updated} updated")
        return len(deals)
