"""
Unit tests for the wire/store field mapping of deals.
"""
import pytest
from pydantic import ValidationError

from app.models.opportunity import Opportunity, PipelineStage
from app.schemas.deal import Deal, WIRE_TO_COLUMN, COLUMN_TO_WIRE
from app.services.opportunity_service import (
    UPSERT_UPDATE_COLUMNS,
    deal_to_columns,
    opportunity_to_deal,
)


class TestMappingTable:
    def test_every_column_is_a_real_opportunity_column(self):
        columns = set(Opportunity.__table__.columns.keys())
        assert set(WIRE_TO_COLUMN.values()) <= columns

    def test_table_is_reversible(self):
        assert {v: k for k, v in COLUMN_TO_WIRE.items()} == WIRE_TO_COLUMN

    def test_update_columns_are_mapped(self):
        assert set(UPSERT_UPDATE_COLUMNS) <= set(WIRE_TO_COLUMN.values())


class TestDealSchema:
    def test_parses_camel_case(self):
        deal = Deal.model_validate({
            "id": "d-1",
            "companyName": "Cool Air",
            "contactName": "Sam",
            "revenueRange": "$1M-$5M",
            "stage": "outreach",
            "assignedTo": "7",
            "assignedToName": "Dana",
        })
        assert deal.company_name == "Cool Air"
        assert deal.contact_name == "Sam"
        assert deal.revenue_range == "$1M-$5M"
        assert deal.stage == PipelineStage.OUTREACH
        assert deal.assigned_to == 7
        assert deal.assigned_to_name == "Dana"

    def test_unassigned_option(self):
        assert Deal.model_validate({"assignedTo": ""}).assigned_to is None

    def test_unknown_stage_rejected(self):
        with pytest.raises(ValidationError):
            Deal.model_validate({"stage": "ARCHIVED"})

    def test_defaults(self):
        deal = Deal()
        assert deal.stage == PipelineStage.PROSPECT
        assert deal.id
        assert Deal().id != deal.id

    def test_to_wire_uses_camel_case(self):
        wire = Deal(id="d-1", company_name="Cool Air", stage=PipelineStage.ENGAGED).to_wire()
        assert wire["companyName"] == "Cool Air"
        assert wire["stage"] == "ENGAGED"
        assert "company_name" not in wire
        assert "assignedToName" in wire


class TestRowConversion:
    def test_deal_to_columns_drops_joined_fields(self):
        deal = Deal(id="d-1", company_name="Cool Air", assigned_to_name="Dana")
        values = deal_to_columns(deal)
        assert "assigned_to_name" not in values
        assert "created_at" not in values
        assert values["company_name"] == "Cool Air"

    def test_opportunity_to_deal(self):
        opp = Opportunity(
            id="d-1",
            company_name="Cool Air",
            stage=PipelineStage.PROPOSAL,
            score={"fit": 8, "need": 7, "timing": 6, "readiness": 5, "composite": 65, "rationale": ""},
            assigned_to=3,
        )
        deal = opportunity_to_deal(opp, "Dana")
        assert deal.stage == PipelineStage.PROPOSAL
        assert deal.score.composite == 65
        assert deal.assigned_to == 3
        assert deal.assigned_to_name == "Dana"
