"""
PipelineWorkflow: the in-memory deal pipeline of one client session.

Rules enforced here:
- Mutations apply to local state synchronously; the caller never waits on the network
- Every successful mutation schedules a write of the WHOLE collection (PUT bulk upsert)
- Unknown ids and declined confirmations are silent no-ops and schedule nothing
- Stages advance only along ADVANCE_ORDER; the last stage, DISCOVERY and closed stages stay put
- A failed write is logged and recorded in last_outcome, never raised and never rolled back
- Local state stays authoritative until the next reload()

The gateway only upserts, so a removed deal is gone locally but still stored,
and the next reload() brings it back.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from app.client.gateway_client import GatewayError, SyncGatewayClient
from app.models.opportunity import PipelineStage, ADVANCE_ORDER, next_stage
from app.schemas.deal import Deal

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[Deal], bool]


@dataclass(frozen=True)
class PersistOutcome:
    """Result of one full-collection write."""
    ok: bool
    count: int
    error: Optional[str] = None


class PipelineWorkflow:
    def __init__(self, gateway: SyncGatewayClient, deals: Optional[list[Deal]] = None):
        self.gateway = gateway
        self._deals: list[Deal] = list(deals or [])
        self._pending: set[asyncio.Task] = set()
        self.last_outcome: Optional[PersistOutcome] = None

    @classmethod
    async def load(cls, gateway: SyncGatewayClient) -> "PipelineWorkflow":
        """Workflow initialised from a full read of the gateway."""
        return cls(gateway, await gateway.fetch_deals())

    async def reload(self) -> list[Deal]:
        """Replace local state with what the gateway has stored."""
        self._deals = await self.gateway.fetch_deals()
        logger.info(f"Pipeline reloaded: {len(self._deals)} deals")
        return self.deals

    @property
    def deals(self) -> list[Deal]:
        return list(self._deals)

    @property
    def pending(self) -> int:
        """Persists scheduled and not yet finished."""
        return len(self._pending)

    def list_by_stage(self, stage: PipelineStage) -> list[Deal]:
        return [deal for deal in self._deals if deal.stage == stage]

    def stage_counts(self) -> dict[PipelineStage, int]:
        """Deal count for each column of the pipeline board."""
        counts = {stage: 0 for stage in ADVANCE_ORDER}
        for deal in self._deals:
            if deal.stage in counts:
                counts[deal.stage] += 1
        return counts

    def _index_of(self, deal_id: str) -> Optional[int]:
        for idx, deal in enumerate(self._deals):
            if deal.id == deal_id:
                return idx
        return None

    def advance(self, deal_id: str) -> Optional[asyncio.Task]:
        """Move a deal one stage forward. Only the stage changes."""
        idx = self._index_of(deal_id)
        if idx is None:
            return None

        deal = self._deals[idx]
        target = next_stage(deal.stage)
        if target is None:
            logger.debug(f"Deal {deal_id} in {deal.stage.value} cannot advance")
            return None

        self._deals[idx] = deal.model_copy(update={"stage": target})
        logger.info(f"Deal {deal_id} advanced {deal.stage.value} -> {target.value}")
        return self._schedule_persist()

    def remove(self, deal_id: str, confirm: ConfirmCallback) -> Optional[asyncio.Task]:
        """
        Drop a deal from the local collection after the user confirms.

        `confirm` is called with the deal before anything changes; it is not
        called for an unknown id.
        """
        idx = self._index_of(deal_id)
        if idx is None:
            return None
        if not confirm(self._deals[idx]):
            return None

        del self._deals[idx]
        logger.info(f"Deal {deal_id} removed locally")
        return self._schedule_persist()

    def update(self, record: Deal) -> Optional[asyncio.Task]:
        """Replace the deal with the same id wholesale."""
        idx = self._index_of(record.id)
        if idx is None:
            return None

        self._deals[idx] = record.model_copy(deep=True)
        return self._schedule_persist()

    async def persist(self, snapshot: Optional[list[Deal]] = None) -> PersistOutcome:
        """
        Send the whole collection (or a snapshot of it) as one bulk upsert.
        No delta, no retry, no rollback of local state on failure.
        """
        deals = snapshot if snapshot is not None else self.deals
        try:
            await self.gateway.bulk_upsert(deals)
        except GatewayError as e:
            logger.warning(f"Pipeline persist of {len(deals)} deals failed, local state kept: {e}")
            outcome = PersistOutcome(ok=False, count=len(deals), error=str(e))
        else:
            outcome = PersistOutcome(ok=True, count=len(deals))

        self.last_outcome = outcome
        return outcome

    def _schedule_persist(self) -> asyncio.Task:
        # Snapshot now so the task writes the state this mutation produced
        snapshot = [deal.model_copy(deep=True) for deal in self._deals]
        task = asyncio.create_task(self.persist(snapshot))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every outstanding persist. A crashed write is logged, not raised."""
        if not self._pending:
            return
        results = await asyncio.gather(*list(self._pending), return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error(f"Pipeline persist task crashed: {result!r}")
