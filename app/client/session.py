"""
AppSession: everything one logged-in user holds, created at login and torn
down at logout.
"""
import logging
from typing import Optional

from app.client.gateway_client import SyncGatewayClient
from app.client.pipeline import PipelineWorkflow
from app.schemas.deal import Deal
from app.schemas.user import UserResponse

logger = logging.getLogger(__name__)


class AppSession:
    def __init__(self, gateway: SyncGatewayClient, user: UserResponse, workflow: PipelineWorkflow):
        self.gateway = gateway
        self.user = user
        self.workflow = workflow

    @classmethod
    async def start(
        cls,
        email: str,
        password: str,
        gateway: Optional[SyncGatewayClient] = None,
    ) -> "AppSession":
        """Log in and load the pipeline."""
        gateway = gateway or SyncGatewayClient()
        user = await gateway.login(email, password)
        workflow = await PipelineWorkflow.load(gateway)
        logger.info(f"Session started for user {user.id} with {len(workflow.deals)} deals")
        return cls(gateway, user, workflow)

    async def add_prospect(self, deal: Deal) -> Deal:
        """Insert a new deal through the intake flow and refresh the pipeline."""
        created = await self.gateway.create_deal(deal)
        await self.workflow.reload()
        return created

    async def close(self) -> None:
        """Let pending writes finish, then release the HTTP client."""
        try:
            await self.workflow.drain()
        finally:
            await self.gateway.aclose()
        logger.info(f"Session closed for user {self.user.id if self.user else None}")

    async def __aenter__(self) -> "AppSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
