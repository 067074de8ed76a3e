from app.client.gateway_client import GatewayError, SyncGatewayClient
from app.client.pipeline import PersistOutcome, PipelineWorkflow
from app.client.session import AppSession

__all__ = [
    "AppSession",
    "GatewayError",
    "PersistOutcome",
    "PipelineWorkflow",
    "SyncGatewayClient",
]
