"""
HTTP client for the sync gateway.

One AsyncClient per session, bearer token on every call. No retries: a
failed call surfaces as GatewayError and the caller decides what it means.
"""
import logging
from typing import Any, Optional

import httpx

from app.core.config import settings
from app.schemas.deal import Deal, LeadScore
from app.schemas.user import UserResponse

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Non-2xx response or transport failure talking to the gateway."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class SyncGatewayClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.token = token
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(base_url=base_url or settings.GATEWAY_URL)

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._http.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Gateway {method} {path} transport error: {e}")
            raise GatewayError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            raise GatewayError(f"{method} {path} -> {response.status_code}: {detail}", response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Gateway {method} {path} returned a non-JSON body")
            raise GatewayError(f"{method} {path} -> {response.status_code}: invalid JSON body", response.status_code) from e

    async def login(self, email: str, password: str) -> UserResponse:
        """Exchange credentials for a token; the token is kept for later calls."""
        data = await self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = data["access_token"]
        return UserResponse.model_validate(data["user"])

    async def fetch_deals(self) -> list[Deal]:
        data = await self._request("GET", "/api/opportunities")
        return [Deal.model_validate(item) for item in data]

    async def bulk_upsert(self, deals: list[Deal]) -> None:
        await self._request("PUT", "/api/opportunities", json=[deal.to_wire() for deal in deals])

    async def create_deal(self, deal: Deal) -> Deal:
        data = await self._request("POST", "/api/opportunities", json=deal.to_wire())
        return Deal.model_validate(data)

    async def fetch_users(self) -> list[UserResponse]:
        data = await self._request("GET", "/api/users")
        return [UserResponse.model_validate(item) for item in data]

    async def score_lead(self, company_name: str, industry: str, observations: str) -> LeadScore:
        data = await self._request(
            "POST",
            "/api/ai/score",
            json={"companyName": company_name, "industry": industry, "observations": observations},
        )
        return LeadScore.model_validate(data)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()
