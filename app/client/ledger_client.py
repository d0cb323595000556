"""
Ledger API client

Async client for the ledger service, used by front ends and scripts.

- Form input is validated locally; ValidationError is raised before any
  request is sent
- GET responses are cached per (path, params); any successful mutation
  drops the whole cache instead of patching it
- Connection failures get one retry at the transport layer, nothing more
"""

import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from app.core.config import settings
from app.core.exceptions import (
    AuthorizationError,
    ERRORS_BY_NAME,
    InvariantViolation,
    LedgerError,
    NotFoundError,
    ValidationError,
)
from app.utils.ledger_validation import (
    validate_amount,
    validate_counterparty,
    validate_name,
)

logger = logging.getLogger(__name__)

_ERRORS_BY_STATUS = {
    400: ValidationError,
    403: AuthorizationError,
    404: NotFoundError,
    409: InvariantViolation,
    422: ValidationError,
}


class LedgerApiError(LedgerError):
    """Unexpected response from the ledger service."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class LedgerClient:
    """Ledger service client

    Args:
        base_url: service root, e.g. http://localhost:8000/api/v1
        token: bearer token from /auth/login
        timeout: HTTP timeout in seconds
        transport: custom httpx transport (tests pass a MockTransport)

    Usage:
    ```python
    async with LedgerClient(base_url, token) as client:
        person = await client.create_person("Alice")
        await client.add_entry(person["id"], 500, "debit")
    ```
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = settings.CLIENT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._cache: Dict[Tuple[str, Tuple], Any] = {}

    async def __aenter__(self) -> "LedgerClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            transport = self._transport or httpx.AsyncHTTPTransport(
                retries=settings.CLIENT_TRANSPORT_RETRIES
            )
            headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def invalidate(self) -> None:
        """Forget every cached query."""
        self._cache.clear()

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        if response.is_success:
            return

        try:
            body = response.json()
        except ValueError:
            body = {}
        detail = body.get("detail") if isinstance(body, dict) else None
        message = detail if isinstance(detail, str) else response.text

        error_cls = ERRORS_BY_NAME.get(body.get("error")) if isinstance(body, dict) else None
        if error_cls is None:
            error_cls = _ERRORS_BY_STATUS.get(response.status_code)
        if error_cls is None:
            raise LedgerApiError(message, response.status_code)
        raise error_cls(message)

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        key = (path, tuple(sorted((params or {}).items())))
        if key in self._cache:
            return self._cache[key]

        client = await self._ensure_client()
        response = await client.get(path, params=params)
        self._raise_for_error(response)
        data = response.json()
        self._cache[key] = data
        return data

    async def _mutate(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        client = await self._ensure_client()
        response = await client.request(method, path, json=body)
        self._raise_for_error(response)
        self.invalidate()
        logger.debug("%s %s -> %s", method, path, response.status_code)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ===== PROFILE =====

    async def get_profile(self) -> Dict[str, Any]:
        return await self._get("/users/me")

    async def save_profile(
        self,
        name: str,
        phone: str,
        country_code: str = "",
        currency_preference: str = "USD"
    ) -> Dict[str, Any]:
        return await self._mutate("PUT", "/users/me", {
            "name": validate_name(name),
            "phone": phone,
            "country_code": country_code,
            "currency_preference": currency_preference,
        })

    # ===== PEOPLE =====

    async def list_people(self) -> list:
        return await self._get("/people")

    async def create_person(self, name: str) -> Dict[str, Any]:
        return await self._mutate("POST", "/people", {"name": validate_name(name)})

    async def rename_person(self, person_id: int, name: str) -> Dict[str, Any]:
        return await self._mutate("PATCH", f"/people/{person_id}", {"name": validate_name(name)})

    async def delete_person(self, person_id: int) -> None:
        await self._mutate("DELETE", f"/people/{person_id}")

    async def set_approval_status(self, person_id: int, approved: bool) -> Dict[str, Any]:
        return await self._mutate(
            "PUT", f"/people/{person_id}/approval", {"approval_status": approved}
        )

    async def get_balance(self, person_id: int) -> Dict[str, Any]:
        return await self._get(f"/people/{person_id}/balance")

    # ===== LEDGER =====

    async def add_entry(
        self,
        person_id: int,
        amount: int,
        transaction_type: str,
        description: str = "",
        date: Optional[int] = None,
        currency: Optional[str] = None,
        counterparty: Optional[str] = None
    ) -> Dict[str, Any]:
        """Record a transaction. Leave counterparty empty for a personal note."""
        body = {
            "amount": validate_amount(amount),
            "transaction_type": transaction_type,
            "description": description.strip(),
            "date": date,
            "currency": currency,
            "counterparty": validate_counterparty(counterparty),
        }
        return await self._mutate("POST", f"/people/{person_id}/entries", body)

    async def list_entries(self, person_id: int) -> list:
        return await self._get(f"/people/{person_id}/entries")

    async def get_history(self, person_id: int) -> Dict[str, Any]:
        return await self._get(f"/people/{person_id}/history")

    async def list_pending(self) -> list:
        return await self._get("/ledger/pending")

    async def approve_entry(self, entry_id: int) -> Dict[str, Any]:
        return await self._mutate("POST", f"/ledger/{entry_id}/approve")

    async def reject_entry(self, entry_id: int) -> Dict[str, Any]:
        return await self._mutate("POST", f"/ledger/{entry_id}/reject")

    async def archive_entry(self, entry_id: int) -> Dict[str, Any]:
        return await self._mutate("POST", f"/ledger/{entry_id}/archive")

    async def get_dashboard(self) -> Dict[str, Any]:
        return await self._get("/dashboard/summary")

    async def get_analytics(self) -> Dict[str, Any]:
        return await self._get("/dashboard/analytics")
