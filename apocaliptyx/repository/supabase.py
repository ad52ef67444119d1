"""Async scenario repository backed by Supabase's PostgREST API, using httpx.

The client can be used as an async context manager to share one connection
pool across several queries, or ad hoc, in which case every call opens and
closes its own client.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional
import httpx

from apocaliptyx.config import get_config
from apocaliptyx.models import CANCELLED_STATUS, StoredScenario
from apocaliptyx.utils.logger import log_api_response, log_debug
from .base import RepositoryError, ScenarioRepository

BASE_COLUMNS = "id,title,description,status,created_at"
ACTIVE_COLUMNS = (
    "id,title,description,status,created_at,current_price,"
    "holder:users!scenarios_current_holder_id_fkey(username)"
)
BACKFILL_COLUMNS = "id,title,description"


class SupabaseScenarioRepository(ScenarioRepository):
    """Scenario repository talking to ``{url}/rest/v1/{table}``."""

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
        table: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__("supabase")
        config = get_config()
        self.url = (url if url is not None else config.supabase_url).rstrip("/")
        self.key = key if key is not None else config.supabase_key
        self.table = table or config.scenarios_table
        self.timeout = timeout if timeout is not None else config.supabase_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Context manager entry - creates HTTP client."""
        self._client = self._new_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - closes HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            transport=self._transport,
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
            "Content-Type": "application/json",
        }

    @property
    def endpoint(self) -> str:
        return f"{self.url}/rest/v1/{self.table}"

    def is_configured(self) -> bool:
        return bool(self.url and self.key)

    async def _request(
        self,
        method: str,
        operation: str,
        params: Dict[str, str],
        json: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        if not self.is_configured():
            raise RepositoryError("Supabase is not configured (SUPABASE_URL / SUPABASE_KEY)", operation)

        headers = self._headers()
        if extra_headers:
            headers.update(extra_headers)

        log_debug("Supabase request", operation=operation, method=method, params=params)
        try:
            if self._client is not None:
                resp = await self._client.request(method, self.endpoint, params=params, json=json, headers=headers)
            else:
                async with self._new_client() as client:
                    resp = await client.request(method, self.endpoint, params=params, json=json, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise RepositoryError(f"Supabase {operation} failed: {e}", operation) from e

        log_api_response(f"Supabase {operation}", resp.status_code)
        return resp

    async def _select(self, operation: str, params: Dict[str, str]) -> List[StoredScenario]:
        resp = await self._request("GET", operation, params)
        try:
            rows = resp.json()
        except ValueError as e:
            raise RepositoryError(f"Supabase {operation} returned invalid JSON", operation) from e
        if not isinstance(rows, list):
            raise RepositoryError(f"Supabase {operation} returned {type(rows).__name__}, expected a list", operation)
        try:
            return [StoredScenario.from_row(row) for row in rows]
        except (KeyError, TypeError, AttributeError) as e:
            raise RepositoryError(f"Supabase {operation} returned a malformed row: {e!r}", operation) from e

    async def find_by_hash(
        self, content_hash: str, exclude_id: Optional[str] = None
    ) -> List[StoredScenario]:
        params = {"select": BASE_COLUMNS, "content_hash": f"eq.{content_hash}"}
        if exclude_id:
            params["id"] = f"neq.{exclude_id}"
        scenarios = await self._select("find_by_hash", params)
        for scenario in scenarios:
            scenario.content_hash = content_hash
        return scenarios

    async def find_active(
        self, exclude_id: Optional[str] = None, limit: Optional[int] = None
    ) -> List[StoredScenario]:
        # The holder embed is only needed for full duplicate checks, which are
        # the unbounded fetches.
        columns = ACTIVE_COLUMNS if limit is None else BASE_COLUMNS
        params = {"select": columns, "status": f"neq.{CANCELLED_STATUS}"}
        if exclude_id:
            params["id"] = f"neq.{exclude_id}"
        if limit is not None:
            params["limit"] = str(limit)
        return await self._select("find_active", params)

    async def find_missing_hash(self) -> List[StoredScenario]:
        params = {"select": BACKFILL_COLUMNS, "content_hash": "is.null"}
        return await self._select("find_missing_hash", params)

    async def update_by_id(self, scenario_id: str, fields: Dict[str, Any]) -> None:
        await self._request(
            "PATCH",
            "update_by_id",
            {"id": f"eq.{scenario_id}"},
            json=fields,
            extra_headers={"Prefer": "return=minimal"},
        )
