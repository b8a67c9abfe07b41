"""Cloudflare REST clients for Workers KV and Workers AI."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

CLOUDFLARE_API_BASE = "https://api.cloudflare.com/client/v4"


class InferenceError(Exception):
    """Raised when the inference service reports a failed run."""


class CloudflareKVClient:
    """Writes values to a Workers KV namespace via the Cloudflare API."""

    def __init__(
        self,
        account_id: str,
        namespace_id: str,
        api_token: str,
        base_url: str = CLOUDFLARE_API_BASE,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = (
            f"{base_url.rstrip('/')}/accounts/{account_id}"
            f"/storage/kv/namespaces/{namespace_id}"
        )
        self.http = httpx.AsyncClient(
            timeout=timeout,
            headers={"Authorization": f"Bearer {api_token}"},
        )

    async def put(self, key: str, value: str) -> None:
        """Write ``value`` under ``key``. An existing value is overwritten."""
        resp = await self.http.put(
            f"{self.base_url}/values/{quote(key, safe='')}",
            content=value.encode("utf-8"),
            headers={"Content-Type": "text/plain; charset=utf-8"},
        )
        resp.raise_for_status()

    async def close(self) -> None:
        await self.http.aclose()


class WorkersAIClient:
    """Runs Workers AI models via the Cloudflare REST API.

    ``run()`` returns the ``result`` member of the API envelope, which is the
    same object a Workers AI binding hands back inside a Worker.
    """

    def __init__(
        self,
        account_id: str,
        api_token: str,
        base_url: str = CLOUDFLARE_API_BASE,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = f"{base_url.rstrip('/')}/accounts/{account_id}/ai/run"
        self.http = httpx.AsyncClient(
            timeout=timeout,
            headers={"Authorization": f"Bearer {api_token}"},
        )

    async def run(self, model: str, inputs: dict[str, Any]) -> Any:
        """Run ``model`` once with ``inputs`` (e.g. ``{"messages": [...]}``)."""
        resp = await self.http.post(f"{self.base_url}/{model}", json=inputs)
        resp.raise_for_status()
        data = resp.json()
        if not data.get("success", True):
            errors = data.get("errors") or []
            raise InferenceError(f"Workers AI run of {model} failed: {errors}")
        return data.get("result")

    async def close(self) -> None:
        await self.http.aclose()
