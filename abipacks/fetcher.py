"""Rate-limited ABI retrieval from block-explorer APIs."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import DEFAULT_REQUEST_TIMEOUT
from .logging import get_network_logger
from .models import RawAbiEntry, TaggedAddress
from .networks import NetworkRegistry

_SUCCESS_STATUSES = {"1", "success"}


class ExplorerFetcher:
    """Fetches contract ABIs, one GET per address, through per-network limiters.

    :meth:`fetch` never raises: transport errors, unusable URLs, malformed
    bodies and explorer-reported failures all resolve to an empty list so that
    one bad address cannot abort its siblings. Per-address lines are logged
    under ``abipacks.fetcher.<network>``.
    """

    def __init__(
        self,
        registry: NetworkRegistry,
        client: httpx.AsyncClient,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self.registry = registry
        self.client = client
        self.timeout = timeout

    async def fetch(self, tagged: TaggedAddress) -> RawAbiEntry:
        network = self.registry.resolve(tagged.network)
        logger = get_network_logger("fetcher", network.name)
        url = network.request_url(tagged.address)
        async with self.registry.limiter(tagged.network).slot():
            try:
                response = await self.client.get(url, timeout=self.timeout)
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                logger.error("Failed to fetch address %s: %s", tagged.address, exc)
                return []
            except ValueError as exc:
                logger.error("Malformed response for address %s: %s", tagged.address, exc)
                return []
        return _interpret(logger, tagged, payload)


def _interpret(logger: logging.Logger, tagged: TaggedAddress, payload: Any) -> RawAbiEntry:
    if not isinstance(payload, dict):
        logger.error("Malformed response for address %s: not an object", tagged.address)
        return []
    status = str(payload.get("status", "")).strip().lower()
    if status not in _SUCCESS_STATUSES:
        logger.error("Failed to fetch address %s. ERROR: %s", tagged.address, _error_text(payload))
        return []
    abi = _decode_abi(payload.get("result"))
    if abi is None:
        logger.error("Malformed ABI payload for address %s", tagged.address)
        return []
    logger.info("Successfully fetched address %s", tagged.address)
    return abi


def _decode_abi(result: Any) -> Optional[List[Dict[str, Any]]]:
    if isinstance(result, str):
        try:
            result = json.loads(result)
        except json.JSONDecodeError:
            return None
    if not isinstance(result, list):
        return None
    return [item for item in result if isinstance(item, dict)]


def _error_text(payload: Dict[str, Any]) -> str:
    for key in ("result", "message"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return "unknown explorer error"


__all__ = ["ExplorerFetcher"]
