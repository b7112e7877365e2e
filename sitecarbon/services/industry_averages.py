import asyncio
import logging
import math
from typing import Any, Iterable

import httpx

from ..settings import settings
from .recommendation import DEFAULT_INDUSTRY_AVERAGES, FALLBACK_INDUSTRY_AVERAGE

logger = logging.getLogger(__name__)


def _product_gwp(payload: Any) -> float | None:
    """Amount of the first product exchange of the first process returned."""
    if not isinstance(payload, dict):
        return None
    processes = payload.get("data")
    if not isinstance(processes, list) or not processes or not isinstance(processes[0], dict):
        return None

    for exchange in processes[0].get("exchanges") or []:
        if not isinstance(exchange, dict):
            continue
        flow = exchange.get("flow") or {}
        if isinstance(flow, dict) and flow.get("flowType") == "PRODUCT":
            amount = exchange.get("amount")
            if isinstance(amount, (int, float)) and not isinstance(amount, bool) and math.isfinite(amount):
                return float(amount)
            return None
    return None


class IndustryAverageService:
    """Looks up per-category industry-average footprints, falling back to the
    static table whenever the remote source is unavailable or unhelpful."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.openlca_url
        self.timeout = settings.industry_average_timeout if timeout is None else timeout
        self.transport = transport

    @staticmethod
    def default_for(category: str) -> float:
        return DEFAULT_INDUSTRY_AVERAGES.get(category, FALLBACK_INDUSTRY_AVERAGE)

    async def get_industry_average(self, category: str) -> float:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.base_url, params={"category": category, "limit": 1})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.info("Using default carbon data for %s: %s", category, exc)
            return self.default_for(category)

        gwp = _product_gwp(payload)
        if not gwp:
            logger.info("No product GWP for %s, using default carbon data", category)
            return self.default_for(category)
        # scaled to the units of DEFAULT_INDUSTRY_AVERAGES
        return gwp * 1000

    async def get_industry_averages(self, categories: Iterable[str] | None = None) -> dict[str, float]:
        names = list(categories or DEFAULT_INDUSTRY_AVERAGES)
        values = await asyncio.gather(*(self.get_industry_average(name) for name in names))
        return dict(zip(names, values))
