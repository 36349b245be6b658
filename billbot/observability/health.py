"""Aggregated health check across all connectors."""

from __future__ import annotations

from billbot.connectors.base import ServiceConnector

_OK_STATUSES = ("healthy", "disabled", "unchecked")


async def aggregate_health(connectors: dict[str, ServiceConnector]) -> dict:
    results = {}
    all_healthy = True
    for name, connector in connectors.items():
        health = await connector.health_check()
        results[name] = health
        if health.get("status") not in _OK_STATUSES:
            all_healthy = False
    return {"status": "healthy" if all_healthy else "degraded", "connectors": results}
