"""
SignalGate – API Routes (FastAPI)
=================================
Minimal HTTP trigger surface.

Endpoints:
  GET  /health             → health check + mode
  POST /scan               → run one scan cycle, returns the summary
  GET  /signals            → latest graded signals, ranked
  GET  /orders             → latest order-log records
  GET  /orders/{order_id}  → every record of one order
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from signalgate.shared.logging.logger import get_logger

logger = get_logger("api.routes")

router = APIRouter()

# Container injected from main.py at startup
_container = None


class ScanRequest(BaseModel):
    """Optional body of POST /scan."""
    symbols: Optional[List[str]] = None


def init_routes(container) -> None:
    """Inject the dependency container at startup."""
    global _container
    _container = container


def _require_container():
    if _container is None:
        raise HTTPException(status_code=503, detail="Server not ready")
    return _container


@router.get("/health")
async def health_check() -> dict:
    container = _container
    mode = None
    if container is not None:
        s = container.settings
        mode = "live" if s.live_trading_enabled and s.has_credentials else "paper"
    return {"status": "ok", "service": "signalgate", "mode": mode}


@router.post("/scan")
async def run_scan(request: Optional[ScanRequest] = None) -> dict:
    container = _require_container()
    symbols = request.symbols if request else None
    logger.info("Scan triggered over HTTP (%s)", ", ".join(symbols) if symbols else "all symbols")
    result = await container.get_scan_market_usecase().execute(symbols)
    return result.to_dict()


@router.get("/signals")
async def list_signals(
    limit: int = Query(50, ge=1, le=500),
    symbol: Optional[str] = None,
) -> dict:
    container = _require_container()
    signals = await container.signal_repository.find_recent(limit=limit, symbol=symbol)
    ranked = container.execution_scorer.rank(signals)
    return {"count": len(ranked), "signals": [s.to_dict() for s in ranked]}


@router.get("/orders")
async def list_orders(limit: int = Query(50, ge=1, le=500)) -> dict:
    container = _require_container()
    orders = await container.order_repository.find_recent(limit=limit)
    return {"count": len(orders), "orders": [o.to_dict() for o in orders]}


@router.get("/orders/{order_id}")
async def order_history(order_id: str) -> dict:
    container = _require_container()
    history = await container.order_repository.history(order_id)
    if not history:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return {"order_id": order_id, "history": [o.to_dict() for o in history]}
