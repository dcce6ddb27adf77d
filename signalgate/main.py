"""
SignalGate – Main Application Entry Point
=========================================
Wires the scanner, the Gate & Score engine, the order gateway and the
alert dispatcher behind a minimal FastAPI surface.

STARTUP:
  1. Configure logging
  2. Build the dependency container from settings
  3. FastAPI lifespan:
     a. Database (optional) + tables
     b. Alert handlers registered on the event bus
     c. Routes receive the container
  4. Shutdown closes HTTP clients and the database in reverse order

FLOW OF ONE SCAN (POST /scan):
  Bybit REST → bars/ticker/depth → IndicatorCalculator → SignalAssembler
       → QualityGate → ExecutionScorer → rank
       → ExecuteOrderUseCase → BybitGateway (paper | live)
       → EventBus(SignalGenerated|OrderFilled|OrderFailed) → SendAlertUseCase

  uvicorn signalgate.main:app --host 0.0.0.0 --port 8888
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from signalgate.container import init_container
from signalgate.presentation.api.routes import init_routes, router
from signalgate.shared.config.settings import settings
from signalgate.shared.logging.logger import get_logger, setup_logging

# ─── Logging ────────────────────────────────────────────────────────────
setup_logging(logging.DEBUG if settings.debug else logging.INFO)
logger = get_logger("main")

# ─── Dependency container ───────────────────────────────────────────────
container = init_container(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    mode = "LIVE" if settings.live_trading_enabled and settings.has_credentials else "PAPER"
    logger.info("=" * 60)
    logger.info("  SignalGate v%s", app.version)
    logger.info("  Exchange: %s (%s)", settings.exchange_url, settings.exchange_category)
    logger.info("  Mode: %s, %.2f USD per order, leverage %dx",
                mode, settings.order_usd_amount, settings.order_leverage)
    logger.info("  Symbols: %s", ", ".join(settings.scan_symbols))
    logger.info("  Timeframes: %s (banned: %s)",
                ", ".join(settings.scan_timeframes),
                ", ".join(settings.gate_banned_timeframes) or "-")
    logger.info("  Gate: spread≤%.1fbps depth≥%.0f RR≥%.2f win-rate≥%.2f",
                settings.gate_max_spread_bps,
                settings.gate_min_depth_usdt,
                settings.gate_min_rr,
                settings.gate_min_symbol_win_rate)
    logger.info("  Alerts: %s, %d channel(s)",
                "on" if settings.alerts_enabled else "off",
                len(container.alert_channels))
    logger.info("=" * 60)

    await container.startup()
    if settings.db_enabled:
        logger.info("  Database: connected")
    else:
        logger.info("  Database: disabled (in-memory stores)")

    init_routes(container)
    logger.info("✓ All components started")

    yield

    logger.info("Shutting down...")
    await container.shutdown()
    logger.info("✓ Shutdown complete")


app = FastAPI(
    title="SignalGate",
    description="Crypto signal scanner with a Gate & Score engine, signed order execution and alerts",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("signalgate.main:app", host=settings.host, port=settings.port, reload=settings.debug)
