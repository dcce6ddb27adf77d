"""
SignalGate – Settings (Pydantic BaseSettings)
=============================================
Centralised configuration loaded from environment variables / .env.
pydantic-settings validates everything at startup, so a typo in a
threshold fails fast instead of silently changing trading behaviour.

Every variable can be overridden with its upper-case name, e.g.
``EXCHANGE_API_KEY=...`` or ``GATE_MAX_SPREAD_BPS=12``.
"""

from __future__ import annotations

from typing import Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ─── Exchange (Bybit V5) ────────────────────────────────────────────
    exchange_base_url: str = Field(
        default="https://api.bybit.com", description="REST endpoint (mainnet)",
    )
    exchange_testnet_url: str = Field(
        default="https://api-testnet.bybit.com", description="REST endpoint (testnet)",
    )
    exchange_testnet: bool = Field(default=False, description="Use the testnet endpoint")
    exchange_category: str = Field(default="linear", description="Product category for klines/orders")
    exchange_api_key: str = Field(default="", description="API key (empty = paper mode)")
    exchange_api_secret: str = Field(default="", description="API secret (empty = paper mode)")
    exchange_recv_window: int = Field(
        default=5000, description="recvWindow in ms sent with every signed request",
    )
    exchange_http_timeout: float = Field(
        default=10.0, description="Timeout (s) for every outbound exchange call",
    )

    # ─── Live trading ───────────────────────────────────────────────────
    live_trading_enabled: bool = Field(
        default=False, description="Send real orders. False = paper mode",
    )
    quote_assets: List[str] = Field(
        default=["USDT"], description="Quote assets accepted for live orders",
    )
    order_usd_amount: float = Field(
        default=10.0, description="USD notional per auto-traded signal",
    )
    order_leverage: int = Field(default=1, description="Leverage applied before each order")
    order_qty_precision: int = Field(default=3, description="Decimals used when rounding qty")
    paper_fallback_price: float = Field(
        default=100.0, description="Price used by paper fills when no ticker is known",
    )

    # ─── Rate limit / retry ─────────────────────────────────────────────
    rate_limit_requests: int = Field(
        default=600, description="Max signed requests per rolling window",
    )
    rate_limit_window_seconds: float = Field(default=60.0, description="Rolling window length")
    order_max_attempts: int = Field(default=3, description="Attempts for transient failures")
    order_backoff_seconds: float = Field(
        default=0.5, description="Linear backoff base (s): delay = base × attempt",
    )

    # ─── Scanner ────────────────────────────────────────────────────────
    scan_symbols: List[str] = Field(
        default=["BTCUSDT", "ETHUSDT", "SOLUSDT", "XRPUSDT", "ADAUSDT"],
        description="Symbols evaluated each cycle",
    )
    scan_timeframes: List[str] = Field(
        default=["15m", "1h", "4h"], description="Timeframes evaluated each cycle",
    )
    scan_bar_limit: int = Field(default=300, description="Bars requested per symbol/timeframe")
    scan_concurrency: int = Field(default=8, description="Max symbols evaluated in parallel")

    # ─── Signal levels ──────────────────────────────────────────────────
    risk_stop_atr_multiplier: float = Field(
        default=2.0, description="Stop-loss distance in ATRs",
    )
    risk_take_profit_atr_multiplier: float = Field(
        default=3.0, description="Take-profit distance in ATRs (RR = tp / sl)",
    )

    # ─── Gate (stage 1) ─────────────────────────────────────────────────
    gate_banned_timeframes: List[str] = Field(
        default=["1m"], description="Timeframes never allowed through the gate",
    )
    gate_max_spread_bps: float = Field(default=15.0, description="Max spread in bps")
    gate_min_depth_usdt: float = Field(default=1000.0, description="Min order-book depth (USDT)")
    gate_min_rr: float = Field(default=1.8, description="Min risk:reward")
    gate_min_symbol_win_rate: float = Field(
        default=0.55, description="Min historical win-rate (unknown symbols count as 1.0)",
    )
    gate_exclude_innovation_zone: bool = Field(
        default=True, description="Reject innovation-zone listings",
    )
    symbol_win_rates: Dict[str, float] = Field(
        default_factory=dict,
        description='Historical win-rate per symbol, JSON e.g. {"BTCUSDT": 0.62}',
    )

    # ─── Alerts ─────────────────────────────────────────────────────────
    alerts_enabled: bool = Field(default=True, description="Master switch for alert dispatch")
    alert_min_severity: str = Field(
        default="info", description="Lowest severity delivered (info|warning|critical)",
    )
    alert_dedupe_window_seconds: float = Field(
        default=60.0, description="Identical alerts inside this window are suppressed",
    )
    alert_max_attempts: int = Field(default=3, description="Attempts per channel")
    alert_retry_delay_seconds: float = Field(
        default=0.3, description="Retry delay base (s): delay = base × attempt",
    )
    alert_http_timeout: float = Field(default=5.0, description="Timeout (s) per channel call")
    telegram_bot_token: str = Field(default="", description="Telegram bot token")
    telegram_chat_id: str = Field(default="", description="Telegram chat id")
    slack_webhook_url: str = Field(default="", description="Slack-style webhook URL")
    discord_webhook_url: str = Field(default="", description="Discord-style webhook URL")

    # ─── Server ─────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8888)
    debug: bool = Field(default=False)

    # ─── Database ───────────────────────────────────────────────────────
    db_enabled: bool = Field(
        default=False, description="Persist through SQLAlchemy (False = in-memory stores)",
    )
    db_url: str = Field(
        default="", description="Full async SQLAlchemy URL; overrides the MySQL parts",
    )
    db_host: str = Field(default="localhost", description="MySQL host")
    db_port: int = Field(default=3306, description="MySQL port")
    db_user: str = Field(default="signalgate", description="MySQL username")
    db_password: str = Field(default="signalgate_secret", description="MySQL password")
    db_name: str = Field(default="signalgate", description="MySQL database name")
    db_echo: bool = Field(default=False, description="Log SQL statements")
    db_pool_size: int = Field(default=5, description="Pool connections")
    db_max_overflow: int = Field(default=10, description="Extra connections under load")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def exchange_url(self) -> str:
        """REST endpoint selected by the testnet flag."""
        return self.exchange_testnet_url if self.exchange_testnet else self.exchange_base_url

    @property
    def has_credentials(self) -> bool:
        return bool(self.exchange_api_key and self.exchange_api_secret)


# Global singleton – import wherever needed
settings = Settings()
