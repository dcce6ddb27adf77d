"""
Dependency Injection Container.

Manages every service, repository and use case instance of the
application.

Clean Architecture: the container lives in the outermost layer and is
the only place where concrete dependencies are created.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Domain
from signalgate.domain.entities.alert import Severity
from signalgate.domain.repositories.alert_repository import IAlertRepository
from signalgate.domain.repositories.order_repository import IOrderRepository
from signalgate.domain.repositories.signal_repository import ISignalRepository
from signalgate.domain.services.execution_scorer import ExecutionScorer
from signalgate.domain.services.quality_gate import GateOptions, QualityGate
from signalgate.domain.services.risk_calculator import RiskCalculator, RiskConfig
from signalgate.domain.services.signal_rules import SignalAssembler

# Application Ports
from signalgate.application.ports.alert_channel import IAlertChannel
from signalgate.application.ports.dedupe_store import IDedupeStore
from signalgate.application.ports.event_publisher import IEventPublisher
from signalgate.application.ports.market_data_provider import IMarketDataProvider
from signalgate.application.ports.order_gateway import IOrderGateway

# Shared
from signalgate.shared.config.settings import Settings
from signalgate.shared.logging.logger import get_logger

logger = get_logger("container")


@dataclass
class Container:
    """
    Dependency Injection Container.

    Lazily builds and caches every dependency. Inner layers depend on
    abstractions; this is where the concrete classes are chosen.
    """

    # Configuration
    settings: Settings = field(default_factory=Settings)

    # Repositories
    _signal_repository: Optional[ISignalRepository] = None
    _order_repository: Optional[IOrderRepository] = None
    _alert_repository: Optional[IAlertRepository] = None

    # Ports
    _event_publisher: Optional[IEventPublisher] = None
    _market_data_provider: Optional[IMarketDataProvider] = None
    _order_gateway: Optional[IOrderGateway] = None
    _dedupe_store: Optional[IDedupeStore] = None
    _alert_channels: Optional[List[IAlertChannel]] = None

    # Domain services
    _quality_gate: Optional[QualityGate] = None
    _execution_scorer: Optional[ExecutionScorer] = None
    _signal_assembler: Optional[SignalAssembler] = None

    # Infrastructure
    _db_manager: Any = None
    _rate_limiter: Any = None

    # Instance cache (use cases)
    _instances: Dict[str, Any] = field(default_factory=dict)

    # ==================== Domain Services ====================

    @property
    def gate_options(self) -> GateOptions:
        s = self.settings
        return GateOptions(
            banned_timeframes=frozenset(s.gate_banned_timeframes),
            max_spread_bps=s.gate_max_spread_bps,
            min_depth_usdt=s.gate_min_depth_usdt,
            min_rr=s.gate_min_rr,
            min_symbol_win_rate=s.gate_min_symbol_win_rate,
            exclude_innovation_zone=s.gate_exclude_innovation_zone,
        )

    @property
    def quality_gate(self) -> QualityGate:
        if self._quality_gate is None:
            self._quality_gate = QualityGate(self.gate_options)
        return self._quality_gate

    @property
    def execution_scorer(self) -> ExecutionScorer:
        if self._execution_scorer is None:
            self._execution_scorer = ExecutionScorer(self.quality_gate)
        return self._execution_scorer

    @property
    def signal_assembler(self) -> SignalAssembler:
        if self._signal_assembler is None:
            s = self.settings
            self._signal_assembler = SignalAssembler(
                risk=RiskCalculator(
                    RiskConfig(
                        stop_atr_multiplier=s.risk_stop_atr_multiplier,
                        take_profit_atr_multiplier=s.risk_take_profit_atr_multiplier,
                    )
                ),
            )
        return self._signal_assembler

    # ==================== Persistence ====================

    @property
    def db_manager(self):
        """DatabaseManager, or None when the database is disabled."""
        if not self.settings.db_enabled:
            return None
        if self._db_manager is None:
            from signalgate.infrastructure.persistence.database import DatabaseManager
            self._db_manager = DatabaseManager(self.settings)
        return self._db_manager

    @property
    def signal_repository(self) -> ISignalRepository:
        if self._signal_repository is None:
            from signalgate.infrastructure.persistence.repositories import (
                InMemorySignalRepository,
                SignalRepositoryImpl,
            )
            db = self.db_manager
            self._signal_repository = (
                SignalRepositoryImpl(db) if db is not None else InMemorySignalRepository()
            )
        return self._signal_repository

    @property
    def order_repository(self) -> IOrderRepository:
        if self._order_repository is None:
            from signalgate.infrastructure.persistence.repositories import (
                InMemoryOrderRepository,
                OrderRepositoryImpl,
            )
            db = self.db_manager
            self._order_repository = (
                OrderRepositoryImpl(db) if db is not None else InMemoryOrderRepository()
            )
        return self._order_repository

    @property
    def alert_repository(self) -> IAlertRepository:
        if self._alert_repository is None:
            from signalgate.infrastructure.persistence.repositories import (
                AlertRepositoryImpl,
                InMemoryAlertRepository,
            )
            db = self.db_manager
            self._alert_repository = (
                AlertRepositoryImpl(db) if db is not None else InMemoryAlertRepository()
            )
        return self._alert_repository

    # ==================== Ports ====================

    @property
    def event_publisher(self) -> IEventPublisher:
        if self._event_publisher is None:
            from signalgate.infrastructure.external.event_bus_adapter import EventBusAdapter
            self._event_publisher = EventBusAdapter()
        return self._event_publisher

    @property
    def market_data_provider(self) -> IMarketDataProvider:
        if self._market_data_provider is None:
            from signalgate.infrastructure.external.bybit_market_data import BybitMarketDataAdapter
            s = self.settings
            self._market_data_provider = BybitMarketDataAdapter(
                base_url=s.exchange_url,
                category=s.exchange_category,
                timeout=s.exchange_http_timeout,
            )
        return self._market_data_provider

    @property
    def rate_limiter(self):
        if self._rate_limiter is None:
            from signalgate.infrastructure.external.rate_limiter import RateLimiter
            s = self.settings
            self._rate_limiter = RateLimiter(s.rate_limit_requests, s.rate_limit_window_seconds)
        return self._rate_limiter

    @property
    def order_gateway(self) -> IOrderGateway:
        if self._order_gateway is None:
            from signalgate.infrastructure.external.bybit_gateway import BybitGateway
            s = self.settings
            self._order_gateway = BybitGateway(
                base_url=s.exchange_url,
                api_key=s.exchange_api_key,
                api_secret=s.exchange_api_secret,
                live_trading=s.live_trading_enabled,
                category=s.exchange_category,
                recv_window=s.exchange_recv_window,
                quote_assets=s.quote_assets,
                qty_precision=s.order_qty_precision,
                paper_fallback_price=s.paper_fallback_price,
                max_attempts=s.order_max_attempts,
                backoff_seconds=s.order_backoff_seconds,
                rate_limiter=self.rate_limiter,
                market_data=self.market_data_provider,
                timeout=s.exchange_http_timeout,
            )
        return self._order_gateway

    @property
    def dedupe_store(self) -> IDedupeStore:
        if self._dedupe_store is None:
            from signalgate.infrastructure.external.dedupe_guard import DedupeGuard
            self._dedupe_store = DedupeGuard(
                window_seconds=self.settings.alert_dedupe_window_seconds,
                alert_repository=self.alert_repository,
            )
        return self._dedupe_store

    @property
    def alert_channels(self) -> List[IAlertChannel]:
        """Configured channels, each wrapped in the retry policy."""
        if self._alert_channels is None:
            from signalgate.infrastructure.external.alert_channels import (
                DiscordWebhookChannel,
                RetryingAlertChannel,
                SlackWebhookChannel,
                TelegramChannel,
            )
            s = self.settings
            channels: List[IAlertChannel] = []
            if s.telegram_bot_token and s.telegram_chat_id:
                channels.append(
                    TelegramChannel(s.telegram_bot_token, s.telegram_chat_id, timeout=s.alert_http_timeout)
                )
            if s.slack_webhook_url:
                channels.append(SlackWebhookChannel(s.slack_webhook_url, timeout=s.alert_http_timeout))
            if s.discord_webhook_url:
                channels.append(DiscordWebhookChannel(s.discord_webhook_url, timeout=s.alert_http_timeout))
            self._alert_channels = [
                RetryingAlertChannel(
                    c,
                    max_attempts=s.alert_max_attempts,
                    delay_seconds=s.alert_retry_delay_seconds,
                )
                for c in channels
            ]
        return self._alert_channels

    # ==================== Use Cases ====================

    def get_generate_signal_usecase(self):
        from signalgate.application.use_cases.generate_signal_usecase import GenerateSignalUseCase
        return GenerateSignalUseCase(
            signal_repository=self.signal_repository,
            event_publisher=self.event_publisher,
            assembler=self.signal_assembler,
            scorer=self.execution_scorer,
        )

    def get_execute_order_usecase(self):
        from signalgate.application.use_cases.execute_order_usecase import ExecuteOrderUseCase
        return ExecuteOrderUseCase(
            gateway=self.order_gateway,
            order_repository=self.order_repository,
            event_publisher=self.event_publisher,
            usd_amount=self.settings.order_usd_amount,
            leverage=self.settings.order_leverage,
        )

    def get_send_alert_usecase(self):
        """Singleton: the dispatcher is shared by every event handler."""
        if "send_alert" not in self._instances:
            from signalgate.application.use_cases.send_alert_usecase import SendAlertUseCase
            s = self.settings
            self._instances["send_alert"] = SendAlertUseCase(
                channels=self.alert_channels,
                dedupe_store=self.dedupe_store,
                alert_repository=self.alert_repository,
                enabled=s.alerts_enabled,
                min_severity=Severity(s.alert_min_severity.lower()),
            )
        return self._instances["send_alert"]

    def get_scan_market_usecase(self):
        from signalgate.application.use_cases.scan_market_usecase import ScanMarketUseCase
        s = self.settings
        return ScanMarketUseCase(
            market_data=self.market_data_provider,
            generate_signal=self.get_generate_signal_usecase(),
            scorer=self.execution_scorer,
            symbols=s.scan_symbols,
            timeframes=s.scan_timeframes,
            execute_order=self.get_execute_order_usecase(),
            bar_limit=s.scan_bar_limit,
            concurrency=s.scan_concurrency,
            win_rates=s.symbol_win_rates,
        )

    # ==================== Lifecycle ====================

    def wire_alerts(self) -> None:
        """Route domain events to the alert dispatcher."""
        from signalgate.application.use_cases.send_alert_usecase import AlertEventHandlers

        publisher = self.event_publisher
        if not hasattr(publisher, "register_handlers"):
            logger.warning("Event publisher has no handler registry; alerts not wired")
            return
        publisher.register_handlers(AlertEventHandlers(self.get_send_alert_usecase()).handlers())

    async def startup(self) -> None:
        db = self.db_manager
        if db is not None:
            await db.initialize()
            await db.create_tables()
        self.wire_alerts()

    async def shutdown(self) -> None:
        for component in (self._order_gateway, self._market_data_provider):
            close = getattr(component, "close", None)
            if close is not None:
                await close()
        for channel in self._alert_channels or []:
            close = getattr(channel, "close", None)
            if close is not None:
                await close()
        if self._db_manager is not None:
            await self._db_manager.close()

    def override(self, name: str, instance: Any) -> None:
        """
        Replace a dependency (tests with fakes).

        Args:
            name: Dependency name (e.g. 'market_data_provider')
            instance: Instance to use instead
        """
        attr_name = f"_{name}"
        if hasattr(self, attr_name):
            setattr(self, attr_name, instance)
        else:
            raise ValueError(f"Unknown dependency: {name}")


# ==================== Factory ====================

def init_container(settings: Optional[Settings] = None) -> Container:
    return Container(settings=settings or Settings())


# ==================== Testing Utilities ====================

class TestContainer(Container):
    """
    Container for tests: fakes are injected without touching the
    production wiring.

    Example:
        container = TestContainer(
            settings=Settings(alerts_enabled=False),
            market_data_provider=FakeMarketData(),
        )
    """

    __test__ = False  # not a pytest test class

    def __init__(self, settings: Optional[Settings] = None, **overrides):
        super().__init__(settings=settings or Settings())
        for name, instance in overrides.items():
            self.override(name, instance)
