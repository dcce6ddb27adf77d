"""
SignalGate – Domain Service: Quality Gate (stage 1)
===================================================
Hard gate: candidates failing ANY rule are discarded before scoring.

RULES (evaluated in this order, thresholds from GateOptions):
1. banned_timeframe   timeframe in the banned set (default {"1m"}), aliases
                      such as "1min" normalised first
2. spread             spread_bps > max_spread_bps
3. depth              0 < depth < min_depth (depth 0 means unknown → skip)
4. risk_reward        risk_reward < min_rr
5. symbol_win_rate    win-rate < min_symbol_win_rate (unknown = 1.0)
6. innovation_zone    base asset is an innovation-zone listing
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Mapping, Optional

from signalgate.domain.entities.signal import CandidateSignal


# Illiquid / high-risk listings excluded from auto-trading (base assets)
INNOVATION_ZONE_ASSETS: FrozenSet[str] = frozenset({
    "AKRO", "ALICE", "ALPACA", "ALPINE", "AUCTION", "AUDIO", "BADGER", "BAKE",
    "BETA", "BICO", "BOND", "BSW", "BURGER", "C98", "CHESS", "CHR", "CITY",
    "CKB", "COCOS", "COTI", "CREAM", "CTK", "CTXC", "CVP", "DEGO", "DOCK",
    "DODO", "DREP", "EASY", "EPS", "ERN", "FIRO", "FIS", "FOR", "FRONT",
    "GHST", "HARD", "HBAR", "HIVE", "IDEX", "ILV", "JOE", "KAVA", "KEY",
    "LAZIO", "LINA", "LIT", "LOKA", "LOOKS", "LOOM", "LPT", "LQTY", "MBL",
    "MDX", "MEME", "MIR", "MLN", "MOB", "MOVR", "MTLX", "NULS", "OGN",
    "OM", "ORN", "OXT", "PAXG", "PEOPLE", "PERP", "PHA", "POLS", "POND",
    "PORTO", "PUNDIX", "PYR", "QI", "QUICK", "RAD", "RARE", "REEF", "REI",
    "REN", "REP", "REQ", "RGT", "RIF", "RLC", "RUNE", "SAFE", "SANTOS",
    "SCRT", "SFP", "SHIB", "SLP", "SNT", "SNX", "SPELL", "SRM", "STMX",
    "STORJ", "STPT", "STRAX", "SUN", "SUPER", "SUSHI", "SXP", "TORN",
    "TRIBE", "TRU", "TVK", "TWT", "UNFI", "UNI", "UTK", "VET", "VOXEL",
    "VTHO", "WAXP", "WIN", "WING", "WRX", "XVG", "YFI", "YFII",
})


def base_asset(symbol: str) -> str:
    """``"SHIBUSDT"`` / ``"SHIB/USDT"`` → ``"SHIB"``."""
    return symbol.upper().replace("/USDT", "").replace("USDT", "")


def is_innovation_zone(symbol: str, assets: Iterable[str] = INNOVATION_ZONE_ASSETS) -> bool:
    return base_asset(symbol) in assets


_TIMEFRAME_ALIAS = re.compile(r"^(\d+)\s*(m|min|mins|minute|minutes|h|hr|hour|hours|d|day|days)$")


def normalize_timeframe(timeframe: str) -> str:
    """``"1min"`` / ``"1 minute"`` → ``"1m"``; unknown shapes pass through lowercased."""
    tf = timeframe.strip().lower()
    match = _TIMEFRAME_ALIAS.match(tf)
    if match is None:
        return tf
    return f"{int(match.group(1))}{match.group(2)[0]}"


@dataclass
class GateOptions:
    """Configurable thresholds of the hard gate."""

    banned_timeframes: FrozenSet[str] = frozenset({"1m"})
    max_spread_bps: float = 15.0
    min_depth_usdt: float = 1000.0
    min_rr: float = 1.8
    min_symbol_win_rate: float = 0.55
    exclude_innovation_zone: bool = True
    innovation_zone_assets: FrozenSet[str] = field(default=INNOVATION_ZONE_ASSETS)


class QualityGate:
    """
    Stage 1 of the Gate & Score engine.

    USAGE:
        gate = QualityGate(GateOptions(max_spread_bps=10))
        if gate.passes(candidate, win_rates): ...
    """

    def __init__(self, options: GateOptions = None):
        self._options = options or GateOptions()

    @property
    def options(self) -> GateOptions:
        return self._options

    def evaluate(
        self,
        signal: CandidateSignal,
        win_rates: Optional[Mapping[str, float]] = None,
    ) -> Optional[str]:
        """
        First failing rule name, or None when the candidate passes.
        """
        opts = self._options
        win_rates = win_rates or {}

        banned = {normalize_timeframe(tf) for tf in opts.banned_timeframes}
        if normalize_timeframe(signal.timeframe) in banned:
            return "banned_timeframe"

        if signal.spread_bps > opts.max_spread_bps:
            return "spread"

        depth = signal.orderbook_depth_usdt
        if depth > 0 and depth < opts.min_depth_usdt:
            return "depth"

        if signal.risk_reward < opts.min_rr:
            return "risk_reward"

        if win_rates.get(signal.symbol, 1.0) < opts.min_symbol_win_rate:
            return "symbol_win_rate"

        if opts.exclude_innovation_zone and is_innovation_zone(
            signal.symbol, opts.innovation_zone_assets,
        ):
            return "innovation_zone"

        return None

    def passes(
        self,
        signal: CandidateSignal,
        win_rates: Optional[Mapping[str, float]] = None,
    ) -> bool:
        return self.evaluate(signal, win_rates) is None
