from __future__ import annotations

import pytest

from signalgate.domain.entities.order import Order, OrderSide, OrderStatus
from signalgate.domain.entities.signal import Grade
from signalgate.domain.exceptions import OrderStateError
from signalgate.domain.value_objects.ticker import Ticker


def test_order_transitions_return_new_records() -> None:
    new = Order(symbol="BTCUSDT", side=OrderSide.BUY, quantity=0.01)
    signed = new.transition(OrderStatus.SIGNED)

    assert new.status is OrderStatus.NEW
    assert signed.status is OrderStatus.SIGNED
    assert signed.id == new.id
    assert not signed.is_terminal


def test_order_cannot_be_sent_unsigned() -> None:
    new = Order(symbol="BTCUSDT", side=OrderSide.BUY, quantity=0.01)
    with pytest.raises(OrderStateError):
        new.transition(OrderStatus.SENT)


def test_terminal_states_are_final() -> None:
    order = Order(symbol="BTCUSDT", side=OrderSide.SELL, quantity=0.01)
    rejected = order.transition(OrderStatus.REJECTED, category="bad request")

    assert rejected.is_terminal
    with pytest.raises(OrderStateError):
        rejected.transition(OrderStatus.SIGNED)


def test_grading_keeps_candidate_untouched(make_candidate) -> None:
    candidate = make_candidate()
    graded = candidate.graded(0.83, Grade.A, True)

    assert graded.candidate is candidate
    assert graded.to_dict()["grade"] == "A"
    assert "grade" not in candidate.to_dict()


def test_ticker_spread() -> None:
    assert Ticker("BTCUSDT", 100.0, bid=99.95, ask=100.05).spread_bps == pytest.approx(10.0)
    assert Ticker("BTCUSDT", 100.0).spread_bps is None
