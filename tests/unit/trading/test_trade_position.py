"""Unit tests for trades and positions."""

from decimal import Decimal

import pytest

from qanalytics.trading import (
    LinearBorrowingCostModel,
    LinearTransactionCostModel,
    Position,
    PositionState,
    Trade,
    TradeType,
)


class TestTradeType:
    """Test trade sides."""

    def test_complement(self):
        """Test BUY and SELL are complements."""
        assert TradeType.BUY.complement() is TradeType.SELL
        assert TradeType.SELL.complement() is TradeType.BUY


class TestTrade:
    """Test trade validation and derived values."""

    def test_buy_at(self):
        """Test a zero-cost buy."""
        trade = Trade.buy_at(2, Decimal("100"), Decimal("3"))

        assert trade.is_buy
        assert trade.value == Decimal("300")
        assert trade.cost == Decimal("0")
        assert trade.net_price == Decimal("100")

    def test_net_price_includes_costs(self):
        """Test buys pay more and sells receive less per unit."""
        model = LinearTransactionCostModel(Decimal("0.01"))

        buy = Trade.buy_at(0, Decimal("100"), Decimal("2"), model)
        sell = Trade.sell_at(1, Decimal("100"), Decimal("2"), model)

        assert buy.cost == Decimal("2")
        assert buy.net_price == Decimal("101")
        assert sell.net_price == Decimal("99")

    def test_type_coerced_from_string(self):
        """Test string sides are accepted."""
        trade = Trade(0, "sell", Decimal("10"), Decimal("1"))

        assert trade.type is TradeType.SELL

    def test_negative_index_rejected(self):
        """Test trade index cannot be negative."""
        with pytest.raises(ValueError, match="index cannot be negative"):
            Trade.buy_at(-1, Decimal("100"), Decimal("1"))

    def test_non_positive_amount_rejected(self):
        """Test trade amount must be positive."""
        with pytest.raises(ValueError, match="amount must be positive"):
            Trade.buy_at(0, Decimal("100"), Decimal("0"))

    def test_int_values_become_decimal(self):
        """Test plain ints are stored as Decimals."""
        trade = Trade.buy_at(0, 100, 2)

        assert trade.price == Decimal("100")
        assert isinstance(trade.price, Decimal)
        assert isinstance(trade.amount, Decimal)
        assert trade.value == Decimal("200")

    def test_int_amount_follows_float_price(self):
        """Test an int amount takes the float type of the price."""
        trade = Trade.sell_at(0, 100.5, 1)

        assert isinstance(trade.amount, float)
        assert trade.value == 100.5

    def test_mixed_numeric_types_rejected(self):
        """Test Decimal and float cannot be combined in one trade."""
        with pytest.raises(ValueError, match="share a numeric type"):
            Trade.buy_at(0, Decimal("100"), 1.0)

    def test_non_numeric_price_rejected(self):
        """Test strings and bools are not prices."""
        with pytest.raises(ValueError, match="No numeric factory"):
            Trade.buy_at(0, "100", Decimal("1"))
        with pytest.raises(ValueError, match="No numeric factory"):
            Trade.buy_at(0, True, Decimal("1"))

    def test_is_frozen(self):
        """Test trades are immutable."""
        trade = Trade.buy_at(0, Decimal("100"), Decimal("1"))

        with pytest.raises(AttributeError):
            trade.index = 3

    def test_equality_ignores_cost_model(self):
        """Test trades compare by index, type, price and amount."""
        a = Trade.buy_at(0, Decimal("100"), Decimal("1"))
        b = Trade.buy_at(0, Decimal("100"), Decimal("1"), LinearTransactionCostModel(Decimal("0.01")))

        assert a == b


class TestPositionLifecycle:
    """Test the NEW -> OPEN -> CLOSED state machine."""

    def test_new_position(self):
        """Test a fresh position is NEW."""
        position = Position()

        assert position.state is PositionState.NEW
        assert position.is_new
        assert position.is_long
        assert position.entry is None

    def test_operate_opens_then_closes(self):
        """Test operate() opens and then closes the position."""
        position = Position()

        entry = position.operate(2, Decimal("100"), Decimal("1"))
        assert position.is_opened
        assert entry.type is TradeType.BUY

        exit = position.operate(5, Decimal("110"), Decimal("1"))
        assert position.is_closed
        assert exit.type is TradeType.SELL

    def test_operate_on_closed_position_rejected(self):
        """Test a closed position cannot be operated."""
        position = Position.of(
            Trade.buy_at(0, Decimal("100"), Decimal("1")),
            Trade.sell_at(1, Decimal("101"), Decimal("1")),
        )

        with pytest.raises(ValueError, match="closed position"):
            position.operate(2, Decimal("102"), Decimal("1"))

    def test_exit_before_entry_rejected(self):
        """Test the exit cannot precede the entry."""
        position = Position()
        position.operate(5, Decimal("100"), Decimal("1"))

        with pytest.raises(ValueError, match="cannot precede"):
            position.operate(4, Decimal("101"), Decimal("1"))

    def test_of_rejects_same_types(self):
        """Test entry and exit must be opposite sides."""
        with pytest.raises(ValueError, match="different types"):
            Position.of(
                Trade.buy_at(0, Decimal("100"), Decimal("1")),
                Trade.buy_at(1, Decimal("100"), Decimal("1")),
            )

    def test_of_rejects_exit_before_entry(self):
        """Test Position.of() validates ordering."""
        with pytest.raises(ValueError, match="cannot precede"):
            Position.of(
                Trade.buy_at(3, Decimal("100"), Decimal("1")),
                Trade.sell_at(1, Decimal("100"), Decimal("1")),
            )

    def test_equality(self):
        """Test positions compare by side and trades."""
        a = Position.of(Trade.buy_at(0, Decimal("100"), Decimal("1")), Trade.sell_at(1, Decimal("101"), Decimal("1")))
        b = Position.of(Trade.buy_at(0, Decimal("100"), Decimal("1")), Trade.sell_at(1, Decimal("101"), Decimal("1")))

        assert a == b


class TestPositionProfit:
    """Test profit and return calculations."""

    def test_long_profit(self):
        """Test long profit after costs."""
        model = LinearTransactionCostModel(Decimal("0.01"))
        position = Position(TradeType.BUY, model)
        position.operate(0, Decimal("100"), Decimal("1"))
        position.operate(3, Decimal("110"), Decimal("1"))

        assert position.gross_profit() == Decimal("10")
        assert position.profit() == Decimal("7.9")
        assert position.has_profit

    def test_short_profit(self):
        """Test short profit is the price drop."""
        position = Position.of(
            Trade.sell_at(0, Decimal("100"), Decimal("2")),
            Trade.buy_at(3, Decimal("90"), Decimal("2")),
        )

        assert position.gross_profit() == Decimal("20")
        assert position.is_short

    def test_short_profit_net_of_borrowing(self):
        """Test holding cost reduces short profit."""
        position = Position.of(
            Trade.sell_at(0, Decimal("100"), Decimal("1")),
            Trade.buy_at(4, Decimal("90"), Decimal("1")),
            holding_cost_model=LinearBorrowingCostModel(Decimal("0.01")),
        )

        assert position.profit() == Decimal("6")
        assert position.position_cost() == Decimal("4")

    def test_open_position_profit_is_zero(self):
        """Test an open position has no realised profit."""
        position = Position.of(Trade.buy_at(0, Decimal("100"), Decimal("1")))

        assert position.profit() == Decimal("0")
        assert not position.has_profit
        assert not position.has_loss

    def test_profit_at_values_open_position(self):
        """Test profit_at() marks an open position to a price."""
        position = Position.of(Trade.buy_at(0, Decimal("100"), Decimal("2")))

        assert position.profit_at(3, Decimal("105")) == Decimal("10")
        assert position.gross_profit(Decimal("95")) == Decimal("-10")

    def test_gross_return(self):
        """Test multiplicative returns for long and short positions."""
        long = Position.of(Trade.buy_at(0, Decimal("100"), Decimal("1")), Trade.sell_at(1, Decimal("110"), Decimal("1")))
        short = Position.of(Trade.sell_at(0, Decimal("100"), Decimal("1")), Trade.buy_at(1, Decimal("90"), Decimal("1")))
        open_long = Position.of(Trade.buy_at(0, Decimal("100"), Decimal("1")))

        assert long.gross_return() == Decimal("1.1")
        assert short.gross_return() == Decimal("1.1")
        assert open_long.gross_return() == Decimal("1")
        assert open_long.gross_return(Decimal("120")) == Decimal("1.2")

    def test_gross_return_requires_entry(self):
        """Test a NEW position has no return."""
        with pytest.raises(ValueError, match="no entry"):
            Position().gross_return()

    def test_losing_position(self):
        """Test has_loss for a losing trade."""
        position = Position.of(Trade.buy_at(0, Decimal("100"), Decimal("1")), Trade.sell_at(1, Decimal("95"), Decimal("1")))

        assert position.profit() == Decimal("-5")
        assert position.has_loss
