"""Unit tests for numeric factories."""

import math
from decimal import Decimal

import pytest

from qanalytics.num import DecimalNumFactory, FloatNumFactory, factory_of


class TestDecimalNumFactory:
    """Test the Decimal backend."""

    def test_constants(self):
        """Test constants are Decimals with the expected values."""
        factory = DecimalNumFactory()

        assert factory.zero == Decimal("0")
        assert factory.one == Decimal("1")
        assert factory.two == Decimal("2")
        assert factory.hundred == Decimal("100")
        assert factory.minus_one == Decimal("-1")
        assert isinstance(factory.one, Decimal)

    def test_num_of_converts_float_through_str(self):
        """Test floats convert without binary artefacts."""
        factory = DecimalNumFactory()

        assert factory.num_of(0.1) == Decimal("0.1")
        assert factory.num_of(5) == Decimal("5")
        assert factory.num_of("1.25") == Decimal("1.25")

    def test_num_of_passes_decimal_through(self):
        """Test Decimal input is returned unchanged."""
        value = Decimal("3.14")

        assert DecimalNumFactory().num_of(value) is value

    def test_num_of_nan_float(self):
        """Test NaN float becomes Decimal NaN."""
        factory = DecimalNumFactory()

        result = factory.num_of(float("nan"))

        assert factory.is_nan(result)

    def test_num_of_rejects_bool(self):
        """Test bool is not accepted as a number."""
        with pytest.raises(ValueError, match="bool"):
            DecimalNumFactory().num_of(True)

    def test_num_of_rejects_unknown_type(self):
        """Test unsupported types are rejected."""
        with pytest.raises(ValueError, match="Cannot convert"):
            DecimalNumFactory().num_of([1])

    def test_invalid_precision(self):
        """Test precision must be positive."""
        with pytest.raises(ValueError, match="precision must be positive"):
            DecimalNumFactory(precision=0)

    def test_log_sqrt_pow(self):
        """Test transcendental operations."""
        factory = DecimalNumFactory()

        assert factory.sqrt(Decimal("16")) == Decimal("4")
        assert factory.log(Decimal("1")) == Decimal("0")
        assert factory.pow(Decimal("2"), Decimal("3")) == Decimal("8")

    def test_equality_by_precision(self):
        """Test factories compare by precision."""
        assert DecimalNumFactory(32) == DecimalNumFactory(32)
        assert DecimalNumFactory(32) != DecimalNumFactory(16)
        assert hash(DecimalNumFactory(32)) == hash(DecimalNumFactory(32))

    def test_produces(self):
        """Test produces() checks the value type."""
        factory = DecimalNumFactory()

        assert factory.produces(Decimal("1"))
        assert not factory.produces(1.0)


class TestFloatNumFactory:
    """Test the float backend."""

    def test_constants_and_conversion(self):
        """Test constants and conversions are floats."""
        factory = FloatNumFactory()

        assert factory.one == 1.0
        assert factory.num_of(Decimal("2.5")) == 2.5
        assert factory.num_of("3") == 3.0
        assert isinstance(factory.hundred, float)

    def test_nan(self):
        """Test NaN sentinel."""
        factory = FloatNumFactory()

        assert factory.is_nan(factory.nan)
        assert not factory.is_nan(1.0)

    def test_transcendental(self):
        """Test log, sqrt and pow."""
        factory = FloatNumFactory()

        assert factory.sqrt(9.0) == 3.0
        assert factory.log(math.e) == pytest.approx(1.0)
        assert factory.pow(2.0, 3) == 8.0

    def test_rejects_bool(self):
        """Test bool is not accepted as a number."""
        with pytest.raises(ValueError, match="bool"):
            FloatNumFactory().num_of(False)


class TestFactoryOf:
    """Test factory lookup by value type."""

    def test_decimal_value(self):
        """Test Decimal values map to the Decimal factory."""
        assert isinstance(factory_of(Decimal("1")), DecimalNumFactory)

    def test_float_value(self):
        """Test float values map to the float factory."""
        assert isinstance(factory_of(1.5), FloatNumFactory)

    def test_int_value(self):
        """Test plain ints map to the Decimal factory."""
        assert isinstance(factory_of(3), DecimalNumFactory)

    def test_unsupported_value(self):
        """Test unsupported values are rejected."""
        with pytest.raises(ValueError, match="No numeric factory"):
            factory_of("1")
        with pytest.raises(ValueError, match="No numeric factory"):
            factory_of(True)
