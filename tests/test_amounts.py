"""
Test suite for amounts module

Tests two-place Decimal rounding, parsing of user and store text, and display formatting.
"""

import pytest
from decimal import Decimal

from atm_ledger.amounts import quantize_amount, parse_amount, format_amount


class TestAmounts:
    """Test Decimal amount helpers"""
    
    def test_quantize_rounds_half_up(self):
        """Test rounding to two places"""
        assert quantize_amount(Decimal('100.555')) == Decimal('100.56')
        assert quantize_amount(Decimal('100.554')) == Decimal('100.55')
        assert quantize_amount(500) == Decimal('500.00')
        assert quantize_amount("0.005") == Decimal('0.01')
    
    def test_parse_amount(self):
        """Test parsing numeric text"""
        assert parse_amount("250") == Decimal('250.00')
        assert parse_amount(" 1250.00 ") == Decimal('1250.00')
        assert parse_amount("-5") == Decimal('-5.00')
        assert parse_amount("1e2") == Decimal('100.00')
    
    def test_parse_amount_rejects_garbage(self):
        """Test non-numeric input is refused"""
        for bad in ["", "abc", "12abc", "1.2.3"]:
            with pytest.raises(ValueError):
                parse_amount(bad)
    
    def test_parse_amount_rejects_non_finite(self):
        """Test NaN and infinity are refused"""
        for bad in ["NaN", "inf", "-Infinity"]:
            with pytest.raises(ValueError, match="not a finite number"):
                parse_amount(bad)
    
    def test_oversized_amounts_rejected(self):
        """Test values too large for two places raise ValueError"""
        for bad in ["1e30", "1E+26", "123456789012345678901234567"]:
            with pytest.raises(ValueError, match="two decimal places"):
                parse_amount(bad)
        with pytest.raises(ValueError, match="two decimal places"):
            quantize_amount(Decimal('1e30'))
        # 26 integer digits still fit
        assert parse_amount("9e25") == Decimal('90000000000000000000000000.00')

    def test_format_amount(self):
        """Test plain two-place formatting without separators"""
        assert format_amount(Decimal('1000')) == "1000.00"
        assert format_amount(Decimal('0')) == "0.00"
        assert format_amount(Decimal('1234567.891')) == "1234567.89"
