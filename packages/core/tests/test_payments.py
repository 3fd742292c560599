"""Tests for amortization, MIP, PITI and the max-loan solver."""

from decimal import Decimal

import pytest

from fha_core.exceptions import ValidationError
from fha_core.payments import (
    amortized_payment,
    calculate_max_dti,
    compute_mip,
    compute_piti,
    loan_to_value,
    max_loan_amount,
    principal_from_payment,
    round_cents,
    round_currency,
    validate_mip_inputs,
)


class TestRounding:
    """Test suite for rounding helpers."""

    def test_half_up(self):
        assert round_currency(Decimal("62.5")) == Decimal("63")
        assert round_cents(Decimal("132.6875")) == Decimal("132.69")


class TestAmortization:
    """Test suite for the annuity formula."""

    def test_standard_payment(self):
        """$200,000 at 6% over 30 years is about $1,199.10 a month."""
        payment = amortized_payment(Decimal("200000"), Decimal("0.06") / 12, 360)
        assert round_cents(payment) == Decimal("1199.10")

    def test_zero_rate(self):
        payment = amortized_payment(Decimal("36000"), Decimal("0"), 360)
        assert payment == Decimal("100")

    def test_inverse(self):
        rate = Decimal("0.07") / 12
        principal = principal_from_payment(Decimal("1500"), rate, 360)
        assert abs(amortized_payment(principal, rate, 360) - Decimal("1500")) < Decimal("0.000001")


class TestComputeMIP:
    """Test suite for MIP calculation."""

    def test_minimum_down_payment_loan(self):
        mip = compute_mip(Decimal("289500"), Decimal("300000"))

        assert mip.ltv == Decimal("96.50")
        assert mip.annual_rate == Decimal("0.0055")
        assert mip.upfront_mip == Decimal("5066.25")
        assert mip.monthly_mip == Decimal("132.69")

    def test_upfront_same_for_every_term(self):
        short = compute_mip(Decimal("250000"), Decimal("300000"), 15)
        long = compute_mip(Decimal("250000"), Decimal("300000"), 30)

        assert short.upfront_mip == long.upfront_mip == Decimal("4375.00")
        assert short.monthly_mip < long.monthly_mip

    def test_ltv_just_over_band_edge_uses_higher_rate(self):
        mip = compute_mip(Decimal("95004"), Decimal("100000"))

        assert mip.annual_rate == Decimal("0.0055")
        assert mip.ltv == Decimal("95.00")

    def test_ltv_at_band_edge_uses_lower_rate(self):
        mip = compute_mip(Decimal("95000"), Decimal("100000"))

        assert mip.annual_rate == Decimal("0.0050")
        assert mip.ltv == Decimal("95.00")

    def test_loan_to_value_keeps_sub_cent_excess(self):
        assert loan_to_value(Decimal("95004"), Decimal("100000")) == Decimal("95.004")
        assert loan_to_value(Decimal("289500"), Decimal("300000")) == Decimal("96.5")

    def test_deterministic(self):
        first = compute_mip(Decimal("412345"), Decimal("427300"))
        second = compute_mip(Decimal("412345"), Decimal("427300"))
        assert first == second


class TestValidateMIPInputs:
    """Test suite for MIP input sanity checks."""

    def test_valid_inputs(self):
        is_valid, warnings = validate_mip_inputs(Decimal("289500"), Decimal("300000"))
        assert is_valid
        assert warnings == []

    def test_non_positive_inputs(self):
        is_valid, warnings = validate_mip_inputs(Decimal("0"), Decimal("300000"))
        assert not is_valid
        assert len(warnings) == 1

    def test_loan_not_below_price(self):
        is_valid, warnings = validate_mip_inputs(Decimal("300000"), Decimal("300000"))
        assert not is_valid
        assert "Loan amount cannot equal or exceed home price" in warnings
        assert any("LTV exceeds" in w for w in warnings)

    def test_unusual_term(self):
        _, warnings = validate_mip_inputs(Decimal("200000"), Decimal("300000"), 40)
        assert "Unusual loan term - verify MIP rates apply" in warnings

    def test_above_national_ceiling(self):
        _, warnings = validate_mip_inputs(Decimal("1200000"), Decimal("1500000"))
        assert "Loan amount may exceed FHA limits in your area" in warnings

    def test_ltv_just_over_typical_maximum_warns(self):
        is_valid, warnings = validate_mip_inputs(Decimal("96504"), Decimal("100000"))
        assert is_valid
        assert any("LTV exceeds" in w for w in warnings)


class TestComputePITI:
    """Test suite for PITI calculation."""

    def test_supplied_tax_and_insurance(self):
        piti = compute_piti(
            Decimal("200000"),
            Decimal("250000"),
            Decimal("6"),
            property_tax_monthly=Decimal("300"),
            insurance_monthly=Decimal("100"),
        )

        assert piti.principal_and_interest == Decimal("1199")
        assert piti.property_tax == Decimal("300")
        assert piti.insurance == Decimal("100")
        assert piti.mip == Decimal("83.33")
        assert piti.total == Decimal("1682")

    def test_fallback_tax_and_insurance(self):
        """Missing figures fall back to 1.2% and 0.3% of price per year."""
        piti = compute_piti(Decimal("200000"), Decimal("250000"), Decimal("6"))

        assert piti.property_tax == Decimal("250")
        assert piti.insurance == Decimal("63")

    def test_zero_tax_uses_fallback(self):
        piti = compute_piti(
            Decimal("200000"),
            Decimal("250000"),
            Decimal("6"),
            property_tax_monthly=Decimal("0"),
        )
        assert piti.property_tax == Decimal("250")

    def test_invalid_term(self):
        with pytest.raises(ValidationError) as exc_info:
            compute_piti(Decimal("200000"), Decimal("250000"), Decimal("6"), term_years=0)
        assert exc_info.value.field == "term_years"


class TestMaxLoanAmount:
    """Test suite for the max-loan solver."""

    def test_no_income(self):
        assert max_loan_amount(Decimal("0"), Decimal("0.43"), Decimal("0"), Decimal("7")) == 0

    def test_debts_consume_capacity(self):
        """$60,000 income at 43% leaves exactly $2,150 a month."""
        loan = max_loan_amount(Decimal("60000"), Decimal("0.43"), Decimal("2150"), Decimal("7"))
        assert loan == 0

    def test_positive_capacity(self):
        loan = max_loan_amount(Decimal("75000"), Decimal("0.43"), Decimal("300"), Decimal("7"))
        # capacity $2,387.50; the plain annuity at 7% supports about $358,856
        assert Decimal("300000") < loan < Decimal("358900")

    def test_higher_ceiling_increases_loan(self):
        base = max_loan_amount(Decimal("75000"), Decimal("0.43"), Decimal("300"), Decimal("7"))
        raised = max_loan_amount(Decimal("75000"), Decimal("0.50"), Decimal("300"), Decimal("7"))
        assert raised > base

    def test_zero_rate_still_charges_mip(self):
        loan = max_loan_amount(Decimal("12000"), Decimal("1"), Decimal("0"), Decimal("0"))
        assert Decimal("0") < loan < Decimal("360000")

    def test_invalid_term(self):
        with pytest.raises(ValidationError):
            max_loan_amount(Decimal("75000"), Decimal("0.43"), Decimal("0"), Decimal("7"), 0)


class TestCalculateMaxDTI:
    """Test suite for combining base DTI and factor increase."""

    def test_within_cap(self):
        assert calculate_max_dti(Decimal("0.43"), Decimal("0.05")) == Decimal("0.4800")

    def test_capped(self):
        assert calculate_max_dti(Decimal("0.43"), Decimal("0.20")) == Decimal("0.5699")
