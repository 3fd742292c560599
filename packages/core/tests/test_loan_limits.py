"""Tests for FHA county loan limits."""

from decimal import Decimal

import pytest

from fha_core.loan_limits import (
    BASELINE_LIMIT,
    CEILING_LIMIT,
    calculate_max_home_price_with_limits,
    get_alternative_loan_programs,
    get_high_cost_counties,
    get_limit_by_county,
    get_limit_by_state,
    get_limit_by_zip,
    is_high_cost_area,
    validate_loan_amount,
)


class TestLimitLookups:
    """Test suite for state, county and ZIP lookups."""

    def test_statewide_limit(self):
        assert get_limit_by_state("AK") == Decimal("792350")
        assert get_limit_by_state("tx") == BASELINE_LIMIT

    def test_unlisted_state_gets_baseline(self):
        assert get_limit_by_state("CA") == BASELINE_LIMIT

    def test_county_limit_case_insensitive(self):
        assert get_limit_by_county("los angeles", "CA") == CEILING_LIMIT
        assert get_limit_by_county("San Diego", "ca") == Decimal("1031250")

    def test_unknown_county_falls_back_to_state(self):
        assert get_limit_by_county("Fresno", "CA") == BASELINE_LIMIT
        assert get_limit_by_county("Anchorage", "AK") == Decimal("792350")

    def test_known_zip(self):
        location = get_limit_by_zip("94102")

        assert location.county == "San Francisco"
        assert location.state == "CA"
        assert location.limit == CEILING_LIMIT
        assert location.is_high_cost

    def test_unknown_zip(self):
        location = get_limit_by_zip("00000")

        assert location.limit == BASELINE_LIMIT
        assert location.county == "Unknown"
        assert not location.is_high_cost

    def test_high_cost_area(self):
        assert is_high_cost_area("King", "WA")
        assert is_high_cost_area("Worcester", "MA")
        assert not is_high_cost_area("Harris", "TX")

    def test_high_cost_counties(self):
        counties = get_high_cost_counties("HI")

        assert {c.county for c in counties} == {"Honolulu", "Maui", "Hawaii", "Kauai"}
        assert get_high_cost_counties("TX") == []


class TestValidateLoanAmount:
    """Test suite for validate_loan_amount."""

    def test_zip_takes_precedence(self):
        check = validate_loan_amount(Decimal("600000"), zip_code="10001", state="TX")

        assert check.is_valid
        assert check.location == "New York, NY (10001)"
        assert check.exceeds_by == Decimal("0")

    def test_county_and_state(self):
        check = validate_loan_amount(Decimal("800000"), county="Pierce", state="WA")

        assert not check.is_valid
        assert check.limit == Decimal("740550")
        assert check.exceeds_by == Decimal("59450")
        assert check.location == "Pierce, WA"

    def test_state_only(self):
        check = validate_loan_amount(Decimal("500000"), state="UT")
        assert check.is_valid
        assert check.location == "UT"

    def test_national_baseline(self):
        check = validate_loan_amount(Decimal("498251"))

        assert not check.is_valid
        assert check.location == "National Baseline"
        assert check.exceeds_by == Decimal("1")


class TestAlternativePrograms:
    """Test suite for alternative loan suggestions."""

    def test_conforming_amount(self):
        programs = get_alternative_loan_programs(Decimal("700000"))

        assert [p.program for p in programs] == [
            "Conventional Loan",
            "High-Balance Conventional",
            "Jumbo Loan",
        ]

    def test_jumbo_only(self):
        programs = get_alternative_loan_programs(Decimal("1500000"))

        assert len(programs) == 1
        assert programs[0].program == "Jumbo Loan"
        assert programs[0].max_loan_amount is None


class TestMaxHomePriceWithLimits:
    """Test suite for the limit-bound home price."""

    @pytest.mark.parametrize(
        "down_payment,expected",
        [
            (Decimal("3.5"), Decimal("516321")),
            (Decimal("10"), Decimal("553611")),
        ],
    )
    def test_baseline(self, down_payment: Decimal, expected: Decimal):
        result = calculate_max_home_price_with_limits(down_payment)

        assert result.max_home_price == expected
        assert result.fha_limit == BASELINE_LIMIT
        assert result.location == "National Baseline"

    def test_zip_location_name(self):
        result = calculate_max_home_price_with_limits(Decimal("3.5"), zip_code="98101")

        assert result.location == "King, WA"
        assert result.max_loan_amount == CEILING_LIMIT
