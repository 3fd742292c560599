"""FHA loan limits for 2024.

County-based one-unit FHA limits with a sample ZIP code lookup. Counties not
listed use their statewide limit, and unknown states use the national
baseline (floor).

Sources:
- HUD Mortgagee Letter 2023-22 (2024 FHA forward mortgage limits)

Updated: 2024
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .models import (
    AlternativeLoanProgram,
    LoanLimitCheck,
    LoanLimitLocation,
    MaxHomePriceWithLimits,
)
from .payments import round_currency

LOAN_LIMITS_VERSION = "2024"

BASELINE_LIMIT = Decimal("498250")
CEILING_LIMIT = Decimal("1149825")

CONVENTIONAL_LIMIT = Decimal("766550")
CONVENTIONAL_HIGH_COST_LIMIT = Decimal("1149825")

NATIONAL_BASELINE_LOCATION = "National Baseline"


@dataclass(frozen=True)
class CountyLoanLimit:
    """FHA limit for a single county."""
    county: str
    state: str
    limit: Decimal
    is_high_cost: bool


# =============================================================================
# STATEWIDE LIMITS
# =============================================================================
# States with a uniform limit outside their listed high-cost counties.

STATEWIDE_LIMITS: dict[str, Decimal] = {
    "AL": Decimal("498250"),
    "AK": Decimal("792350"),
    "AZ": Decimal("498250"),
    "AR": Decimal("498250"),
    "DE": Decimal("498250"),
    "FL": Decimal("498250"),
    "GA": Decimal("498250"),
    "ID": Decimal("498250"),
    "IN": Decimal("498250"),
    "IA": Decimal("498250"),
    "KS": Decimal("498250"),
    "KY": Decimal("498250"),
    "LA": Decimal("498250"),
    "ME": Decimal("555550"),
    "MS": Decimal("498250"),
    "MO": Decimal("498250"),
    "MT": Decimal("498250"),
    "NE": Decimal("498250"),
    "NV": Decimal("498250"),
    "NH": Decimal("625500"),
    "NM": Decimal("498250"),
    "ND": Decimal("498250"),
    "OH": Decimal("498250"),
    "OK": Decimal("498250"),
    "OR": Decimal("498250"),
    "PA": Decimal("498250"),
    "RI": Decimal("625500"),
    "SC": Decimal("498250"),
    "SD": Decimal("498250"),
    "TN": Decimal("498250"),
    "TX": Decimal("498250"),
    "UT": Decimal("555550"),
    "VT": Decimal("625500"),
    "WV": Decimal("498250"),
    "WI": Decimal("498250"),
    "WY": Decimal("498250"),
}


# =============================================================================
# HIGH-COST COUNTIES
# =============================================================================

def _counties(state: str, entries: list[tuple[str, str, bool]]) -> list[CountyLoanLimit]:
    return [CountyLoanLimit(county, state, Decimal(limit), high) for county, limit, high in entries]


HIGH_COST_COUNTIES: dict[str, list[CountyLoanLimit]] = {
    "CA": _counties("CA", [
        ("Los Angeles", "1149825", True),
        ("Orange", "1149825", True),
        ("San Francisco", "1149825", True),
        ("San Mateo", "1149825", True),
        ("Santa Clara", "1149825", True),
        ("Marin", "1149825", True),
        ("San Diego", "1031250", True),
        ("Alameda", "1149825", True),
        ("Contra Costa", "1149825", True),
        ("Santa Barbara", "986850", True),
        ("Ventura", "986850", True),
        ("Monterey", "847000", True),
        ("Napa", "1149825", True),
        ("Sonoma", "847000", True),
    ]),
    "NY": _counties("NY", [
        ("New York", "1149825", True),
        ("Kings", "1149825", True),
        ("Queens", "1149825", True),
        ("Bronx", "1149825", True),
        ("Richmond", "1149825", True),
        ("Nassau", "1149825", True),
        ("Suffolk", "1149825", True),
        ("Westchester", "1149825", True),
        ("Rockland", "1149825", True),
    ]),
    "NJ": _counties("NJ", [
        ("Bergen", "1149825", True),
        ("Essex", "1149825", True),
        ("Hudson", "1149825", True),
        ("Hunterdon", "1149825", True),
        ("Middlesex", "1149825", True),
        ("Monmouth", "1149825", True),
        ("Morris", "1149825", True),
        ("Ocean", "1149825", True),
        ("Passaic", "1149825", True),
        ("Somerset", "1149825", True),
        ("Sussex", "1149825", True),
        ("Union", "1149825", True),
    ]),
    "CT": _counties("CT", [
        ("Fairfield", "1149825", True),
        ("New Haven", "625500", False),
        ("Hartford", "625500", False),
        ("Litchfield", "625500", False),
    ]),
    "MA": _counties("MA", [
        ("Suffolk", "1149825", True),
        ("Middlesex", "1149825", True),
        ("Norfolk", "1149825", True),
        ("Essex", "847000", True),
        ("Plymouth", "847000", True),
        ("Worcester", "625500", False),
    ]),
    "DC": _counties("DC", [
        ("District of Columbia", "1149825", True),
    ]),
    "MD": _counties("MD", [
        ("Montgomery", "1149825", True),
        ("Prince Georges", "1149825", True),
        ("Anne Arundel", "847000", True),
        ("Baltimore", "625500", False),
    ]),
    "VA": _counties("VA", [
        ("Arlington", "1149825", True),
        ("Fairfax", "1149825", True),
        ("Loudoun", "1149825", True),
        ("Prince William", "1149825", True),
        ("Falls Church", "1149825", True),
        ("Alexandria", "1149825", True),
    ]),
    "WA": _counties("WA", [
        ("King", "1149825", True),
        ("Snohomish", "847000", True),
        ("Pierce", "740550", True),
    ]),
    "CO": _counties("CO", [
        ("Denver", "740550", True),
        ("Boulder", "847000", True),
        ("Jefferson", "740550", True),
    ]),
    "HI": _counties("HI", [
        ("Honolulu", "1149825", True),
        ("Maui", "1149825", True),
        ("Hawaii", "847000", True),
        ("Kauai", "1149825", True),
    ]),
}


# =============================================================================
# ZIP CODE LOOKUP
# =============================================================================
# Sample mapping of major metro ZIP codes; not a complete USPS crosswalk.

ZIP_TO_COUNTY: dict[str, tuple[str, str]] = {
    # California
    "90210": ("Los Angeles", "CA"),
    "90211": ("Los Angeles", "CA"),
    "94102": ("San Francisco", "CA"),
    "94103": ("San Francisco", "CA"),
    "95014": ("Santa Clara", "CA"),
    "92101": ("San Diego", "CA"),
    "92102": ("San Diego", "CA"),
    # New York
    "10001": ("New York", "NY"),
    "10002": ("New York", "NY"),
    "11201": ("Kings", "NY"),
    "11354": ("Queens", "NY"),
    "10451": ("Bronx", "NY"),
    "10301": ("Richmond", "NY"),
    "11501": ("Nassau", "NY"),
    "11701": ("Suffolk", "NY"),
    # New Jersey
    "07001": ("Bergen", "NJ"),
    "07002": ("Bergen", "NJ"),
    "07101": ("Essex", "NJ"),
    "07030": ("Hudson", "NJ"),
    # Washington DC
    "20001": ("District of Columbia", "DC"),
    "20002": ("District of Columbia", "DC"),
    # Maryland
    "20814": ("Montgomery", "MD"),
    "20735": ("Prince Georges", "MD"),
    # Virginia
    "22201": ("Arlington", "VA"),
    "22003": ("Fairfax", "VA"),
    "20176": ("Loudoun", "VA"),
    # Washington
    "98101": ("King", "WA"),
    "98102": ("King", "WA"),
    "98201": ("Snohomish", "WA"),
    "98401": ("Pierce", "WA"),
    # Colorado
    "80201": ("Denver", "CO"),
    "80202": ("Denver", "CO"),
    "80301": ("Boulder", "CO"),
    # Hawaii
    "96801": ("Honolulu", "HI"),
    "96802": ("Honolulu", "HI"),
    "96708": ("Maui", "HI"),
    # Massachusetts
    "02101": ("Suffolk", "MA"),
    "02139": ("Middlesex", "MA"),
    "02116": ("Norfolk", "MA"),
    # Connecticut
    "06830": ("Fairfield", "CT"),
    "06831": ("Fairfield", "CT"),
}


# =============================================================================
# LOOKUPS
# =============================================================================

def get_limit_by_state(state: str) -> Decimal:
    """Statewide limit, or the national baseline for unlisted states."""
    return STATEWIDE_LIMITS.get(state.upper(), BASELINE_LIMIT)


def get_limit_by_county(county: str, state: str) -> Decimal:
    """County limit, falling back to the statewide limit."""
    county_lower = county.lower()
    for entry in HIGH_COST_COUNTIES.get(state.upper(), []):
        if entry.county.lower() == county_lower:
            return entry.limit
    return get_limit_by_state(state)


def get_limit_by_zip(zip_code: str) -> LoanLimitLocation:
    """Resolve the limit for a ZIP code; unknown ZIPs get the baseline."""
    location = ZIP_TO_COUNTY.get(zip_code)
    if location is None:
        return LoanLimitLocation(
            limit=BASELINE_LIMIT,
            county="Unknown",
            state="Unknown",
            is_high_cost=False,
        )

    county, state = location
    limit = get_limit_by_county(county, state)
    return LoanLimitLocation(
        limit=limit,
        county=county,
        state=state,
        is_high_cost=limit > BASELINE_LIMIT,
    )


def is_high_cost_area(county: str, state: str) -> bool:
    return get_limit_by_county(county, state) > BASELINE_LIMIT


def get_high_cost_counties(state: str) -> list[CountyLoanLimit]:
    return list(HIGH_COST_COUNTIES.get(state.upper(), []))


def _resolve_limit(
    zip_code: Optional[str],
    county: Optional[str],
    state: Optional[str],
    include_zip_in_name: bool = True,
) -> tuple[Decimal, str]:
    """Pick the most specific limit available.

    Returns:
        Tuple of (limit, location description)
    """
    if zip_code:
        zip_data = get_limit_by_zip(zip_code)
        name = f"{zip_data.county}, {zip_data.state}"
        if include_zip_in_name:
            name = f"{name} ({zip_code})"
        return zip_data.limit, name
    if county and state:
        return get_limit_by_county(county, state), f"{county}, {state}"
    if state:
        return get_limit_by_state(state), state
    return BASELINE_LIMIT, NATIONAL_BASELINE_LOCATION


def validate_loan_amount(
    loan_amount: Decimal,
    zip_code: Optional[str] = None,
    county: Optional[str] = None,
    state: Optional[str] = None,
) -> LoanLimitCheck:
    """Check a loan amount against the most specific limit available.

    ZIP code wins over county+state, which wins over state alone. With no
    location the national baseline applies.
    """
    limit, location = _resolve_limit(zip_code, county, state)
    return LoanLimitCheck(
        is_valid=loan_amount <= limit,
        limit=limit,
        exceeds_by=max(Decimal("0"), loan_amount - limit),
        location=location,
    )


def get_alternative_loan_programs(loan_amount: Decimal) -> list[AlternativeLoanProgram]:
    """Suggest non-FHA programs for a loan amount."""
    alternatives: list[AlternativeLoanProgram] = []

    if loan_amount <= CONVENTIONAL_LIMIT:
        alternatives.append(AlternativeLoanProgram(
            program="Conventional Loan",
            description="Standard conventional mortgage with competitive rates",
            max_loan_amount=CONVENTIONAL_LIMIT,
            requirements=[
                "Minimum 3% down payment",
                "FICO score 620+",
                "DTI ratio up to 45%",
                "PMI required if down payment < 20%",
            ],
        ))

    if loan_amount <= CONVENTIONAL_HIGH_COST_LIMIT:
        alternatives.append(AlternativeLoanProgram(
            program="High-Balance Conventional",
            description="Conventional loan for high-cost areas",
            max_loan_amount=CONVENTIONAL_HIGH_COST_LIMIT,
            requirements=[
                "Minimum 5-10% down payment",
                "FICO score 640+",
                "DTI ratio up to 43%",
                "Higher down payment and reserves required",
            ],
        ))

    alternatives.append(AlternativeLoanProgram(
        program="Jumbo Loan",
        description="Non-conforming loan for amounts above conventional limits",
        max_loan_amount=None,
        requirements=[
            "Minimum 10-20% down payment",
            "FICO score 700+",
            "DTI ratio up to 43%",
            "Significant cash reserves required",
            "Higher interest rates",
        ],
    ))

    return alternatives


def calculate_max_home_price_with_limits(
    down_payment_percent: Decimal = Decimal("3.5"),
    zip_code: Optional[str] = None,
    county: Optional[str] = None,
    state: Optional[str] = None,
) -> MaxHomePriceWithLimits:
    """Highest price purchasable when the loan sits exactly at the FHA limit."""
    limit, location = _resolve_limit(zip_code, county, state, include_zip_in_name=False)
    max_home_price = limit / (1 - down_payment_percent / 100)

    return MaxHomePriceWithLimits(
        max_home_price=round_currency(max_home_price),
        max_loan_amount=limit,
        fha_limit=limit,
        location=location,
    )
