"""Tests for the exception hierarchy."""

import pytest

from fha_core.exceptions import (
    ConfigurationError,
    FHACoreError,
    RateProviderError,
    ValidationError,
)


class TestFHACoreError:
    """Test suite for the base exception."""

    def test_message_and_defaults(self):
        error = FHACoreError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.details == {}
        assert not error.recoverable

    def test_repr(self):
        error = FHACoreError("boom", details={"code": 1}, recoverable=True)
        assert repr(error) == "FHACoreError(message='boom', details={'code': 1}, recoverable=True)"

    def test_subclass_context_does_not_leak_into_caller_details(self):
        shared = {"request_id": "abc"}
        error = ValidationError("bad term", field="term_years", details=shared)

        assert error.details == {"request_id": "abc", "field": "term_years"}
        assert shared == {"request_id": "abc"}

    @pytest.mark.parametrize(
        "error",
        [
            ValidationError("bad"),
            ConfigurationError("bad"),
            RateProviderError("bad"),
        ],
    )
    def test_hierarchy(self, error: FHACoreError):
        with pytest.raises(FHACoreError):
            raise error


class TestSubclasses:
    """Test suite for context captured by each subclass."""

    def test_validation_error(self):
        error = ValidationError(
            "Loan term must be positive",
            field="term_years",
            value=0,
            constraint="term_years > 0",
        )

        assert error.recoverable
        assert error.details == {"field": "term_years", "value": 0, "constraint": "term_years > 0"}

    def test_configuration_error(self):
        error = ConfigurationError(
            "Convergence threshold too large",
            config_key="solver.convergence_threshold",
            expected="< 0.1399",
            actual="0.2",
        )

        assert not error.recoverable
        assert error.details["config_key"] == "solver.convergence_threshold"
        assert error.details["actual"] == "0.2"

    def test_rate_provider_error(self):
        error = RateProviderError("Feed down", provider="ScrapedRateProvider", source="mnd")

        assert error.recoverable
        assert error.provider == "ScrapedRateProvider"
        assert error.details == {"provider": "ScrapedRateProvider", "source": "mnd"}
