"""Interest-rate collaborator interface.

The engine never fetches or caches rates. It asks a RateProvider for one
quote per calculation; refresh policy, scraping and fallbacks belong to the
provider implementation.

Example Implementation:
    ```python
    class CachedFeedProvider:
        '''Provider backed by an application-level 24h cache.'''

        def __init__(self, cache: RateCache):
            self._cache = cache

        def get_current_rate(self) -> RateQuote:
            entry = self._cache.latest()
            if entry is None:
                raise RateProviderError("No cached rate", provider="CachedFeedProvider")
            return RateQuote(rate=entry.rate, source=entry.source, as_of=entry.updated_at)
    ```
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, runtime_checkable

from .config import RateConfig
from .models import RateQuote


@runtime_checkable
class RateProvider(Protocol):
    """Protocol for anything that can supply the current annual FHA rate."""

    def get_current_rate(self) -> RateQuote:
        """Return the current rate quote.

        Raises:
            RateProviderError: If no rate can be supplied.
        """
        ...


class StaticRateProvider:
    """Provider returning a fixed rate.

    With no explicit rate, the configured default (7.0%) is returned and the
    quote is flagged as a fallback so results can say so.
    """

    def __init__(
        self,
        rate: Optional[Decimal] = None,
        source: str = "static",
        as_of: Optional[datetime] = None,
        config: Optional[RateConfig] = None,
    ):
        if rate is None:
            config = config or RateConfig()
            self._quote = RateQuote(
                rate=config.default_interest_rate,
                source="default",
                as_of=as_of,
                was_fallback_used=True,
            )
        else:
            self._quote = RateQuote(rate=rate, source=source, as_of=as_of)

    def get_current_rate(self) -> RateQuote:
        return self._quote
