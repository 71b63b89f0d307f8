"""
Flight Orchestrator for coordinating multiple flight data providers.

This module fans a search out to Amadeus, Skyscanner and Google Flights,
merges whatever comes back, falls back to synthetic offers when nothing
does, and returns one price-sorted result.

Example:
    >>> orchestrator = FlightOrchestrator()
    >>> result = await orchestrator.search(
    ...     SearchRequest(
    ...         origin="NRT",
    ...         destination="BKK",
    ...         departure_date=date(2025, 3, 1),
    ...         return_date=date(2025, 3, 8),
    ...         adults=2,
    ...         infants=1,
    ...     )
    ... )
    >>> print(f"Found {len(result.offers)} offers")
"""

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

from ticketscan.config import settings
from ticketscan.exceptions import AggregationError
from ticketscan.models import (
    REAL_PROVIDER_TAGS,
    FlightOffer,
    SearchRequest,
    SearchResult,
    SourceAvailability,
)
from ticketscan.orchestration.mock_offers import generate_mock_offers
from ticketscan.providers import FlightProvider, build_providers

logger = logging.getLogger(__name__)

MockGenerator = Callable[[SearchRequest], List[FlightOffer]]


class FlightOrchestrator:
    """
    Aggregates offers from every configured provider.

    Features:
        - Concurrent execution of all providers using asyncio.gather()
        - Graceful error handling: a failing or slow provider never aborts
          the search, it just contributes nothing
        - Per-provider timeout
        - Deduplication by offer id
        - Synthetic fallback offers when no provider returns anything
        - Stable ascending sort by total family price

    Attributes:
        providers: Provider adapters queried on every search
        timeout: Seconds each provider gets before it counts as failed
        enable_mock_fallback: Whether to synthesize offers on an empty merge
    """

    def __init__(
        self,
        providers: Optional[Sequence[FlightProvider]] = None,
        timeout: Optional[float] = None,
        enable_mock_fallback: Optional[bool] = None,
        mock_generator: MockGenerator = generate_mock_offers,
    ):
        """
        Initialize the orchestrator.

        Args:
            providers: Provider adapters (defaults to the ones enabled in settings)
            timeout: Per-provider timeout in seconds (defaults to settings.provider_timeout)
            enable_mock_fallback: Use synthetic offers when nothing is found
                (defaults to settings.enable_mock_fallback)
            mock_generator: Fallback offer generator
        """
        self.providers: List[FlightProvider] = (
            list(providers) if providers is not None else build_providers()
        )
        self.timeout = timeout if timeout is not None else settings.provider_timeout
        self.enable_mock_fallback = (
            enable_mock_fallback
            if enable_mock_fallback is not None
            else settings.enable_mock_fallback
        )
        self.mock_generator = mock_generator

        logger.info(
            f"FlightOrchestrator initialized with providers: "
            f"{', '.join(p.name.value for p in self.providers) or 'none'}"
        )

    async def _run_provider(self, provider: FlightProvider, request: SearchRequest) -> List[FlightOffer]:
        return await asyncio.wait_for(provider.search(request), timeout=self.timeout)

    async def search(self, request: SearchRequest) -> SearchResult:
        """
        Run one aggregated search.

        Args:
            request: Normalized search parameters

        Returns:
            SearchResult with offers sorted ascending by price.total

        Raises:
            AggregationError: If the fallback generator itself fails
        """
        start_time = datetime.now()
        route = f"{request.origin}→{request.destination}"
        logger.info(
            f"Searching {route} {request.departure_date} - {request.return_date} "
            f"({request.adults} adults, {request.infants} infants)"
        )

        # Settled join: one provider's exception never cancels the others
        results = await asyncio.gather(
            *(self._run_provider(provider, request) for provider in self.providers),
            return_exceptions=True,
        )

        merged: List[FlightOffer] = []
        counts: Dict[str, int] = {tag.value: 0 for tag in REAL_PROVIDER_TAGS}
        successful = 0
        failed = 0

        for provider, result in zip(self.providers, results):
            name = provider.name.value
            if isinstance(result, asyncio.TimeoutError):
                logger.error(f"✗ {name} timed out after {self.timeout}s ({route})")
                failed += 1
            elif isinstance(result, BaseException):
                logger.error(f"✗ {name} failed ({route}): {result!r}")
                failed += 1
            else:
                logger.info(f"✓ {name} completed {route}: {len(result)} offers")
                successful += 1
                counts[name] = counts.get(name, 0) + len(result)
                merged.extend(result)

        offers = self._deduplicate(merged)

        elapsed_time = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Search completed: {successful} successful, {failed} failed, "
            f"{len(offers)} unique offers, {elapsed_time:.2f}s elapsed"
        )

        if self.providers and failed == len(self.providers):
            logger.warning(f"All {failed} providers failed for {route}")

        used_fallback = False
        if not offers and self.enable_mock_fallback:
            logger.warning(f"No provider offers for {route}, using mock fallback")
            try:
                offers = list(self.mock_generator(request))
            except Exception as e:
                logger.error(f"Mock fallback failed for {route}: {e}", exc_info=True)
                raise AggregationError(
                    "Failed to generate fallback offers",
                    stage="fallback",
                    original_error=e,
                ) from e
            used_fallback = True

        # sorted() is stable, so equal totals keep provider order
        offers = sorted(offers, key=lambda offer: offer.price.total)

        sources = SourceAvailability(
            **{tag.value: counts[tag.value] > 0 for tag in REAL_PROVIDER_TAGS},
            mock=used_fallback,
        )

        return SearchResult(
            offers=offers,
            searched_at=datetime.now(timezone.utc),
            params=request,
            sources=sources,
            counts=counts,
        )

    async def search_many(
        self,
        origin: str,
        destinations: Sequence[str],
        departure_date: date,
        return_date: date,
        adults: int = 2,
        infants: int = 0,
    ) -> Dict[str, SearchResult]:
        """
        Run one aggregated search per destination, concurrently.

        Args:
            origin: Origin IATA code
            destinations: Destination IATA codes (duplicates are searched once)
            departure_date: Outbound date
            return_date: Return date
            adults: Number of adults
            infants: Number of lap infants

        Returns:
            Dict mapping destination code to its SearchResult, in input order
        """
        requests: Dict[str, SearchRequest] = {}
        for destination in destinations:
            req = SearchRequest(
                origin=origin,
                destination=destination,
                departure_date=departure_date,
                return_date=return_date,
                adults=adults,
                infants=infants,
            )
            requests.setdefault(req.destination, req)

        logger.info(
            f"Multi-destination search from {origin}: {', '.join(requests) or 'none'}"
        )

        results = await asyncio.gather(*(self.search(req) for req in requests.values()))
        return dict(zip(requests.keys(), results))

    @staticmethod
    def _deduplicate(offers: List[FlightOffer]) -> List[FlightOffer]:
        """Drop offers whose id was already seen; the first occurrence wins."""
        seen = set()
        unique: List[FlightOffer] = []
        for offer in offers:
            if offer.id in seen:
                logger.debug(f"Dropping duplicate offer {offer.id}")
                continue
            seen.add(offer.id)
            unique.append(offer)
        return unique
