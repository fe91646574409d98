"""
Cheapest Destination Service - Main entry point for destination searches
Runs the per-origin queries and combines them into ranked destinations
"""
import logging
import time
from typing import List, Optional, Callable
from datetime import date

from flyndme.models import FlightOffer, DestinationAggregate, MultiOriginQuery
from flyndme.core.config import settings
from flyndme.services.amadeus_client import AmadeusClient
from flyndme.services.aggregation import (
    fetch_with_retry,
    call_with_retry,
    parse_destination_records,
    parse_offer_records,
    cheapest_per_destination,
    group_by_destination,
    filter_full_coverage,
    drop_mixed_currency,
    build_aggregate,
    rank_destinations
)

logger = logging.getLogger(__name__)


class CheapestDestinationService:
    """
    Main destination search service.

    Finds destinations every traveler can reach from their own origin and
    ranks them by the combined fare. Origins are queried one at a time.
    """

    def __init__(
        self,
        client: Optional[AmadeusClient] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.client = client or AmadeusClient()
        self.sleep = sleep
        self.max_retries = settings.AMADEUS_MAX_RETRIES
        self.base_delay = settings.AMADEUS_RETRY_BASE_DELAY

    def find_cheapest_destinations(self, query: MultiOriginQuery) -> List[DestinationAggregate]:
        """
        Rank destinations reachable from all origins in the query.

        Raises:
            AmadeusAuthError: no access token could be obtained
        """
        origins = query.origins
        token = self.client.get_access_token()

        # Step 1: Query each origin, keeping its cheapest fare per destination
        all_offers: List[FlightOffer] = []
        for origin in origins:
            offers = fetch_with_retry(
                self.client,
                token,
                origin,
                departure_date=query.departure_date,
                return_date=query.return_date,
                non_stop=query.non_stop,
                max_price=query.max_price,
                max_retries=self.max_retries,
                base_delay=self.base_delay,
                sleep=self.sleep
            )
            all_offers.extend(cheapest_per_destination(offers))
            logger.info("Origin %s: %d candidate destinations", origin, len(offers))

        # Step 2: Keep destinations every origin can reach, quoted in one currency
        groups = group_by_destination(all_offers)
        covered = drop_mixed_currency(filter_full_coverage(groups, origins))

        # Step 3: Sum fares and rank
        aggregates = [
            build_aggregate(destination, offers, origins, settings.DEFAULT_CURRENCY)
            for destination, offers in covered.items()
        ]
        ranked = rank_destinations(aggregates)

        if query.limit:
            ranked = ranked[:query.limit]

        logger.info(
            "%d common destinations for origins %s",
            len(ranked), ",".join(origins)
        )
        return ranked

    def destinations_for_origin(
        self,
        origin: str,
        departure_date: Optional[date] = None,
        return_date: Optional[date] = None,
        non_stop: bool = False
    ) -> List[FlightOffer]:
        """
        Cheapest destinations from a single origin, cheapest first.

        Unlike the multi-origin search, upstream failures propagate.
        """
        origin = origin.upper()
        token = self.client.get_access_token()
        payload = call_with_retry(
            lambda: self.client.get_flight_destinations(
                token,
                origin,
                departure_date=departure_date,
                return_date=return_date,
                non_stop=non_stop
            ),
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            sleep=self.sleep
        )
        offers = parse_destination_records(payload, settings.DEFAULT_CURRENCY, origin=origin)
        return sorted(cheapest_per_destination(offers), key=lambda x: (x.price, x.destination))

    def flight_offers(
        self,
        origin: str,
        destination: str,
        departure_date: date,
        return_date: Optional[date] = None,
        adults: int = 1,
        non_stop: bool = False
    ) -> List[FlightOffer]:
        """Priced offers for one origin/destination pair, cheapest first"""
        origin = origin.upper()
        destination = destination.upper()
        token = self.client.get_access_token()
        payload = call_with_retry(
            lambda: self.client.search_flight_offers(
                token,
                origin,
                destination,
                departure_date,
                return_date=return_date,
                adults=adults,
                non_stop=non_stop
            ),
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            sleep=self.sleep
        )
        offers = parse_offer_records(payload, origin, destination, settings.DEFAULT_CURRENCY)
        return sorted(offers, key=lambda x: x.price)
