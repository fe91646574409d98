"""
Helper utilities for multi-origin destination aggregation
"""
import logging
from typing import List, Dict, Optional, Iterable, Any
from datetime import date
from collections import defaultdict

from flyndme.models import FlightOffer, DestinationAggregate

logger = logging.getLogger(__name__)


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse the date part of an Amadeus date or datetime string"""
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def parse_destination_records(
    payload: Optional[Dict[str, Any]],
    default_currency: str = "EUR",
    origin: Optional[str] = None
) -> List[FlightOffer]:
    """
    Convert a flight-destinations response into FlightOffers.
    
    Args:
        payload: Decoded JSON body ({"data": [...], "meta": {...}})
        default_currency: Used when the response carries no currency
        origin: Queried origin, overrides the code echoed in each record
        
    Returns:
        List of FlightOffer, records without origin/destination/price skipped
    """
    if not isinstance(payload, dict):
        return []
    
    meta = payload.get("meta")
    if not isinstance(meta, dict):
        meta = {}
    currency = meta.get("currency") or default_currency
    offers = []
    for record in _records(payload):
        try:
            offers.append(FlightOffer(
                origin=origin or record["origin"].upper(),
                destination=record["destination"].upper(),
                departure_date=parse_date(record.get("departureDate")),
                return_date=parse_date(record.get("returnDate")),
                price=float(record["price"]["total"]),
                currency=currency
            ))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.debug("Skipping malformed destination record %r: %s", record, e)
    return offers


def parse_offer_records(
    payload: Optional[Dict[str, Any]],
    origin: str,
    destination: str,
    default_currency: str = "EUR"
) -> List[FlightOffer]:
    """
    Convert a flight-offers response into FlightOffers.
    
    The outbound date comes from the first segment of the first itinerary,
    the return date from the first segment of the second one.
    """
    if not isinstance(payload, dict):
        return []
    
    offers = []
    for record in _records(payload):
        try:
            itineraries = record.get("itineraries") or []
            price = record["price"]
            amount = price.get("grandTotal") or price["total"]
            offers.append(FlightOffer(
                origin=origin,
                destination=destination,
                departure_date=_itinerary_date(itineraries, 0),
                return_date=_itinerary_date(itineraries, 1),
                price=float(amount),
                currency=price.get("currency") or default_currency
            ))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.debug("Skipping malformed flight offer: %s", e)
    return offers


def _records(payload: Dict[str, Any]) -> list:
    data = payload.get("data")
    return data if isinstance(data, list) else []


def _itinerary_date(itineraries: list, index: int) -> Optional[date]:
    if len(itineraries) <= index:
        return None
    segments = itineraries[index].get("segments") or []
    if not segments:
        return None
    return parse_date(segments[0]["departure"]["at"])


def cheapest_per_destination(offers: Iterable[FlightOffer]) -> List[FlightOffer]:
    """
    Keep only the cheapest offer for each destination of a single origin.
    Offers back to the origin itself are dropped.
    """
    cheapest: Dict[str, FlightOffer] = {}
    for offer in offers:
        if offer.destination == offer.origin:
            continue
        current = cheapest.get(offer.destination)
        if current is None or offer.price < current.price:
            cheapest[offer.destination] = offer
    return list(cheapest.values())


def group_by_destination(offers: Iterable[FlightOffer]) -> Dict[str, List[FlightOffer]]:
    """
    Index offers by destination code for coverage checks.
    
    Returns:
        Dictionary mapping destination to the offers flying there
    """
    groups = defaultdict(list)
    for offer in offers:
        groups[offer.destination].append(offer)
    return groups


def filter_full_coverage(
    groups: Dict[str, List[FlightOffer]],
    origins: List[str]
) -> Dict[str, List[FlightOffer]]:
    """
    Retain destinations served from every requested origin and nothing else.
    
    Args:
        groups: Offers grouped by destination
        origins: Full requested origin list
        
    Returns:
        Subset of groups whose origin set equals the requested set
    """
    required = set(origins)
    covered = {}
    for destination, offers in groups.items():
        if {offer.origin for offer in offers} == required:
            covered[destination] = offers
    return covered


def drop_mixed_currency(groups: Dict[str, List[FlightOffer]]) -> Dict[str, List[FlightOffer]]:
    """
    Drop destinations whose fares are quoted in more than one currency.
    Fares are never converted, so such totals would be meaningless.
    """
    kept = {}
    for destination, offers in groups.items():
        currencies = {offer.currency for offer in offers}
        if len(currencies) > 1:
            logger.warning(
                "Skipping destination %s: fares in mixed currencies %s",
                destination, ",".join(sorted(currencies))
            )
            continue
        kept[destination] = offers
    return kept


def build_aggregate(
    destination: str,
    offers: List[FlightOffer],
    origins: List[str],
    default_currency: str = "EUR"
) -> DestinationAggregate:
    """
    Sum one offer per origin into a DestinationAggregate.
    
    Offers are ordered as the origins were requested; when an origin has
    several offers the cheapest one counts.
    """
    by_origin: Dict[str, FlightOffer] = {}
    for offer in offers:
        current = by_origin.get(offer.origin)
        if current is None or offer.price < current.price:
            by_origin[offer.origin] = offer
    
    flights = [by_origin[origin] for origin in origins if origin in by_origin]
    total = sum(flight.price for flight in flights)
    currency = flights[0].currency if flights else default_currency
    
    return DestinationAggregate(
        destination=destination,
        flights=flights,
        total_cost=round(total, 2),
        average_cost_per_traveler=round(total / len(origins), 2),
        currency=currency
    )


def rank_destinations(aggregates: List[DestinationAggregate]) -> List[DestinationAggregate]:
    """Cheapest total first, destination code breaks ties"""
    return sorted(aggregates, key=lambda x: (x.total_cost, x.destination))
