"""
Rate-limited fetch with retry for per-origin upstream queries
"""
import logging
import time
from typing import Callable, List, Optional, TypeVar
from datetime import date

from flyndme.core.config import settings
from flyndme.core.exceptions import FlyndMeError, RateLimitedError
from flyndme.models import FlightOffer
from .helpers import parse_destination_records

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(attempt: int, base_delay: float) -> float:
    """Exponential backoff: base, 2*base, 4*base..."""
    return base_delay * (2 ** attempt)


def call_with_retry(
    call: Callable[[], T],
    max_retries: Optional[int] = None,
    base_delay: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep
) -> T:
    """
    Run call(), retrying only on RateLimitedError.
    
    Args:
        call: Zero-argument callable performing one upstream request
        max_retries: Retries after the first attempt
        base_delay: Delay before the first retry, in seconds
        sleep: Sleep function, injectable for tests
        
    Returns:
        Whatever call() returns
        
    Raises:
        RateLimitedError: still rate limited after max_retries retries
        Any other exception raised by call(), unretried
    """
    if max_retries is None:
        max_retries = settings.AMADEUS_MAX_RETRIES
    if base_delay is None:
        base_delay = settings.AMADEUS_RETRY_BASE_DELAY
    
    attempt = 0
    while True:
        try:
            return call()
        except RateLimitedError:
            if attempt >= max_retries:
                raise
            delay = backoff_delay(attempt, base_delay)
            logger.info(
                "Rate limited by Amadeus, retry %d/%d in %.1fs",
                attempt + 1, max_retries, delay
            )
            sleep(delay)
            attempt += 1


def fetch_with_retry(
    client,
    token: str,
    origin: str,
    departure_date: Optional[date] = None,
    return_date: Optional[date] = None,
    non_stop: bool = False,
    max_price: Optional[int] = None,
    max_retries: Optional[int] = None,
    base_delay: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep
) -> List[FlightOffer]:
    """
    Fetch candidate destinations for one origin.
    
    Never raises for upstream problems: exhausted retries, any other
    request failure and empty responses all yield an empty list, so one
    bad origin cannot abort a multi-origin aggregation.
    """
    try:
        payload = call_with_retry(
            lambda: client.get_flight_destinations(
                token,
                origin,
                departure_date=departure_date,
                return_date=return_date,
                non_stop=non_stop,
                max_price=max_price
            ),
            max_retries=max_retries,
            base_delay=base_delay,
            sleep=sleep
        )
    except RateLimitedError:
        logger.warning("Skipping origin %s: still rate limited after retries", origin)
        return []
    except FlyndMeError as e:
        logger.warning("Skipping origin %s: %s", origin, e.message)
        return []
    
    offers = parse_destination_records(payload, settings.DEFAULT_CURRENCY, origin=origin)
    if not offers:
        logger.warning("Skipping origin %s: no destinations returned", origin)
    return offers
