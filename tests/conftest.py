import pytest
from unittest.mock import Mock

from flyndme.core.exceptions import RateLimitedError


def destinations_payload(origin, fares, currency="EUR", departure="2025-06-12", ret=None):
    """Build a flight-destinations body from {destination: price}"""
    data = []
    for destination, price in fares.items():
        record = {
            "type": "flight-destination",
            "origin": origin,
            "destination": destination,
            "departureDate": departure,
            "price": {"total": f"{price:.2f}"}
        }
        if ret:
            record["returnDate"] = ret
        data.append(record)
    return {"data": data, "meta": {"currency": currency}}


class FakeAmadeusClient:
    """
    Stand-in for AmadeusClient.

    responses maps an origin to a list consumed one item per call; an
    item is either a payload dict or an exception instance to raise.
    """

    def __init__(self, responses=None, token="test-token", token_error=None):
        self.responses = {k: list(v) for k, v in (responses or {}).items()}
        self.token = token
        self.token_error = token_error
        self.calls = []
        self.offer_calls = []
        self.offers_payload = {"data": []}

    def get_access_token(self):
        if self.token_error:
            raise self.token_error
        return self.token

    def get_flight_destinations(self, token, origin, departure_date=None,
                                return_date=None, non_stop=False, max_price=None):
        self.calls.append({
            "token": token,
            "origin": origin,
            "departure_date": departure_date,
            "return_date": return_date,
            "non_stop": non_stop,
            "max_price": max_price
        })
        queue = self.responses.get(origin)
        if not queue:
            return {"data": []}
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def search_flight_offers(self, token, origin, destination, departure_date,
                             return_date=None, adults=1, non_stop=False, max_results=5):
        self.offer_calls.append({
            "origin": origin,
            "destination": destination,
            "departure_date": departure_date,
            "return_date": return_date,
            "adults": adults,
            "non_stop": non_stop
        })
        return self.offers_payload


@pytest.fixture
def sleeps():
    """Records backoff delays instead of sleeping"""
    return []


@pytest.fixture
def fake_sleep(sleeps):
    return Mock(side_effect=sleeps.append)


@pytest.fixture
def rate_limited():
    return RateLimitedError()
