import pytest
import requests
from unittest.mock import Mock
from datetime import date

from flyndme.core.exceptions import AmadeusAuthError, AmadeusRequestError, RateLimitedError
from flyndme.services.amadeus_client import AmadeusClient


def make_response(status_code=200, body=None):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = body if body is not None else {}
    response.text = ""
    if response.ok:
        response.raise_for_status.return_value = None
    else:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code} error")
    return response


class TestAmadeusClient:

    @pytest.fixture
    def session(self):
        return Mock(spec=requests.Session)

    @pytest.fixture
    def client(self, session):
        return AmadeusClient(
            api_key="key",
            api_secret="secret",
            base_url="https://amadeus.test/",
            timeout=5,
            session=session
        )

    def test_get_access_token_success(self, client, session):
        session.post.return_value = make_response(body={"access_token": "abc123", "expires_in": 1799})

        token = client.get_access_token()

        assert token == "abc123"
        args, kwargs = session.post.call_args
        assert args[0] == "https://amadeus.test/v1/security/oauth2/token"
        assert kwargs["data"] == {
            "grant_type": "client_credentials",
            "client_id": "key",
            "client_secret": "secret"
        }
        assert kwargs["timeout"] == 5

    def test_get_access_token_http_error(self, client, session):
        session.post.return_value = make_response(status_code=401, body={"error": "invalid_client"})

        with pytest.raises(AmadeusAuthError):
            client.get_access_token()

    def test_get_access_token_network_error(self, client, session):
        session.post.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(AmadeusAuthError):
            client.get_access_token()

    def test_get_access_token_missing_token(self, client, session):
        session.post.return_value = make_response(body={"state": "approved"})

        with pytest.raises(AmadeusAuthError):
            client.get_access_token()

    @pytest.mark.parametrize("body", [[], ["abc123"], "abc123", 42])
    def test_get_access_token_non_object_body(self, client, session, body):
        session.post.return_value = make_response(body=body)

        with pytest.raises(AmadeusAuthError):
            client.get_access_token()

    def test_get_access_token_without_credentials(self, session):
        client = AmadeusClient(api_key="", api_secret="", session=session)

        with pytest.raises(AmadeusAuthError):
            client.get_access_token()
        session.post.assert_not_called()

    def test_flight_destinations_round_trip_params(self, client, session):
        session.get.return_value = make_response(body={"data": []})

        client.get_flight_destinations(
            "tok", "MAD",
            departure_date=date(2025, 6, 12),
            return_date=date(2025, 6, 19),
            non_stop=True,
            max_price=300
        )

        args, kwargs = session.get.call_args
        assert args[0] == "https://amadeus.test/v1/shopping/flight-destinations"
        assert kwargs["headers"] == {"Authorization": "Bearer tok"}
        assert kwargs["params"] == {
            "origin": "MAD",
            "nonStop": "true",
            "departureDate": "2025-06-12",
            "duration": 7,
            "maxPrice": 300
        }

    def test_flight_destinations_one_way_params(self, client, session):
        session.get.return_value = make_response(body={"data": []})

        client.get_flight_destinations("tok", "MAD", departure_date=date(2025, 6, 12))

        params = session.get.call_args[1]["params"]
        assert params["oneWay"] == "true"
        assert params["nonStop"] == "false"
        assert "duration" not in params

    def test_rate_limit_raises_rate_limited_error(self, client, session):
        session.get.return_value = make_response(status_code=429)

        with pytest.raises(RateLimitedError) as exc_info:
            client.get_flight_destinations("tok", "MAD")
        assert exc_info.value.status_code == 429

    def test_server_error_raises_request_error(self, client, session):
        session.get.return_value = make_response(status_code=500, body={"errors": []})

        with pytest.raises(AmadeusRequestError) as exc_info:
            client.get_flight_destinations("tok", "MAD")
        assert not isinstance(exc_info.value, RateLimitedError)
        assert exc_info.value.status_code == 500

    def test_transport_error_raises_request_error(self, client, session):
        session.get.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(AmadeusRequestError):
            client.get_flight_destinations("tok", "MAD")

    def test_search_flight_offers_params(self, client, session):
        session.get.return_value = make_response(body={"data": []})

        client.search_flight_offers(
            "tok", "MAD", "LIS", date(2025, 6, 12),
            return_date=date(2025, 6, 19), adults=2
        )

        args, kwargs = session.get.call_args
        assert args[0] == "https://amadeus.test/v2/shopping/flight-offers"
        params = kwargs["params"]
        assert params["originLocationCode"] == "MAD"
        assert params["destinationLocationCode"] == "LIS"
        assert params["departureDate"] == "2025-06-12"
        assert params["returnDate"] == "2025-06-19"
        assert params["adults"] == 2
