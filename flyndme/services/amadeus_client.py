"""
Amadeus Self-Service API client
Token exchange, flight inspiration (cheapest destinations) and flight offers
"""
import logging
from typing import Optional, Dict, Any
from datetime import date

import requests

from flyndme.core.config import settings
from flyndme.core.exceptions import (
    AmadeusAuthError, AmadeusRequestError, RateLimitedError
)

logger = logging.getLogger(__name__)


class AmadeusClient:
    """
    Thin wrapper around the Amadeus REST endpoints.

    Every method returns the decoded JSON body. HTTP 429 is raised as
    RateLimitedError so callers can decide whether to back off and retry.
    """

    TOKEN_PATH = "/v1/security/oauth2/token"
    DESTINATIONS_PATH = "/v1/shopping/flight-destinations"
    OFFERS_PATH = "/v2/shopping/flight-offers"

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        self.api_key = api_key if api_key is not None else settings.AMADEUS_API_KEY
        self.api_secret = api_secret if api_secret is not None else settings.AMADEUS_API_SECRET
        self.base_url = (base_url or settings.AMADEUS_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.AMADEUS_TIMEOUT
        self.session = session or requests.Session()

    def get_access_token(self) -> str:
        """
        Exchange the API key and secret for a bearer token.

        Raises:
            AmadeusAuthError: credentials missing or the exchange failed
        """
        if not self.api_key or not self.api_secret:
            raise AmadeusAuthError("Amadeus credentials are not configured")

        data = {
            "grant_type": "client_credentials",
            "client_id": self.api_key,
            "client_secret": self.api_secret
        }

        try:
            response = self.session.post(
                f"{self.base_url}{self.TOKEN_PATH}",
                data=data,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.timeout
            )
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.RequestException as e:
            logger.error("Amadeus token request failed: %s", e)
            raise AmadeusAuthError(
                "Could not obtain Amadeus access token",
                details={"error": str(e)}
            ) from e
        except ValueError as e:
            logger.error("Amadeus token response is not JSON: %s", e)
            raise AmadeusAuthError("Amadeus token response is not valid JSON") from e

        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            raise AmadeusAuthError("Amadeus token response has no access_token")

        logger.debug("Obtained Amadeus access token")
        return token

    def get_flight_destinations(
        self,
        token: str,
        origin: str,
        departure_date: Optional[date] = None,
        return_date: Optional[date] = None,
        non_stop: bool = False,
        max_price: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Cheapest destinations from one origin (flight inspiration search).

        A return date is sent as a trip duration in days, which is how the
        endpoint expresses round trips.
        """
        params: Dict[str, Any] = {
            "origin": origin,
            "nonStop": "true" if non_stop else "false"
        }
        if departure_date:
            params["departureDate"] = departure_date.isoformat()
            if return_date:
                params["duration"] = (return_date - departure_date).days
            else:
                params["oneWay"] = "true"
        if max_price:
            params["maxPrice"] = max_price

        return self._get(self.DESTINATIONS_PATH, token, params)

    def search_flight_offers(
        self,
        token: str,
        origin: str,
        destination: str,
        departure_date: date,
        return_date: Optional[date] = None,
        adults: int = 1,
        non_stop: bool = False,
        max_results: int = 5
    ) -> Dict[str, Any]:
        """Bookable offers for one origin/destination pair"""
        params: Dict[str, Any] = {
            "originLocationCode": origin,
            "destinationLocationCode": destination,
            "departureDate": departure_date.isoformat(),
            "adults": adults,
            "nonStop": "true" if non_stop else "false",
            "currencyCode": settings.DEFAULT_CURRENCY,
            "max": max_results
        }
        if return_date:
            params["returnDate"] = return_date.isoformat()

        return self._get(self.OFFERS_PATH, token, params)

    def _get(self, path: str, token: str, params: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(
                url,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise AmadeusRequestError(
                f"Amadeus request to {path} failed: {e}",
                details={"params": params}
            ) from e

        if response.status_code == 429:
            raise RateLimitedError(details={"params": params})

        if not response.ok:
            raise AmadeusRequestError(
                f"Amadeus returned HTTP {response.status_code} for {path}",
                status_code=response.status_code,
                details={"params": params, "body": _safe_body(response)}
            )

        try:
            return response.json()
        except ValueError as e:
            raise AmadeusRequestError(
                f"Amadeus returned a non-JSON body for {path}",
                status_code=response.status_code
            ) from e


def _safe_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:500]
