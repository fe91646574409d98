"""
Flight API endpoints
Cheapest common destination for several origins, plus single-origin lookups
"""

import logging
import re
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError

from flyndme.models import FlightOffer, DestinationAggregate, MultiOriginQuery, ErrorResponse
from flyndme.core import settings, AmadeusAuthError, AmadeusRequestError
from flyndme.services import CheapestDestinationService
from .dependencies import get_destination_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/flights", tags=["flights"])

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    500: {"model": ErrorResponse, "description": "Token fetch failed or internal error"}
}


def _error(status_code: int, error: str, message: str, details: Optional[dict] = None) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"error": error, "message": message, "details": details or {}}
    )


def parse_iso_date(value: Optional[str], field: str, required: bool = False) -> Optional[date]:
    """
    Parse a YYYY-MM-DD query value.

    Raises:
        HTTPException: 400 when missing (and required) or malformed
    """
    if value is None or value == "":
        if required:
            raise _error(
                status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR",
                f"{field} is required", {"field": field}
            )
        return None
    try:
        if not ISO_DATE.match(value):
            raise ValueError(value)
        return date.fromisoformat(value)
    except ValueError:
        raise _error(
            status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR",
            "Invalid date format, expected YYYY-MM-DD",
            {"field": field, "value": value}
        )


def _validate_iata(code: str, field: str) -> str:
    code = code.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise _error(
            status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR",
            f"Invalid airport code: {code}", {"field": field, "value": code}
        )
    return code


def _upstream_error(e: AmadeusRequestError) -> HTTPException:
    return _error(
        status.HTTP_502_BAD_GATEWAY, "UPSTREAM_ERROR",
        "Amadeus could not answer the request",
        {"error": e.message, "status_code": e.status_code}
    )


def _auth_error(e: AmadeusAuthError) -> HTTPException:
    return _error(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "AUTH_ERROR",
        "Could not obtain Amadeus access token",
        {"error": e.message}
    )


def _internal_error(e: Exception) -> HTTPException:
    logger.exception("Unhandled error while processing flight request")
    return _error(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR",
        "An internal error occurred while processing the request",
        {"error": str(e)}
    )


@router.get(
    "/health",
    summary="Health check",
    description="Check if the flights API is healthy"
)
async def health_check():
    """Simple health check endpoint"""
    return {
        "status": "healthy",
        "service": "flyndme-flights-api",
        "version": settings.APP_VERSION
    }


@router.get(
    "/cheapest-destinations",
    response_model=List[DestinationAggregate],
    responses=ERROR_RESPONSES,
    summary="Cheapest common destination",
    description="Destinations reachable from every origin, ranked by total fare"
)
def cheapest_destinations(
    origins: Optional[List[str]] = Query(default=None, description="Origin IATA codes, comma separated or repeated"),
    departure_date: Optional[str] = Query(default=None, alias="departureDate", description="YYYY-MM-DD"),
    return_date: Optional[str] = Query(default=None, alias="returnDate", description="YYYY-MM-DD"),
    non_stop: bool = Query(default=False, alias="nonStop", description="Direct flights only"),
    max_price: Optional[int] = Query(default=None, alias="maxPrice", ge=1, description="Maximum fare per traveler"),
    limit: Optional[int] = Query(default=None, ge=1, le=100, description="Maximum destinations to return"),
    service: CheapestDestinationService = Depends(get_destination_service)
) -> List[DestinationAggregate]:
    """
    Rank destinations for a group departing from different airports.

    - **origins**: one IATA code per traveler
    - **departureDate**: outbound date
    - **returnDate**: optional inbound date, one-way when omitted
    - **nonStop**: restrict to direct flights

    Origins whose upstream query fails are left out of the computation,
    which removes every destination from the result.
    """
    departure = parse_iso_date(departure_date, "departureDate", required=True)
    ret = parse_iso_date(return_date, "returnDate")

    try:
        query = MultiOriginQuery(
            origins=origins or [],
            departure_date=departure,
            return_date=ret,
            non_stop=non_stop,
            max_price=max_price,
            limit=limit
        )
    except ValidationError as e:
        raise _error(
            status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR",
            "Invalid search parameters",
            {"errors": [err["msg"] for err in e.errors()]}
        )

    if len(query.origins) > settings.MAX_ORIGINS:
        raise _error(
            status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR",
            f"At most {settings.MAX_ORIGINS} origins are supported",
            {"field": "origins", "count": len(query.origins)}
        )

    try:
        return service.find_cheapest_destinations(query)
    except HTTPException:
        raise
    except AmadeusAuthError as e:
        raise _auth_error(e)
    except Exception as e:
        raise _internal_error(e)


@router.get(
    "/offers",
    response_model=List[FlightOffer],
    responses={**ERROR_RESPONSES, 502: {"model": ErrorResponse, "description": "Upstream error"}},
    summary="Flight offers for one route",
    description="Priced offers between one origin and one destination"
)
def flight_offers(
    origin: str = Query(..., description="Origin IATA code"),
    destination: str = Query(..., description="Destination IATA code"),
    departure_date: Optional[str] = Query(default=None, alias="departureDate", description="YYYY-MM-DD"),
    return_date: Optional[str] = Query(default=None, alias="returnDate", description="YYYY-MM-DD"),
    adults: int = Query(default=1, ge=1, le=9, description="Number of adult travelers"),
    non_stop: bool = Query(default=False, alias="nonStop", description="Direct flights only"),
    service: CheapestDestinationService = Depends(get_destination_service)
) -> List[FlightOffer]:
    """Confirm prices for a destination picked from the ranking"""
    origin = _validate_iata(origin, "origin")
    destination = _validate_iata(destination, "destination")
    departure = parse_iso_date(departure_date, "departureDate", required=True)
    ret = parse_iso_date(return_date, "returnDate")
    if ret and ret < departure:
        raise _error(
            status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR",
            "Return date must not be before departure date",
            {"field": "returnDate", "value": return_date}
        )

    try:
        return service.flight_offers(
            origin, destination, departure,
            return_date=ret, adults=adults, non_stop=non_stop
        )
    except HTTPException:
        raise
    except AmadeusAuthError as e:
        raise _auth_error(e)
    except AmadeusRequestError as e:
        raise _upstream_error(e)
    except Exception as e:
        raise _internal_error(e)


@router.get(
    "/{origin}",
    response_model=List[FlightOffer],
    responses={**ERROR_RESPONSES, 502: {"model": ErrorResponse, "description": "Upstream error"}},
    summary="Destinations from one origin",
    description="Cheapest destinations from a single airport"
)
def destinations_from_origin(
    origin: str,
    departure_date: Optional[str] = Query(default=None, alias="departureDate", description="YYYY-MM-DD"),
    return_date: Optional[str] = Query(default=None, alias="returnDate", description="YYYY-MM-DD"),
    non_stop: bool = Query(default=False, alias="nonStop", description="Direct flights only"),
    service: CheapestDestinationService = Depends(get_destination_service)
) -> List[FlightOffer]:
    """Cheapest destinations from one airport, cheapest first"""
    origin = _validate_iata(origin, "origin")
    departure = parse_iso_date(departure_date, "departureDate")
    ret = parse_iso_date(return_date, "returnDate")
    if ret and (departure is None or ret < departure):
        raise _error(
            status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR",
            "Return date requires a departure date on or before it",
            {"field": "returnDate", "value": return_date}
        )

    try:
        return service.destinations_for_origin(
            origin, departure_date=departure, return_date=ret, non_stop=non_stop
        )
    except HTTPException:
        raise
    except AmadeusAuthError as e:
        raise _auth_error(e)
    except AmadeusRequestError as e:
        raise _upstream_error(e)
    except Exception as e:
        raise _internal_error(e)
