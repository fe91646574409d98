"""
FastAPI Request/Response Models for the FlyndMe API
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import date as DateType


class FlightOffer(BaseModel):
    """Cheapest known fare from one origin to one destination"""
    origin: str = Field(..., description="Origin airport IATA code")
    destination: str = Field(..., description="Destination airport IATA code")
    departure_date: Optional[DateType] = Field(default=None, description="Departure date")
    return_date: Optional[DateType] = Field(default=None, description="Return date, absent for one-way fares")
    price: float = Field(..., ge=0, description="Total fare for one traveler")
    currency: str = Field(default="EUR", description="Currency code")

    class Config:
        json_schema_extra = {
            "example": {
                "origin": "MAD",
                "destination": "LIS",
                "departure_date": "2025-06-12",
                "return_date": "2025-06-19",
                "price": 84.3,
                "currency": "EUR"
            }
        }


class DestinationAggregate(BaseModel):
    """A destination reachable from every requested origin, with combined cost"""
    destination: str = Field(..., description="Destination airport IATA code")
    flights: List[FlightOffer] = Field(..., min_items=1, description="One offer per requested origin")
    total_cost: float = Field(..., ge=0, description="Sum of the fares of all travelers")
    average_cost_per_traveler: float = Field(..., ge=0, description="Total cost divided by number of origins")
    currency: str = Field(default="EUR", description="Currency code")

    @property
    def origins(self) -> set:
        return {flight.origin for flight in self.flights}

    class Config:
        json_schema_extra = {
            "example": {
                "destination": "LIS",
                "flights": [
                    {
                        "origin": "MAD",
                        "destination": "LIS",
                        "departure_date": "2025-06-12",
                        "return_date": "2025-06-19",
                        "price": 84.3,
                        "currency": "EUR"
                    },
                    {
                        "origin": "BCN",
                        "destination": "LIS",
                        "departure_date": "2025-06-12",
                        "return_date": "2025-06-19",
                        "price": 112.0,
                        "currency": "EUR"
                    }
                ],
                "total_cost": 196.3,
                "average_cost_per_traveler": 98.15,
                "currency": "EUR"
            }
        }


class MultiOriginQuery(BaseModel):
    """Cheapest common destination request"""
    origins: List[str] = Field(..., min_items=1, description="Origin airport IATA codes, one per traveler")
    departure_date: DateType = Field(..., description="Departure date (YYYY-MM-DD)")
    return_date: Optional[DateType] = Field(default=None, description="Return date (YYYY-MM-DD)")
    non_stop: bool = Field(default=False, description="Only direct flights")
    max_price: Optional[int] = Field(default=None, ge=1, description="Maximum fare per traveler")
    limit: Optional[int] = Field(default=None, ge=1, le=100, description="Maximum destinations to return")

    @validator('origins', pre=True)
    def normalise_origins(cls, v):
        """Upper-case codes, split comma lists and drop repeats keeping order"""
        if isinstance(v, str):
            v = [v]
        codes = []
        for raw in v:
            for code in str(raw).split(','):
                code = code.strip().upper()
                if code and code not in codes:
                    codes.append(code)
        return codes

    @validator('origins')
    def validate_iata_codes(cls, v):
        """Each origin must be a 3-letter IATA code"""
        for code in v:
            if len(code) != 3 or not code.isalpha():
                raise ValueError(f"Invalid airport code: {code}")
        return v

    @validator('return_date')
    def validate_return_after_departure(cls, v, values):
        """Return cannot be before departure"""
        if v is not None and 'departure_date' in values and v < values['departure_date']:
            raise ValueError('Return date must not be before departure date')
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "origins": ["MAD", "BCN"],
                "departure_date": "2025-06-12",
                "return_date": "2025-06-19",
                "non_stop": False
            }
        }


class ErrorResponse(BaseModel):
    """Error response model"""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(default=None, description="Additional error details")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "VALIDATION_ERROR",
                "message": "Invalid date format, expected YYYY-MM-DD",
                "details": {
                    "field": "departureDate",
                    "value": "12/06/2025"
                }
            }
        }
