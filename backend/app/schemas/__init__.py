from app.schemas.booking import (
    BookingCreate, BookingUpdate, BookingStatusUpdate, BookingResponse, BookingCreateResponse,
)
from app.schemas.availability import (
    ResourceAvailability, EditAvailabilityRequest, EditAvailabilityResponse, OccupancyDay,
)
from app.schemas.pricing import Extra, PriceQuoteRequest, PriceBreakdown, RateSource
from app.schemas.customer import CustomerCreate, CustomerResponse
from app.schemas.block import BlockCreate, BlockResponse

__all__ = [
    "BookingCreate", "BookingUpdate", "BookingStatusUpdate", "BookingResponse", "BookingCreateResponse",
    "ResourceAvailability", "EditAvailabilityRequest", "EditAvailabilityResponse", "OccupancyDay",
    "Extra", "PriceQuoteRequest", "PriceBreakdown", "RateSource",
    "CustomerCreate", "CustomerResponse",
    "BlockCreate", "BlockResponse",
]
