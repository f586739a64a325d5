from app.models.organization import Organization, OrganizationCurrency
from app.models.resource import ResourceCategory, ResourceType, Resource
from app.models.block import AdministrativeBlock
from app.models.tariff import Tariff
from app.models.customer import Customer
from app.models.booking import Booking, BookingResource, ResourceNight
from app.models.payment import Payment

__all__ = [
    "Organization", "OrganizationCurrency",
    "ResourceCategory", "ResourceType", "Resource",
    "AdministrativeBlock", "Tariff", "Customer",
    "Booking", "BookingResource", "ResourceNight", "Payment",
]
