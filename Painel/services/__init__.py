from .base import ServiceError
from .catalog import CategoriesService, ProductsService
from .companies import CompaniesService
from .couriers import CouriersService
from .customers import ClientsService
from .establishments import EstablishmentsService
from .orders import DELIVERY_METHODS, ORDER_STATUSES, PAYMENT_METHODS, OrdersService
from .staff import (
    AttendantsService,
    UsersService,
    UserTypesService,
    activate_invite,
    validate_invite,
)

__all__ = [
    "AttendantsService",
    "CategoriesService",
    "ClientsService",
    "CompaniesService",
    "CouriersService",
    "DELIVERY_METHODS",
    "EstablishmentsService",
    "ORDER_STATUSES",
    "OrdersService",
    "PAYMENT_METHODS",
    "ProductsService",
    "ServiceError",
    "UserTypesService",
    "UsersService",
    "activate_invite",
    "validate_invite",
]
