"""FAIS Core - Financial affidavit computation and court-form assembly."""

__version__ = "0.1.0"

from .exceptions import (
    ConfigurationError,
    FaisError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    TemplateMissingError,
    UnexpectedError,
)
from .income import IncomeCalculator, PayFrequency, annual_multiplier
from .models import AffidavitDocument, AffidavitSummary, FormKey, Principal, Role
from .resolver import AffidavitTargetResolver
from .service import AffidavitService, LineItemService

__all__ = [
    "AffidavitDocument",
    "AffidavitService",
    "AffidavitSummary",
    "AffidavitTargetResolver",
    "ConfigurationError",
    "FaisError",
    "ForbiddenError",
    "FormKey",
    "IncomeCalculator",
    "InvalidInputError",
    "LineItemService",
    "NotFoundError",
    "PayFrequency",
    "Principal",
    "Role",
    "TemplateMissingError",
    "UnexpectedError",
    "annual_multiplier",
]
