"""
modules/validation package — data quality guards before any store write
or generation call.
"""
from modules.validation.request_validator import (
    ValidationResult,
    is_valid_month,
    is_valid_time,
    parse_id,
    validate_activity_assignment,
    validate_day_plan,
    validate_recommendation_request,
    validate_trip_request,
)

__all__ = [
    "ValidationResult",
    "is_valid_month",
    "is_valid_time",
    "parse_id",
    "validate_activity_assignment",
    "validate_day_plan",
    "validate_recommendation_request",
    "validate_trip_request",
]
