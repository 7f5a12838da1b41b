# -*- coding: utf-8 -*-
"""
Step validation service for the onboarding wizard.

Validates accumulated onboarding data for each step without UI coupling.
All functions are pure: they never raise and never touch state, so they can
run on every keystroke when real-time validation is enabled.
"""

import re
from datetime import date
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlparse
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from models.onboarding import (
    AccommodationType, CURRENCY_CODES, GroupSize, OnboardingData, PersonalInfo,
    ProfileSetup, ProfileVisibility, TransportationType, TravelFrequency,
    TravelPreferences, TravelStyle, ValidationError, ValidationErrorCode,
    BudgetRange, Coordinates, UserLocation,
)

Code = ValidationErrorCode

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
BIO_MAX_LENGTH = 500
MIN_AGE = 13
MAX_AGE = 120
PHONE_MIN_DIGITS = 7
PHONE_MAX_DIGITS = 15
MAX_BUDGET = 1_000_000
MAX_INTERESTS = 20
MAX_INTEREST_LENGTH = 50
MAX_DESTINATIONS = 50
MAX_DESTINATION_LENGTH = 100
MAX_HANDLE_LENGTH = 30

_NAME_PATTERN = re.compile(r"^[a-zA-Z\s\-']+$")
_PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]+$")
_COUNTRY_PATTERN = re.compile(r"^[a-zA-Z\s\-']{2,50}$")
_CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")
_HANDLE_PATTERN = re.compile(r"^[a-zA-Z0-9_.]+$")


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _not_text(field: str, value: Any) -> Optional[ValidationError]:
    """Error for a raw non-str value kept by merge; None means not filled in."""
    if value is None:
        return None
    return ValidationError(field, f"{field} must be text", Code.INVALID_FORMAT)


# =============================================================================
# Field checks
# =============================================================================
# Each check returns the first problem with a single field, or None.

def check_required(field: str, value: Any) -> Optional[ValidationError]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return ValidationError(field, f"{field} is required", Code.REQUIRED)
    return None


def check_name(field: str, value: Any) -> Optional[ValidationError]:
    """Letters, spaces, hyphens and apostrophes; 2-50 characters."""
    if not isinstance(value, str):
        return _not_text(field, value)
    name = value.strip()
    if not name:
        return None
    if len(name) < NAME_MIN_LENGTH:
        return ValidationError(
            field, f"{field} must be at least {NAME_MIN_LENGTH} characters", Code.TOO_SHORT
        )
    if len(name) > NAME_MAX_LENGTH:
        return ValidationError(
            field, f"{field} must be no more than {NAME_MAX_LENGTH} characters", Code.TOO_LONG
        )
    if not _NAME_PATTERN.match(name):
        return ValidationError(
            field,
            "Name can only contain letters, spaces, hyphens, and apostrophes",
            Code.INVALID_FORMAT,
        )
    return None


def check_phone(field: str, value: Any) -> Optional[ValidationError]:
    if not isinstance(value, str):
        return _not_text(field, value)
    if not value.strip():
        return None
    phone = value.strip()
    if not _PHONE_PATTERN.match(phone):
        return ValidationError(field, "Please enter a valid phone number", Code.INVALID_PHONE)
    digits = re.sub(r"\D", "", phone)
    if not PHONE_MIN_DIGITS <= len(digits) <= PHONE_MAX_DIGITS:
        return ValidationError(
            field,
            f"Phone number must be between {PHONE_MIN_DIGITS} and {PHONE_MAX_DIGITS} digits",
            Code.INVALID_PHONE,
        )
    return None


def check_date_of_birth(field: str, value: Any,
                        today: Optional[date] = None) -> Optional[ValidationError]:
    if value is None:
        return None
    if not isinstance(value, date):
        return ValidationError(field, "Please enter a valid date", Code.INVALID_DATE)
    today = today or date.today()
    if value > today:
        return ValidationError(field, "Birth date cannot be in the future", Code.INVALID_DATE)
    age = today.year - value.year - ((today.month, today.day) < (value.month, value.day))
    if age < MIN_AGE:
        return ValidationError(field, f"You must be at least {MIN_AGE} years old", Code.INVALID_AGE)
    if age > MAX_AGE:
        return ValidationError(field, "Please enter a valid birth date", Code.INVALID_AGE)
    return None


def check_max_length(field: str, value: Any, limit: int) -> Optional[ValidationError]:
    if isinstance(value, str) and len(value.strip()) > limit:
        return ValidationError(
            field, f"{field} must be no more than {limit} characters", Code.TOO_LONG
        )
    return None


def check_country(field: str, value: Any) -> Optional[ValidationError]:
    if not isinstance(value, str):
        return _not_text(field, value)
    if not value.strip():
        return None
    if not _COUNTRY_PATTERN.match(value.strip()):
        return ValidationError(field, "Please enter a valid country name", Code.INVALID_FORMAT)
    return None


def check_timezone(field: str, value: Any) -> Optional[ValidationError]:
    if not isinstance(value, str):
        return _not_text(field, value)
    if not value.strip():
        return None
    try:
        ZoneInfo(value.strip())
    # Region directories such as "America" surface as OSError (IsADirectoryError)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return ValidationError(field, "Please enter a valid timezone", Code.INVALID_TIMEZONE)
    return None


def check_coordinates(field: str, value: Any) -> Optional[ValidationError]:
    if value is None:
        return None
    if not isinstance(value, Coordinates) or not (
        _is_number(value.latitude) and _is_number(value.longitude)
    ):
        return ValidationError(
            field,
            "Coordinates must have valid latitude and longitude values",
            Code.INVALID_COORDINATES,
        )
    if not -90 <= value.latitude <= 90:
        return ValidationError(
            field, "Latitude must be between -90 and 90 degrees", Code.INVALID_COORDINATES
        )
    if not -180 <= value.longitude <= 180:
        return ValidationError(
            field, "Longitude must be between -180 and 180 degrees", Code.INVALID_COORDINATES
        )
    return None


def check_currency(field: str, value: Any) -> Optional[ValidationError]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return ValidationError(field, "Currency is required", Code.REQUIRED)
    if not isinstance(value, str):
        return _not_text(field, value)
    code = value.strip()
    if not _CURRENCY_PATTERN.match(code):
        return ValidationError(
            field,
            "Please enter a valid 3-letter currency code (e.g., USD, EUR)",
            Code.INVALID_CURRENCY,
        )
    if code not in CURRENCY_CODES:
        return ValidationError(field, f"Unsupported currency: {code}", Code.INVALID_CURRENCY)
    return None


def check_budget_range(field: str, value: Any) -> Optional[ValidationError]:
    if value is None:
        return None
    if not isinstance(value, BudgetRange) or not (
        _is_number(value.min) and _is_number(value.max)
    ):
        return ValidationError(
            field, "Budget range must have valid min and max values", Code.INVALID_RANGE
        )
    if value.min < 0 or value.max < 0:
        return ValidationError(field, "Budget values cannot be negative", Code.INVALID_RANGE)
    if value.min > value.max:
        return ValidationError(
            field, "Minimum budget cannot be greater than maximum budget", Code.INVALID_RANGE
        )
    if value.max > MAX_BUDGET:
        return ValidationError(field, "Maximum budget cannot exceed 1,000,000", Code.INVALID_RANGE)
    return check_currency(field, value.currency)


def check_choice(field: str, value: Any, enum_cls: type) -> Optional[ValidationError]:
    """Closed vocabulary membership; None means not chosen yet."""
    if value is None or isinstance(value, enum_cls):
        return None
    allowed = ", ".join(member.value for member in enum_cls)
    return ValidationError(
        field, f"{field} must be one of: {allowed}", Code.INVALID_SELECTION
    )


def check_string_list(field: str, value: Any, max_items: int, max_length: int,
                      label: str) -> Optional[ValidationError]:
    if value is None:
        return None
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        return ValidationError(field, f"{field} must be a list", Code.INVALID_FORMAT)
    if len(value) > max_items:
        return ValidationError(
            field, f"You can select up to {max_items} {label}", Code.TOO_LONG
        )
    for item in value:
        if _is_blank(item):
            return ValidationError(
                field, f"All {label} must be non-empty strings", Code.INVALID_FORMAT
            )
        if len(item.strip()) > max_length:
            return ValidationError(
                field,
                f"Each {label[:-1]} must be {max_length} characters or less",
                Code.TOO_LONG,
            )
    return None


def check_url(field: str, value: Any) -> Optional[ValidationError]:
    if not isinstance(value, str):
        return _not_text(field, value)
    if not value.strip():
        return None
    parsed = urlparse(value.strip())
    if not parsed.scheme or not parsed.netloc:
        return ValidationError(field, "Please enter a valid URL", Code.INVALID_URL)
    if parsed.scheme not in ("http", "https"):
        return ValidationError(
            field, "URL must start with http:// or https://", Code.INVALID_URL
        )
    return None


def check_social_handle(field: str, value: Any) -> Optional[ValidationError]:
    if not isinstance(value, str):
        return _not_text(field, value)
    if not value.strip():
        return None
    handle = value.strip()
    if handle.startswith("@"):
        handle = handle[1:]
    if not 1 <= len(handle) <= MAX_HANDLE_LENGTH:
        return ValidationError(
            field,
            f"{field} handle must be between 1 and {MAX_HANDLE_LENGTH} characters",
            Code.INVALID_FORMAT,
        )
    if not _HANDLE_PATTERN.match(handle):
        return ValidationError(
            field,
            f"{field} handle can only contain letters, numbers, underscores, and dots",
            Code.INVALID_FORMAT,
        )
    return None


def _check_hosted_url(field: str, value: Any, hosts: tuple, message: str) -> Optional[ValidationError]:
    if not isinstance(value, str):
        return _not_text(field, value)
    if not value.strip():
        return None
    if not any(host in value for host in hosts):
        return ValidationError(field, message, Code.INVALID_URL)
    return check_url(field, value)


def check_linkedin(field: str, value: Any) -> Optional[ValidationError]:
    return _check_hosted_url(
        field, value, ("linkedin.com",), "Please enter a valid LinkedIn profile URL"
    )


def check_youtube(field: str, value: Any) -> Optional[ValidationError]:
    return _check_hosted_url(
        field, value, ("youtube.com", "youtu.be"), "Please enter a valid YouTube channel URL"
    )


# Real-time (single field) validation, keyed by wire field name
FIELD_CHECKS: Dict[str, Callable[[str, Any], Optional[ValidationError]]] = {
    "firstName": check_name,
    "lastName": check_name,
    "phoneNumber": check_phone,
    "dateOfBirth": check_date_of_birth,
    "bio": lambda f, v: check_max_length(f, v, BIO_MAX_LENGTH),
    "country": check_country,
    "timezone": check_timezone,
    "coordinates": check_coordinates,
    "budgetRange": check_budget_range,
    "currency": check_currency,
    "destinations": lambda f, v: check_string_list(
        f, v, MAX_DESTINATIONS, MAX_DESTINATION_LENGTH, "destinations"
    ),
    "interests": lambda f, v: check_string_list(
        f, v, MAX_INTERESTS, MAX_INTEREST_LENGTH, "interests"
    ),
    "groupSizePreference": lambda f, v: check_choice(f, v, GroupSize),
    "travelStyle": lambda f, v: check_choice(f, v, TravelStyle),
    "accommodationPreference": lambda f, v: check_choice(f, v, AccommodationType),
    "transportationPreference": lambda f, v: check_choice(f, v, TransportationType),
    "travelFrequency": lambda f, v: check_choice(f, v, TravelFrequency),
    "profileVisibility": lambda f, v: check_choice(f, v, ProfileVisibility),
    "profilePictureUrl": check_url,
    "website": check_url,
    "instagram": check_social_handle,
    "twitter": check_social_handle,
    "facebook": check_social_handle,
    "tiktok": check_social_handle,
    "linkedin": check_linkedin,
    "youtube": check_youtube,
}


def validate_field(field: str, value: Any) -> Optional[ValidationError]:
    """Validate a single field by its wire name; unknown fields always pass."""
    check = FIELD_CHECKS.get(field)
    if check is None:
        return None
    return check(field, value)


# =============================================================================
# Step validators
# =============================================================================

def _collect(*results: Optional[ValidationError]) -> List[ValidationError]:
    return [error for error in results if error is not None]


def validate_personal_info(data: OnboardingData) -> List[ValidationError]:
    """Personal info: first name required, everything else checked when filled."""
    info = data.personal_info or PersonalInfo()
    location = info.location if isinstance(info.location, UserLocation) else None

    errors = _collect(
        check_required("firstName", info.first_name) or check_name("firstName", info.first_name),
        check_name("lastName", info.last_name),
        check_date_of_birth("dateOfBirth", info.date_of_birth),
        check_phone("phoneNumber", info.phone_number),
    )
    if info.location is not None and location is None:
        errors.append(ValidationError("location", "Please enter a valid location", Code.INVALID_FORMAT))
    if location is not None:
        errors.extend(_collect(
            check_country("country", location.country),
            check_timezone("timezone", location.timezone),
            check_coordinates("coordinates", location.coordinates),
        ))
    errors.extend(_collect(check_max_length("bio", info.bio, BIO_MAX_LENGTH)))
    return errors


def validate_travel_preferences(data: OnboardingData) -> List[ValidationError]:
    """Travel preferences: destinations, interests and languages required."""
    prefs = data.travel_preferences or TravelPreferences()
    errors: List[ValidationError] = []

    if not prefs.destinations:
        errors.append(ValidationError(
            "destinations", "Please select at least one destination", Code.REQUIRED
        ))
    else:
        errors.extend(_collect(validate_field("destinations", prefs.destinations)))

    errors.extend(_collect(
        check_budget_range("budgetRange", prefs.budget_range),
        check_choice("groupSizePreference", prefs.group_size_preference, GroupSize),
        check_choice("travelStyle", prefs.travel_style, TravelStyle),
    ))

    if not prefs.interests:
        errors.append(ValidationError(
            "interests", "Please select at least one interest", Code.REQUIRED
        ))
    else:
        errors.extend(_collect(validate_field("interests", prefs.interests)))

    errors.extend(_collect(
        check_choice("accommodationPreference", prefs.accommodation_preference, AccommodationType),
        check_choice("transportationPreference", prefs.transportation_preference, TransportationType),
        check_string_list("dietaryRestrictions", prefs.dietary_restrictions, 50, 100, "restrictions"),
        check_string_list("accessibilityNeeds", prefs.accessibility_needs, 50, 100, "needs"),
    ))

    if not prefs.languages:
        errors.append(ValidationError(
            "languages", "Please select at least one language", Code.REQUIRED
        ))
    else:
        errors.extend(_collect(
            check_string_list("languages", prefs.languages, 50, 50, "languages")
        ))

    errors.extend(_collect(
        check_choice("travelFrequency", prefs.travel_frequency, TravelFrequency),
    ))
    return errors


def validate_profile_setup(data: OnboardingData) -> List[ValidationError]:
    """Profile setup is optional: only inconsistent partial input is reported."""
    profile = data.profile_setup or ProfileSetup()
    errors = _collect(check_url("profilePictureUrl", profile.profile_picture_url))

    links = profile.social_links
    if links is not None:
        errors.extend(_collect(
            check_url("website", links.website),
            check_social_handle("instagram", links.instagram),
            check_social_handle("twitter", links.twitter),
            check_social_handle("facebook", links.facebook),
            check_linkedin("linkedin", links.linkedin),
            check_social_handle("tiktok", links.tiktok),
            check_youtube("youtube", links.youtube),
        ))

    privacy = profile.privacy_settings
    if privacy is not None:
        errors.extend(_collect(
            check_choice("profileVisibility", privacy.profile_visibility, ProfileVisibility),
        ))
    return errors


class StepValidator:
    """Validates onboarding step data by step id."""

    # Step ids
    STEP_PERSONAL_INFO = "personal-info"
    STEP_TRAVEL_PREFERENCES = "travel-preferences"
    STEP_PROFILE_SETUP = "profile-setup"

    VALIDATORS: Dict[str, Callable[[OnboardingData], List[ValidationError]]] = {
        STEP_PERSONAL_INFO: validate_personal_info,
        STEP_TRAVEL_PREFERENCES: validate_travel_preferences,
        STEP_PROFILE_SETUP: validate_profile_setup,
    }

    @staticmethod
    def validate_step(step_id: str, data: OnboardingData) -> List[ValidationError]:
        """
        Validate step data.

        Args:
            step_id: Step identifier (e.g. "personal-info")
            data: Accumulated onboarding data

        Returns:
            Errors in field declaration order; empty when the step passes.
            Unknown steps always pass.
        """
        validator = StepValidator.VALIDATORS.get(step_id)
        if validator is None:
            return []
        return validator(data)


validate = StepValidator.validate_step
