# -*- coding: utf-8 -*-
"""
Onboarding data model.

Immutable records for the data a new user accumulates while walking through
the onboarding wizard, plus the wizard state and step configuration types.

Attribute names are snake_case; the persisted form (and the payload sent to
the backend) uses the camelCase names of the web client, e.g.
``personal_info.first_name`` <-> ``personalInfo.firstName``.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, FrozenSet, List, Mapping, Optional, Tuple


# =============================================================================
# Vocabularies
# =============================================================================

class GroupSize(str, Enum):
    SOLO = "solo"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class TravelStyle(str, Enum):
    ADVENTURE = "adventure"
    RELAXED = "relaxed"
    CULTURAL = "cultural"
    BUDGET = "budget"
    LUXURY = "luxury"
    BUSINESS = "business"


class AccommodationType(str, Enum):
    HOTEL = "hotel"
    HOSTEL = "hostel"
    AIRBNB = "airbnb"
    CAMPING = "camping"
    ANY = "any"


class TransportationType(str, Enum):
    FLIGHT = "flight"
    TRAIN = "train"
    BUS = "bus"
    CAR = "car"
    ANY = "any"


class TravelFrequency(str, Enum):
    RARELY = "rarely"
    OCCASIONALLY = "occasionally"
    FREQUENTLY = "frequently"
    CONSTANTLY = "constantly"


class ProfileVisibility(str, Enum):
    PUBLIC = "public"
    FRIENDS = "friends"
    PRIVATE = "private"


class ValidationErrorCode(str, Enum):
    REQUIRED = "REQUIRED"
    INVALID_FORMAT = "INVALID_FORMAT"
    TOO_SHORT = "TOO_SHORT"
    TOO_LONG = "TOO_LONG"
    INVALID_AGE = "INVALID_AGE"
    INVALID_URL = "INVALID_URL"
    INVALID_PHONE = "INVALID_PHONE"
    INVALID_DATE = "INVALID_DATE"
    INVALID_CURRENCY = "INVALID_CURRENCY"
    INVALID_LANGUAGE = "INVALID_LANGUAGE"
    INVALID_TIMEZONE = "INVALID_TIMEZONE"
    INVALID_COORDINATES = "INVALID_COORDINATES"
    INVALID_SELECTION = "INVALID_SELECTION"
    INVALID_RANGE = "INVALID_RANGE"
    VALIDATOR_ERROR = "VALIDATOR_ERROR"


TRAVEL_INTERESTS: Tuple[str, ...] = (
    "culture", "nature", "adventure", "food", "history", "art", "photography",
    "nightlife", "beach", "mountains", "cities", "wildlife", "religion",
    "architecture", "music", "sports", "wellness", "shopping", "festivals",
    "local experiences",
)

POPULAR_DESTINATIONS: Tuple[str, ...] = (
    "Paris, France", "Tokyo, Japan", "New York, USA", "London, UK",
    "Rome, Italy", "Barcelona, Spain", "Amsterdam, Netherlands",
    "Sydney, Australia", "Dubai, UAE", "Bangkok, Thailand", "Istanbul, Turkey",
    "Prague, Czech Republic", "Vienna, Austria", "Berlin, Germany",
    "Madrid, Spain", "Athens, Greece", "Lisbon, Portugal",
    "Copenhagen, Denmark", "Stockholm, Sweden", "Zurich, Switzerland",
)

CURRENCY_OPTIONS: Tuple[Dict[str, str], ...] = (
    {"code": "USD", "symbol": "$", "name": "US Dollar"},
    {"code": "EUR", "symbol": "€", "name": "Euro"},
    {"code": "GBP", "symbol": "£", "name": "British Pound"},
    {"code": "JPY", "symbol": "¥", "name": "Japanese Yen"},
    {"code": "CAD", "symbol": "C$", "name": "Canadian Dollar"},
    {"code": "AUD", "symbol": "A$", "name": "Australian Dollar"},
    {"code": "CHF", "symbol": "CHF", "name": "Swiss Franc"},
    {"code": "CNY", "symbol": "¥", "name": "Chinese Yuan"},
    {"code": "INR", "symbol": "₹", "name": "Indian Rupee"},
    {"code": "BRL", "symbol": "R$", "name": "Brazilian Real"},
)

CURRENCY_CODES: FrozenSet[str] = frozenset(c["code"] for c in CURRENCY_OPTIONS)

LANGUAGE_OPTIONS: Tuple[str, ...] = (
    "English", "Spanish", "French", "German", "Italian", "Portuguese",
    "Russian", "Japanese", "Chinese", "Korean", "Arabic", "Hindi", "Dutch",
    "Swedish", "Norwegian", "Danish", "Finnish", "Polish", "Czech", "Hungarian",
)


# =============================================================================
# Field parsers
# =============================================================================
# Each parser returns the typed value or raises ValueError/TypeError.

def to_camel(name: str) -> str:
    """Convert a snake_case attribute name to its camelCase wire name."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _parse_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected str, got {type(value).__name__}")
    return value


def _parse_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected bool, got {type(value).__name__}")
    return value


def _parse_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected number, got {type(value).__name__}")
    return value


def _parse_str_tuple(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise TypeError(f"expected list of str, got {type(value).__name__}")
    return tuple(_parse_str(item) for item in value)


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # Stored as "YYYY-MM-DD" or a full ISO timestamp
    return date.fromisoformat(_parse_str(value)[:10])


def _enum_parser(enum_cls: type) -> Callable[[Any], Enum]:
    def parse(value: Any) -> Enum:
        return enum_cls(value)
    return parse


def _record_parser(record_cls: type) -> Callable[..., Any]:
    def parse(value: Any, keep_invalid: bool = False) -> Any:
        if isinstance(value, record_cls):
            return value
        if not isinstance(value, Mapping):
            raise TypeError(f"expected mapping, got {type(value).__name__}")
        return record_cls(**record_cls._coerce(value, keep_invalid=keep_invalid))
    # Nested records get the caller's keep_invalid mode
    parse.nested = True
    return parse


def _vocabulary_parser(vocabulary: Tuple[str, ...]) -> Callable[[Any], Tuple[str, ...]]:
    """
    List of str against a soft vocabulary: entries matching it (ignoring case
    and surrounding spaces) take its spelling, anything else is kept as given.
    """
    canonical = {item.casefold(): item for item in vocabulary}

    def parse(value: Any) -> Tuple[str, ...]:
        return tuple(
            canonical.get(item.strip().casefold(), item) for item in _parse_str_tuple(value)
        )
    return parse


def serialize(value: Any) -> Any:
    """Convert a model value into JSON-compatible primitives (camelCase keys)."""
    if isinstance(value, Record):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [serialize(item) for item in value]
    if isinstance(value, Mapping):
        return {key: serialize(item) for key, item in value.items()}
    return value


class Record:
    """
    Mixin for the frozen onboarding records.

    Subclasses declare ``_PARSERS`` mapping each attribute to its parser.
    """

    _PARSERS: ClassVar[Dict[str, Callable[[Any], Any]]] = {}

    @classmethod
    def _attribute_for(cls, key: str) -> Optional[str]:
        """Resolve a snake_case or camelCase key to the attribute name."""
        for f in fields(cls):
            if key == f.name or key == to_camel(f.name):
                return f.name
        return None

    @classmethod
    def _coerce(cls, raw: Mapping[str, Any], keep_invalid: bool) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for key, value in raw.items():
            name = cls._attribute_for(key)
            if name is None:
                continue
            if value is None:
                values[name] = None
                continue
            parser = cls._PARSERS.get(name)
            if parser is None:
                values[name] = value
                continue
            try:
                if keep_invalid and getattr(parser, "nested", False):
                    values[name] = parser(value, keep_invalid=True)
                else:
                    values[name] = parser(value)
            except (TypeError, ValueError, KeyError):
                if keep_invalid:
                    values[name] = value
        return values

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        """
        Build a record from a (camelCase or snake_case) mapping.

        Fields whose value does not parse (unknown enum member, wrong type,
        malformed nested record) are dropped and fall back to the default.
        """
        return cls(**cls._coerce(data, keep_invalid=False))

    def merged(self, updates: Mapping[str, Any]):
        """
        Return a copy with ``updates`` applied field by field (later write wins).

        Values that do not parse are kept as given so validators can report
        them; unknown keys are ignored.
        """
        return replace(self, **self._coerce(updates, keep_invalid=True))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a camelCase dict, omitting unset fields."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                result[to_camel(f.name)] = serialize(value)
        return result


# =============================================================================
# Nested records
# =============================================================================

@dataclass(frozen=True)
class Coordinates(Record):
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    _PARSERS: ClassVar[Dict[str, Callable]] = {
        "latitude": _parse_number,
        "longitude": _parse_number,
    }


@dataclass(frozen=True)
class UserLocation(Record):
    country: str = ""
    state: Optional[str] = None
    city: Optional[str] = None
    timezone: str = ""
    coordinates: Optional[Coordinates] = None

    _PARSERS: ClassVar[Dict[str, Callable]] = {
        "country": _parse_str,
        "state": _parse_str,
        "city": _parse_str,
        "timezone": _parse_str,
        "coordinates": _record_parser(Coordinates),
    }


@dataclass(frozen=True)
class BudgetRange(Record):
    """Budget range for a trip. Invariant (checked by validators): min <= max."""

    min: Optional[float] = None
    max: Optional[float] = None
    currency: Optional[str] = None

    _PARSERS: ClassVar[Dict[str, Callable]] = {
        "min": _parse_number,
        "max": _parse_number,
        "currency": _parse_str,
    }


@dataclass(frozen=True)
class SocialLinks(Record):
    website: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    tiktok: Optional[str] = None
    youtube: Optional[str] = None

    _PARSERS: ClassVar[Dict[str, Callable]] = {
        name: _parse_str
        for name in ("website", "instagram", "twitter", "facebook", "linkedin", "tiktok", "youtube")
    }


@dataclass(frozen=True)
class DataSharing(Record):
    analytics: bool = True
    marketing: bool = False
    third_party: bool = False

    _PARSERS: ClassVar[Dict[str, Callable]] = {
        "analytics": _parse_bool,
        "marketing": _parse_bool,
        "third_party": _parse_bool,
    }


@dataclass(frozen=True)
class PrivacySettings(Record):
    profile_visibility: ProfileVisibility = ProfileVisibility.PUBLIC
    show_email: bool = False
    show_phone: bool = False
    show_location: bool = True
    show_travel_history: bool = True
    allow_friend_requests: bool = True
    allow_trip_invitations: bool = True
    data_sharing: DataSharing = field(default_factory=DataSharing)

    _PARSERS: ClassVar[Dict[str, Callable]] = {
        "profile_visibility": _enum_parser(ProfileVisibility),
        "show_email": _parse_bool,
        "show_phone": _parse_bool,
        "show_location": _parse_bool,
        "show_travel_history": _parse_bool,
        "allow_friend_requests": _parse_bool,
        "allow_trip_invitations": _parse_bool,
        "data_sharing": _record_parser(DataSharing),
    }


@dataclass(frozen=True)
class EmailNotifications(Record):
    trip_updates: bool = True
    friend_requests: bool = True
    trip_invitations: bool = True
    marketing: bool = False
    security: bool = True

    _PARSERS: ClassVar[Dict[str, Callable]] = {
        name: _parse_bool
        for name in ("trip_updates", "friend_requests", "trip_invitations", "marketing", "security")
    }


@dataclass(frozen=True)
class PushNotifications(Record):
    trip_updates: bool = True
    friend_requests: bool = True
    trip_invitations: bool = True
    messages: bool = True

    _PARSERS: ClassVar[Dict[str, Callable]] = {
        name: _parse_bool
        for name in ("trip_updates", "friend_requests", "trip_invitations", "messages")
    }


@dataclass(frozen=True)
class SmsNotifications(Record):
    trip_updates: bool = False
    security: bool = True

    _PARSERS: ClassVar[Dict[str, Callable]] = {
        "trip_updates": _parse_bool,
        "security": _parse_bool,
    }


@dataclass(frozen=True)
class NotificationSettings(Record):
    email: EmailNotifications = field(default_factory=EmailNotifications)
    push: PushNotifications = field(default_factory=PushNotifications)
    sms: SmsNotifications = field(default_factory=SmsNotifications)

    _PARSERS: ClassVar[Dict[str, Callable]] = {
        "email": _record_parser(EmailNotifications),
        "push": _record_parser(PushNotifications),
        "sms": _record_parser(SmsNotifications),
    }


# =============================================================================
# Sections
# =============================================================================
# Every section field is optional (None = not filled in yet).

@dataclass(frozen=True)
class PersonalInfo(Record):
    """Personal information step (step 1)."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    phone_number: Optional[str] = None
    location: Optional[UserLocation] = None
    bio: Optional[str] = None

    _PARSERS: ClassVar[Dict[str, Callable]] = {
        "first_name": _parse_str,
        "last_name": _parse_str,
        "date_of_birth": _parse_date,
        "phone_number": _parse_str,
        "location": _record_parser(UserLocation),
        "bio": _parse_str,
    }

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.last_name]
        return " ".join(p.strip() for p in parts if isinstance(p, str) and p.strip())


@dataclass(frozen=True)
class TravelPreferences(Record):
    """Travel preferences step (step 2)."""

    destinations: Optional[Tuple[str, ...]] = None
    budget_range: Optional[BudgetRange] = None
    group_size_preference: Optional[GroupSize] = None
    travel_style: Optional[TravelStyle] = None
    interests: Optional[Tuple[str, ...]] = None
    accommodation_preference: Optional[AccommodationType] = None
    transportation_preference: Optional[TransportationType] = None
    dietary_restrictions: Optional[Tuple[str, ...]] = None
    accessibility_needs: Optional[Tuple[str, ...]] = None
    languages: Optional[Tuple[str, ...]] = None
    travel_frequency: Optional[TravelFrequency] = None

    _PARSERS: ClassVar[Dict[str, Callable]] = {
        "destinations": _vocabulary_parser(POPULAR_DESTINATIONS),
        "budget_range": _record_parser(BudgetRange),
        "group_size_preference": _enum_parser(GroupSize),
        "travel_style": _enum_parser(TravelStyle),
        "interests": _vocabulary_parser(TRAVEL_INTERESTS),
        "accommodation_preference": _enum_parser(AccommodationType),
        "transportation_preference": _enum_parser(TransportationType),
        "dietary_restrictions": _parse_str_tuple,
        "accessibility_needs": _parse_str_tuple,
        "languages": _vocabulary_parser(LANGUAGE_OPTIONS),
        "travel_frequency": _enum_parser(TravelFrequency),
    }


@dataclass(frozen=True)
class ProfileSetup(Record):
    """Profile setup step (step 3, optional)."""

    profile_picture_url: Optional[str] = None
    social_links: Optional[SocialLinks] = None
    privacy_settings: Optional[PrivacySettings] = None
    notification_settings: Optional[NotificationSettings] = None

    _PARSERS: ClassVar[Dict[str, Callable]] = {
        "profile_picture_url": _parse_str,
        "social_links": _record_parser(SocialLinks),
        "privacy_settings": _record_parser(PrivacySettings),
        "notification_settings": _record_parser(NotificationSettings),
    }


@dataclass(frozen=True)
class OnboardingData(Record):
    """
    Accumulated onboarding payload.

    Sections stay None until the user touches them.
    """

    personal_info: Optional[PersonalInfo] = None
    travel_preferences: Optional[TravelPreferences] = None
    profile_setup: Optional[ProfileSetup] = None

    _PARSERS: ClassVar[Dict[str, Callable]] = {
        "personal_info": _record_parser(PersonalInfo),
        "travel_preferences": _record_parser(TravelPreferences),
        "profile_setup": _record_parser(ProfileSetup),
    }

    @classmethod
    def unknown_sections(cls, partial: Mapping[str, Any]) -> List[str]:
        """Keys of ``partial`` that do not name a section."""
        return [key for key in partial if cls._attribute_for(key) is None]

    def merge(self, partial: Mapping[str, Any]) -> "OnboardingData":
        """
        Merge a partial update section by section.

        Sections missing from ``partial`` are untouched; given sections are
        shallow-merged field by field. A section may be given as a mapping
        or as a section record (whose unset fields are ignored).
        """
        changes = {}
        for key, updates in partial.items():
            name = self._attribute_for(key)
            if name is None or updates is None:
                continue
            section_cls = _SECTION_TYPES[name]
            if isinstance(updates, section_cls):
                updates = {
                    f.name: getattr(updates, f.name)
                    for f in fields(updates)
                    if getattr(updates, f.name) is not None
                }
            if not isinstance(updates, Mapping):
                continue
            current = getattr(self, name) or section_cls()
            changes[name] = current.merged(updates)
        if not changes:
            return self
        return replace(self, **changes)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


_SECTION_TYPES: Dict[str, type] = {
    "personal_info": PersonalInfo,
    "travel_preferences": TravelPreferences,
    "profile_setup": ProfileSetup,
}


# =============================================================================
# Validation and wizard state
# =============================================================================

@dataclass(frozen=True)
class ValidationError:
    """A single field-scoped validation failure."""

    field: str
    message: str
    code: ValidationErrorCode = ValidationErrorCode.INVALID_FORMAT


StepValidatorFunc = Callable[[OnboardingData], List[ValidationError]]


@dataclass(frozen=True)
class OnboardingStep:
    """
    Configuration of one wizard step.

    The ordered list of steps is fixed when the controller is created.
    """

    id: str
    title: str
    description: str = ""
    validator: Optional[StepValidatorFunc] = None
    is_optional: bool = False


@dataclass(frozen=True)
class OnboardingState:
    """
    Snapshot of the onboarding wizard.

    Invariant: 0 <= current_step < total_steps; once is_completed is True,
    current_step == total_steps - 1.
    """

    current_step: int = 0
    total_steps: int = 1
    data: OnboardingData = field(default_factory=OnboardingData)
    is_completed: bool = False
    is_loading: bool = False
    error: Optional[str] = None
    validation_errors: Tuple[ValidationError, ...] = ()
    completed_steps: FrozenSet[int] = frozenset()

    @classmethod
    def initial(cls, total_steps: int) -> "OnboardingState":
        if total_steps <= 0:
            raise ValueError("total_steps must be positive")
        return cls(total_steps=total_steps)

    @property
    def is_first_step(self) -> bool:
        return self.current_step == 0

    @property
    def is_last_step(self) -> bool:
        return self.current_step == self.total_steps - 1

    @property
    def progress_percentage(self) -> float:
        """Progress through the flow, counting the current step (0-100)."""
        return (self.current_step + 1) / self.total_steps * 100.0
