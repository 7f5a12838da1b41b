# -*- coding: utf-8 -*-
"""
Profile Submission Service
==========================
Sends the finished onboarding data to the WanderCrew profile API.

The controller treats this as a plain callable ``submit(data)``; it runs on
a worker thread, so everything here is blocking.

Usage:
    session = AuthSession(user_id="u-42", access_token="...")
    submit = ProfileSubmissionService(session=session)
    profile = submit(controller.data)
"""

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from app.config import Config
from models.onboarding import (
    NotificationSettings, OnboardingData, PrivacySettings, ProfileSetup, serialize,
)
from services.exceptions import ApiException, NetworkException, ValidationException
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class AuthSession:
    """The signed-in user the profile belongs to."""
    user_id: Optional[str] = None
    access_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)


def build_profile_update(data: OnboardingData) -> Dict[str, Any]:
    """
    Map onboarding data to the profile update body.

    Privacy and notification settings fall back to their defaults when the
    profile step was skipped or left partially filled.
    """
    personal = data.personal_info
    setup = data.profile_setup or ProfileSetup()

    update: Dict[str, Any] = {
        "name": personal.full_name if personal is not None else "",
        "travelPreferences": (
            data.travel_preferences.to_dict() if data.travel_preferences is not None else {}
        ),
        "privacySettings": (setup.privacy_settings or PrivacySettings()).to_dict(),
        "notificationSettings": (setup.notification_settings or NotificationSettings()).to_dict(),
        "isOnboardingComplete": True,
    }

    if personal is not None:
        for attr, key in (("date_of_birth", "dateOfBirth"),
                          ("phone_number", "phoneNumber"),
                          ("location", "location"),
                          ("bio", "bio")):
            value = getattr(personal, attr)
            if value is not None:
                update[key] = serialize(value)

    if setup.profile_picture_url:
        update["profilePicture"] = setup.profile_picture_url
    if setup.social_links is not None:
        update["socialLinks"] = setup.social_links.to_dict()

    return update


def idempotency_key(user_id: str, body: Dict[str, Any]) -> str:
    """Stable key for one (user, payload) pair so retries are deduplicated."""
    canonical = json.dumps(body, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
    digest = hashlib.sha256(f"{user_id}:{canonical}".encode("utf-8")).hexdigest()
    return f"onboarding-{digest[:32]}"


class ProfileSubmissionService:
    """
    Callable submitter for the onboarding controller.

    Args:
        base_url: API root (defaults to Config.API_BASE_URL)
        session: Signed-in user; required at submission time
        timeout: Request timeout in seconds
    """

    def __init__(self, base_url: str = None, session: Optional[AuthSession] = None,
                 timeout: int = None):
        self.base_url = (base_url or Config.API_BASE_URL).rstrip('/')
        self.session = session
        self.timeout = timeout if timeout is not None else Config.API_TIMEOUT

    def __call__(self, data: OnboardingData) -> Any:
        return self.submit(data)

    def submit(self, data: OnboardingData) -> Any:
        """
        Update the user's profile with the onboarding data.

        Returns:
            The API's response body (the updated profile), or None if empty

        Raises:
            ValidationException: no signed-in user
            ApiException: the API answered with an error status
            NetworkException: the API could not be reached
        """
        if self.session is None or not self.session.is_authenticated:
            raise ValidationException("No user found. Please sign in again.", field="userId")

        body = build_profile_update(data)
        endpoint = f"/{Config.API_VERSION}/users/{self.session.user_id}/profile"
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Idempotency-Key": idempotency_key(self.session.user_id, body),
        }
        if self.session.access_token:
            headers["Authorization"] = f"Bearer {self.session.access_token}"

        return self._request("PATCH", endpoint, json_data=body, headers=headers)

    def _request(self, method: str, endpoint: str, json_data: Optional[Dict] = None,
                 headers: Optional[Dict[str, str]] = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        logger.info(f"[API REQ] {method} {endpoint}")

        try:
            response = requests.request(
                method=method,
                url=url,
                json=json_data,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            logger.info(f"[API RES] {response.status_code} {endpoint}")
            return response.json() if response.text else None

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 0
            response_data = {}
            try:
                response_data = e.response.json() if e.response is not None else {}
            except (ValueError, AttributeError):
                pass
            logger.error(f"[API ERR] {status_code} {method} {endpoint} | Response: {response_data}")
            message = _error_message(response_data) or "Failed to complete onboarding"
            raise ApiException(
                message=message,
                status_code=status_code,
                response_data=response_data if isinstance(response_data, dict) else {},
                context=endpoint,
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.error(f"Network error: {endpoint} - {e}")
            raise NetworkException(
                message="Could not reach the WanderCrew servers. Check your connection and try again.",
                original_error=e,
                context=endpoint,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed: {endpoint} - {e}")
            raise NetworkException(message=str(e), original_error=e, context=endpoint)


def _error_message(response_data: Any) -> Optional[str]:
    """Pull a human-readable message out of an API error body."""
    if not isinstance(response_data, dict):
        return None
    for key in ("message", "error", "detail", "title"):
        value = response_data.get(key)
        if isinstance(value, str) and value:
            return value
    return None
