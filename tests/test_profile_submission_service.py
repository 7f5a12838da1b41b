# -*- coding: utf-8 -*-
"""
Tests for the profile submission service.

Tests cover:
- Mapping onboarding data to the profile update
- Request shape (method, URL, headers)
- Error mapping (missing session, HTTP, transport)
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from models.onboarding import OnboardingData
from services.exceptions import ApiException, NetworkException, ValidationException
from services.profile_submission_service import (
    AuthSession, ProfileSubmissionService, build_profile_update, idempotency_key,
)

REQUEST = "services.profile_submission_service.requests.request"


def _response(status_code=200, body=None, text=None):
    response = MagicMock()
    response.status_code = status_code
    response.text = text if text is not None else ("{}" if body is None else "body")
    response.json.return_value = body if body is not None else {}
    if status_code >= 400:
        error = requests.exceptions.HTTPError(f"{status_code} Error", response=response)
        response.raise_for_status.side_effect = error
    return response


@pytest.fixture
def service():
    return ProfileSubmissionService(
        base_url="https://api.wandercrew.test/",
        session=AuthSession(user_id="u-42", access_token="token-123"),
        timeout=5,
    )


class TestBuildProfileUpdate:
    """build_profile_update()."""

    def test_required_steps_only(self, valid_data):
        """Test skipped profile step falls back to default settings."""
        update = build_profile_update(valid_data)
        assert update["name"] == "Ana Silva"
        assert update["isOnboardingComplete"] is True
        assert update["travelPreferences"]["destinations"] == ["Lisbon, Portugal"]
        assert update["privacySettings"]["profileVisibility"] == "public"
        assert update["privacySettings"]["dataSharing"] == {
            "analytics": True, "marketing": False, "thirdParty": False,
        }
        assert update["notificationSettings"]["sms"] == {"tripUpdates": False, "security": True}
        assert "profilePicture" not in update

    def test_profile_step_values(self, valid_data):
        data = valid_data.merge({"profileSetup": {
            "profilePictureUrl": "https://cdn.wandercrew.test/ana.png",
            "privacySettings": {"profileVisibility": "friends", "showEmail": True},
            "socialLinks": {"instagram": "@ana"},
        }})
        update = build_profile_update(data)
        assert update["profilePicture"] == "https://cdn.wandercrew.test/ana.png"
        assert update["privacySettings"]["profileVisibility"] == "friends"
        assert update["privacySettings"]["showEmail"] is True
        assert update["socialLinks"] == {"instagram": "@ana"}

    def test_empty_data(self):
        update = build_profile_update(OnboardingData())
        assert update["name"] == ""
        assert update["travelPreferences"] == {}

    def test_idempotency_key_is_stable(self, valid_data):
        body = build_profile_update(valid_data)
        assert idempotency_key("u-42", body) == idempotency_key("u-42", dict(body))
        assert idempotency_key("u-42", body) != idempotency_key("u-43", body)


class TestSubmit:
    """ProfileSubmissionService.submit()."""

    def test_patches_profile(self, service, valid_data):
        with patch(REQUEST, return_value=_response(body={"id": "u-42"})) as request:
            result = service(valid_data)

        assert result == {"id": "u-42"}
        kwargs = request.call_args.kwargs
        assert kwargs["method"] == "PATCH"
        assert kwargs["url"] == "https://api.wandercrew.test/v1/users/u-42/profile"
        assert kwargs["timeout"] == 5
        assert kwargs["json"]["name"] == "Ana Silva"
        assert kwargs["headers"]["Authorization"] == "Bearer token-123"
        assert kwargs["headers"]["Idempotency-Key"].startswith("onboarding-")

    def test_empty_response_body(self, service, valid_data):
        with patch(REQUEST, return_value=_response(status_code=204, text="")):
            assert service.submit(valid_data) is None

    def test_missing_session(self, valid_data):
        service = ProfileSubmissionService(session=None)
        with patch(REQUEST) as request:
            with pytest.raises(ValidationException) as exc_info:
                service.submit(valid_data)
        assert exc_info.value.message == "No user found. Please sign in again."
        request.assert_not_called()

    def test_http_error(self, service, valid_data):
        response = _response(status_code=422, body={"message": "Invalid profile"})
        with patch(REQUEST, return_value=response):
            with pytest.raises(ApiException) as exc_info:
                service.submit(valid_data)
        assert exc_info.value.status_code == 422
        assert exc_info.value.message == "Invalid profile"
        assert str(exc_info.value) == "[422] Invalid profile"

    def test_http_error_without_body(self, service, valid_data):
        response = _response(status_code=500)
        response.json.side_effect = ValueError("no json")
        with patch(REQUEST, return_value=response):
            with pytest.raises(ApiException) as exc_info:
                service.submit(valid_data)
        assert exc_info.value.message == "Failed to complete onboarding"

    @pytest.mark.parametrize("error", [
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.Timeout("slow"),
        requests.exceptions.TooManyRedirects("loop"),
    ])
    def test_transport_errors(self, service, valid_data, error):
        with patch(REQUEST, side_effect=error):
            with pytest.raises(NetworkException) as exc_info:
                service.submit(valid_data)
        assert exc_info.value.original_error is error
