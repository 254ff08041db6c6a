"""
Tests for request models and their validation helpers.

Tests:
- camelCase aliases
- Required field reporting
- Enumerated field validation
- Salary range check
- Application status validation and transitions
"""

import pytest

from api.schemas.auth import REGISTER_REQUIRED, LoginRequest, RegisterRequest
from api.schemas.common import check_choice
from api.schemas.jobs import ApplicationStatusUpdate, JobCreateRequest, JobUpdateRequest
from api.services.applications import check_transition
from core.exceptions import ValidationError
from database.models.applications import ApplicationStatus
from database.models.jobs import JobStatus


class TestRegisterRequest:
    """Test registration payload handling."""

    def test_camel_case_aliases(self):
        request = RegisterRequest.model_validate(
            {"companyName": "Acme", "firstName": "Ada", "lastName": "Admin"}
        )
        assert request.company_name == "Acme"
        assert request.first_name == "Ada"

    def test_reports_every_missing_field(self):
        request = RegisterRequest.model_validate({"companyName": "Acme", "email": "  "})
        with pytest.raises(ValidationError) as exc_info:
            request.require(REGISTER_REQUIRED)

        body = exc_info.value.to_dict()
        assert body["error"] == "Missing required fields"
        assert body["required"] == [
            "companyName", "subdomain", "email", "password", "firstName", "lastName",
        ]
        assert body["missing"] == ["subdomain", "email", "password", "firstName", "lastName"]

    def test_password_whitespace_is_kept(self):
        request = RegisterRequest.model_validate(
            {"companyName": "  Acme ", "email": " a@acme.com ", "password": "  secret1  "}
        )
        assert request.company_name == "Acme"
        assert request.email == "a@acme.com"
        assert request.password == "  secret1  "

    def test_login_password_is_not_trimmed(self):
        request = LoginRequest.model_validate({"email": " a@acme.com", "password": " secret1 "})
        assert request.email == "a@acme.com"
        assert request.password == " secret1 "


class TestCheckChoice:
    def test_none_is_allowed(self):
        check_choice(None, JobStatus, "status")

    def test_invalid_value(self):
        with pytest.raises(ValidationError) as exc_info:
            check_choice("archived", JobStatus, "status")
        assert exc_info.value.extra["validValues"] == ["active", "paused", "closed"]


class TestJobRequests:
    """Test job create/update validation."""

    def test_create_defaults_employment_type(self):
        request = JobCreateRequest.model_validate(
            {"title": "Engineer", "description": "Build stuff", "employmentType": None}
        )
        request.validate_for_create()
        assert request.employment_type == "full-time"

    def test_create_requires_title_and_description(self):
        with pytest.raises(ValidationError) as exc_info:
            JobCreateRequest.model_validate({"title": "Engineer"}).validate_for_create()
        assert exc_info.value.message == "Title and description are required"
        assert exc_info.value.extra["missing"] == ["description"]

    def test_create_rejects_unknown_employment_type(self):
        request = JobCreateRequest.model_validate(
            {"title": "t", "description": "d", "employmentType": "gig"}
        )
        with pytest.raises(ValidationError) as exc_info:
            request.validate_for_create()
        assert "internship" in exc_info.value.extra["validValues"]

    def test_salary_range(self):
        request = JobCreateRequest.model_validate(
            {"title": "t", "description": "d", "salaryMin": 90000, "salaryMax": 50000}
        )
        with pytest.raises(ValidationError):
            request.validate_for_create()

    def test_update_is_full_replace(self):
        request = JobUpdateRequest.model_validate({"title": "t", "description": "d"})
        with pytest.raises(ValidationError) as exc_info:
            request.validate_for_update()
        assert exc_info.value.extra["missing"] == ["employmentType", "status"]

    def test_update_rejects_unknown_status(self):
        request = JobUpdateRequest.model_validate(
            {"title": "t", "description": "d", "employmentType": "contract", "status": "draft"}
        )
        with pytest.raises(ValidationError):
            request.validate_for_update()

    def test_valid_update(self):
        request = JobUpdateRequest.model_validate(
            {"title": "t", "description": "d", "employmentType": "contract", "status": "paused"}
        )
        request.validate_for_update()


class TestApplicationStatus:
    """Test status validation and the hiring workflow."""

    @pytest.mark.parametrize("status", ["pending", "reviewing", "interview", "rejected", "hired"])
    def test_valid_statuses(self, status):
        assert ApplicationStatusUpdate(status=status).validate_status() == ApplicationStatus(status)

    @pytest.mark.parametrize("status", [None, "interviewed", "HIRED", ""])
    def test_invalid_statuses(self, status):
        with pytest.raises(ValidationError) as exc_info:
            ApplicationStatusUpdate(status=status).validate_status()
        assert exc_info.value.extra["validStatuses"] == [
            "pending", "reviewing", "interview", "rejected", "hired",
        ]

    @pytest.mark.parametrize("current,target", [
        ("pending", "reviewing"),
        ("pending", "hired"),
        ("reviewing", "interview"),
        ("interview", "rejected"),
        ("hired", "hired"),
    ])
    def test_allowed_transitions(self, current, target):
        check_transition(ApplicationStatus(current), ApplicationStatus(target))

    @pytest.mark.parametrize("current,target", [
        ("pending", "interview"),
        ("interview", "reviewing"),
        ("rejected", "pending"),
        ("hired", "rejected"),
    ])
    def test_disallowed_transitions(self, current, target):
        with pytest.raises(ValidationError) as exc_info:
            check_transition(ApplicationStatus(current), ApplicationStatus(target))
        assert "allowedStatuses" in exc_info.value.extra
