"""
Tests for role-specific registration.
"""
import pytest

from member_accounts.accounts.models import Account, Role
from member_accounts.accounts.registration import (
    ROLE_VARIANTS,
    DoctorFields,
    GlobalNetworkFields,
    PlainFields,
    StudentFields,
    validate_registration,
)
from member_accounts.accounts.schemas import RegistrationRequest
from member_accounts.accounts.service import AccountService
from member_accounts.exceptions import ConflictError, ValidationError
from tests.helpers import DOCTOR_PAYLOAD, STUDENT_PAYLOAD


@pytest.fixture
def service(store, credentials, sequences, email_sender, settings):
    return AccountService(store, credentials, sequences, email_sender, settings)


def payload(base, **overrides):
    data = dict(base, **overrides)
    return RegistrationRequest(**{key: value for key, value in data.items() if value is not None})


def test_every_role_has_a_variant():
    assert set(ROLE_VARIANTS) == set(Role)


class TestValidator:

    def test_student_record_keeps_only_student_fields(self):
        record = validate_registration(payload(STUDENT_PAYLOAD, license_number="X-1", specialty="Surgery"))

        assert isinstance(record.role_fields, StudentFields)
        assert record.email == "ada.student@example.com"
        assert record.role_columns() == {
            "admission_year": 2022,
            "year_of_study": 3,
            "license_number": None,
            "specialty": None,
        }
        assert record.profile == {"institution": "University of Lagos"}

    @pytest.mark.parametrize("missing", ["admission_year", "year_of_study"])
    def test_student_missing_field_names_both(self, missing):
        with pytest.raises(ValidationError) as exc_info:
            validate_registration(payload(STUDENT_PAYLOAD, **{missing: None}))

        assert "admission_year" in exc_info.value.detail
        assert "year_of_study" in exc_info.value.detail
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("role, variant", [("Doctor", DoctorFields), ("GlobalNetwork", GlobalNetworkFields)])
    def test_professional_record_drops_student_fields(self, role, variant):
        record = validate_registration(payload(DOCTOR_PAYLOAD, role=role, admission_year=2020, year_of_study=2))

        assert type(record.role_fields) is variant
        columns = record.role_columns()
        assert columns["license_number"] == "MDCN-44821"
        assert columns["specialty"] == "Cardiology"
        assert columns["admission_year"] is None
        assert columns["year_of_study"] is None

    @pytest.mark.parametrize("role", ["Doctor", "GlobalNetwork"])
    @pytest.mark.parametrize("missing", ["license_number", "specialty"])
    def test_professional_missing_field_names_both(self, role, missing):
        with pytest.raises(ValidationError) as exc_info:
            validate_registration(payload(DOCTOR_PAYLOAD, role=role, **{missing: None}))

        assert "license_number" in exc_info.value.detail
        assert "specialty" in exc_info.value.detail

    def test_blank_string_counts_as_missing(self):
        with pytest.raises(ValidationError):
            validate_registration(payload(DOCTOR_PAYLOAD, specialty="   "))

    def test_member_needs_no_role_fields(self):
        record = validate_registration(payload(DOCTOR_PAYLOAD, role="Member"))

        assert isinstance(record.role_fields, PlainFields)
        assert all(value is None for value in record.role_columns().values())

    def test_password_is_not_in_repr(self):
        record = validate_registration(payload(STUDENT_PAYLOAD))
        assert STUDENT_PAYLOAD["password"] not in repr(record)


class TestRegisterService:

    def test_register_student(self, service, store, credentials, email_sender):
        result = service.register(payload(STUDENT_PAYLOAD))

        account = store.find_by_email("ada.student@example.com")
        assert account is not None
        assert account.role == Role.STUDENT
        assert account.membership_id == "MBR-000001"
        assert account.password_hash != STUDENT_PAYLOAD["password"]
        assert credentials.verify_password(STUDENT_PAYLOAD["password"], account.password_hash)
        assert account.email_verified is False

        claims = credentials.verify_token(result["access_token"])
        assert (claims.id, claims.email, claims.role) == (account.id, account.email, "Student")
        assert email_sender.verification_codes == [(account.email, account.verification_code)]

    def test_membership_ids_follow_the_sequence(self, service):
        first = service.register(payload(STUDENT_PAYLOAD))
        second = service.register(payload(DOCTOR_PAYLOAD))
        assert first["account"].membership_id == "MBR-000001"
        assert second["account"].membership_id == "MBR-000002"

    @pytest.mark.parametrize("missing", ["admission_year", "year_of_study"])
    def test_invalid_student_creates_no_account(self, service, db, missing):
        with pytest.raises(ValidationError):
            service.register(payload(STUDENT_PAYLOAD, **{missing: None}))
        assert db.query(Account).count() == 0

    @pytest.mark.parametrize("role", ["Doctor", "GlobalNetwork"])
    @pytest.mark.parametrize("missing", ["license_number", "specialty"])
    def test_invalid_professional_creates_no_account(self, service, db, role, missing):
        with pytest.raises(ValidationError):
            service.register(payload(DOCTOR_PAYLOAD, role=role, **{missing: None}))
        assert db.query(Account).count() == 0

    def test_validation_happens_before_hashing(self, service, credentials, monkeypatch):
        calls = []
        monkeypatch.setattr(credentials, "hash_password", lambda password: calls.append(password))

        with pytest.raises(ValidationError):
            service.register(payload(STUDENT_PAYLOAD, year_of_study=None))
        assert calls == []

    def test_duplicate_email_is_a_conflict(self, service, db):
        service.register(payload(STUDENT_PAYLOAD))

        with pytest.raises(ConflictError):
            service.register(payload(DOCTOR_PAYLOAD, email="  ADA.STUDENT@example.COM "))
        assert db.query(Account).count() == 1

    def test_email_failure_does_not_fail_registration(self, service, email_sender, store, monkeypatch):
        def broken(*args):
            raise RuntimeError("smtp down")

        monkeypatch.setattr(email_sender, "send_verification_code", broken)
        result = service.register(payload(STUDENT_PAYLOAD))
        assert store.find_by_id(result["account"].id) is not None


class TestRegisterRoute:

    def test_register_returns_token_and_hides_secrets(self, client):
        response = client.post("/api/v1/auth/register", json=STUDENT_PAYLOAD)
        assert response.status_code == 201

        body = response.json()
        assert body["success"] is True
        account = body["data"]["account"]
        assert account["email"] == "ada.student@example.com"
        assert account["role"] == "Student"
        assert account["admission_year"] == 2022
        assert account["license_number"] is None
        assert body["data"]["access_token"]
        for secret in ("password", "password_hash", "verification_code", "reset_token_hash"):
            assert secret not in account

    def test_missing_role_fields_is_400(self, client):
        data = dict(DOCTOR_PAYLOAD)
        del data["specialty"]
        response = client.post("/api/v1/auth/register", json=data)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["status_code"] == 400
        assert "license_number and specialty" in body["message"]

    def test_duplicate_is_409(self, client):
        client.post("/api/v1/auth/register", json=STUDENT_PAYLOAD)
        response = client.post("/api/v1/auth/register", json=STUDENT_PAYLOAD)

        assert response.status_code == 409
        assert response.json()["message"] == "Email already exists"

    def test_malformed_body_is_422(self, client):
        response = client.post("/api/v1/auth/register", json={"email": "not-an-email"})
        assert response.status_code == 422
        assert response.json()["success"] is False
