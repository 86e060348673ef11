"""
Shared payloads and test doubles.
"""
from datetime import datetime
from typing import List, Tuple

STUDENT_PAYLOAD = {
    "email": "Ada.Student@Example.com",
    "password": "StudentPass123!",
    "full_name": "Ada Student",
    "role": "Student",
    "admission_year": 2022,
    "year_of_study": 3,
    "institution": "University of Lagos",
}

DOCTOR_PAYLOAD = {
    "email": "grace.doctor@example.com",
    "password": "DoctorPass123!",
    "full_name": "Grace Doctor",
    "role": "Doctor",
    "license_number": "MDCN-44821",
    "specialty": "Cardiology",
}


class RecordingEmailSender:
    """Email sender test double that keeps every message in memory."""

    def __init__(self):
        self.verification_codes: List[Tuple[str, str]] = []
        self.reset_links: List[Tuple[str, str, datetime]] = []
        self.password_changed: List[str] = []

    def send_verification_code(self, email, full_name, code):
        self.verification_codes.append((email, code))

    def send_password_reset(self, email, full_name, reset_url, expires_at):
        self.reset_links.append((email, reset_url, expires_at))

    def send_password_changed(self, email, full_name):
        self.password_changed.append(email)

    def last_reset_token(self) -> str:
        return self.reset_links[-1][1].split("token=", 1)[1]

    def last_code_for(self, email: str) -> str:
        return [code for address, code in self.verification_codes if address == email][-1]


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
