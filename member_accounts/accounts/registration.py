"""
Registration validation.

A signup payload is resolved into exactly one role variant before anything
is hashed or stored. Fields that belong to another role never make it
into the record.
"""
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Tuple, Type, Union

from ..exceptions import ValidationError
from .models import Role
from .schemas import RegistrationRequest
from .store import normalize_email

PROFILE_FIELDS = ("phone", "gender", "institution", "country", "bio")
ROLE_SPECIFIC_COLUMNS = ("admission_year", "year_of_study", "license_number", "specialty")


@dataclass(frozen=True)
class StudentFields:
    required: ClassVar[Tuple[str, ...]] = ("admission_year", "year_of_study")
    audience: ClassVar[str] = "students"

    admission_year: int
    year_of_study: int


@dataclass(frozen=True)
class DoctorFields:
    required: ClassVar[Tuple[str, ...]] = ("license_number", "specialty")
    audience: ClassVar[str] = "doctors"

    license_number: str
    specialty: str


@dataclass(frozen=True)
class GlobalNetworkFields(DoctorFields):
    audience: ClassVar[str] = "global network members"


@dataclass(frozen=True)
class PlainFields:
    required: ClassVar[Tuple[str, ...]] = ()
    audience: ClassVar[str] = "members"


RoleFields = Union[StudentFields, DoctorFields, GlobalNetworkFields, PlainFields]

ROLE_VARIANTS: Dict[Role, Type[RoleFields]] = {
    Role.STUDENT: StudentFields,
    Role.DOCTOR: DoctorFields,
    Role.GLOBAL_NETWORK: GlobalNetworkFields,
    Role.MEMBER: PlainFields,
}


@dataclass(frozen=True)
class RegistrationRecord:
    """Normalized creation record; ``password`` is held only until hashed."""
    email: str
    password: str = field(repr=False)
    full_name: str
    role: Role
    role_fields: RoleFields
    profile: Dict[str, Any] = field(default_factory=dict)

    def role_columns(self) -> Dict[str, Optional[Any]]:
        """Column values for every role-specific field, None where not applicable."""
        columns = dict.fromkeys(ROLE_SPECIFIC_COLUMNS)
        for name in self.role_fields.required:
            columns[name] = getattr(self.role_fields, name)
        return columns


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_registration(payload: RegistrationRequest) -> RegistrationRecord:
    """
    Resolve the payload's role variant.

    Raises:
        ValidationError: If a field required by the role is missing
    """
    variant = ROLE_VARIANTS.get(payload.role)
    if variant is None:
        raise ValidationError(f"Unsupported role: {payload.role}")

    if any(_is_missing(getattr(payload, name)) for name in variant.required):
        raise ValidationError(
            f"{' and '.join(variant.required)} are compulsory for {variant.audience}"
        )

    role_fields = variant(**{name: getattr(payload, name) for name in variant.required})
    profile = {name: getattr(payload, name) for name in PROFILE_FIELDS if getattr(payload, name) is not None}

    return RegistrationRecord(
        email=normalize_email(payload.email),
        password=payload.password,
        full_name=payload.full_name.strip(),
        role=payload.role,
        role_fields=role_fields,
        profile=profile,
    )
