"""Patient Info Value Object.

Contact and insurance details captured in the verification step.
"""

import re
from dataclasses import asdict, dataclass, replace
from typing import Any

from app.core.domain.value_objects import ValueObject

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

# Form field -> message shown when the field is blank.
REQUIRED_FIELD_MESSAGES: dict[str, str] = {
    "full_name": "Full name is required",
    "email": "Email is required",
    "phone": "Phone number is required",
    "date_of_birth": "Date of birth is required",
    "address": "Address is required",
    "insurance": "Health insurance information is required",
}
INVALID_EMAIL_MESSAGE = "Email is invalid"


@dataclass(frozen=True)
class PatientInfo(ValueObject):
    """Patient details as typed in the form.

    Instances may hold incomplete values while the patient is still typing;
    use ``validate()`` to get per-field errors.
    """

    full_name: str = ""
    email: str = ""
    phone: str = ""
    date_of_birth: str = ""
    address: str = ""
    insurance: str = ""

    @classmethod
    def field_names(cls) -> list[str]:
        return list(REQUIRED_FIELD_MESSAGES)

    def validate(self) -> dict[str, str]:
        """Return a mapping of field name to error message (empty when valid)."""
        errors: dict[str, str] = {}
        for field_name, message in REQUIRED_FIELD_MESSAGES.items():
            if not getattr(self, field_name).strip():
                errors[field_name] = message

        if "email" not in errors and not EMAIL_PATTERN.search(self.email):
            errors["email"] = INVALID_EMAIL_MESSAGE

        return errors

    def is_valid(self) -> bool:
        return not self.validate()

    def with_field(self, field_name: str, value: str) -> "PatientInfo":
        """Return a copy with one field replaced.

        Raises:
            ValueError: If ``field_name`` is not a patient info field.
        """
        if field_name not in REQUIRED_FIELD_MESSAGES:
            raise ValueError(f"Unknown patient info field: {field_name}")
        return replace(self, **{field_name: value})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
