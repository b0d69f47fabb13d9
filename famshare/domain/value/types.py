"""Domain value objects for famshare.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and normalization.
"""

import re
from enum import Enum

from famshare.domain.value.common import ValueObject

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class MemberRole(str, Enum):
    """Role a user holds on an account."""

    ADMIN = "admin"
    MEMBER = "member"


class BillingState(str, Enum):
    """Billing lifecycle of an account."""

    TRIAL = "trial"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"


class InvitationStatus(str, Enum):
    """Status of an invitation, derived from its timestamps.

    Revoked invitations are deleted, so they have no status of their own.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"
    ORPHANED = "orphaned"


class TargetKind(str, Enum):
    """Channel an invitation is addressed through."""

    EMAIL = "email"
    PHONE = "phone"


class SelectionSource(str, Enum):
    """Which rule picked the active account."""

    PREFERENCE = "preference"
    OWNED = "owned"
    SHARED = "shared"
    NONE = "none"


class SessionEvent(str, Enum):
    """Session changes reported by the identity provider."""

    SIGNED_IN = "signed_in"
    TOKEN_REFRESHED = "token_refreshed"
    USER_UPDATED = "user_updated"
    SIGNED_OUT = "signed_out"


def normalize_email(raw: str) -> str:
    """Trim and lowercase an email address."""
    return raw.strip().lower()


def normalize_phone(raw: str, default_country_code: str) -> str:
    """Normalize a phone number to E.164.

    Handles the common local forms:
    - 00972501234567 -> +972501234567
    - 050-123-4567   -> +972501234567 (leading 0 replaced by country code)
    - 972501234567   -> +972501234567

    Args:
        raw: Phone number as typed by a user
        default_country_code: Country code used for national numbers

    Returns:
        Phone number in E.164 format

    Raises:
        ValueError: If the number has too few or too many digits
    """
    value = raw.strip()
    if value.startswith("00"):
        value = "+" + value[2:]
    has_plus = value.startswith("+")
    digits = re.sub(r"\D", "", value)

    if not has_plus:
        if digits.startswith("0"):
            digits = default_country_code + digits[1:]
        elif not digits.startswith(default_country_code):
            digits = default_country_code + digits

    if not 8 <= len(digits) <= 15:
        raise ValueError(f"Invalid phone number: {raw}")
    return f"+{digits}"


class InvitationTarget(ValueObject):
    """Normalized email address or phone number an invitation is sent to.

    Two targets are equal when kind and normalized value are equal, which is
    what makes target matching case-insensitive.
    """

    kind: TargetKind
    value: str

    @classmethod
    def parse(cls, raw: str, default_country_code: str = "972") -> "InvitationTarget":
        """Build a target from user input.

        Anything containing "@" is treated as an email address.

        Raises:
            ValueError: If the input is neither a valid email nor a valid phone
        """
        if "@" in raw:
            email = normalize_email(raw)
            if not EMAIL_PATTERN.match(email):
                raise ValueError(f"Invalid email address: {raw}")
            return cls(kind=TargetKind.EMAIL, value=email)
        return cls(
            kind=TargetKind.PHONE, value=normalize_phone(raw, default_country_code)
        )

    @classmethod
    def identifiers_of(
        cls, email: str | None, phone: str | None, default_country_code: str = "972"
    ) -> list["InvitationTarget"]:
        """All targets a user with the given email/phone can be reached at.

        Unparseable values are skipped.
        """
        targets = []
        for raw in (email, phone):
            if not raw:
                continue
            try:
                targets.append(cls.parse(raw, default_country_code))
            except ValueError:
                continue
        return targets

    def __str__(self) -> str:
        return self.value
