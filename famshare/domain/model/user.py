"""User entity.

Users are owned by the external identity provider; this core only reads them.
"""

from typing import Optional

from famshare.domain.model.common import DomainModel
from famshare.domain.value import InvitationTarget, UserId


class User(DomainModel):
    """Authenticated person as reported by the identity provider."""

    id: UserId
    email: Optional[str] = None
    display_name: str = ""
    phone: Optional[str] = None

    def identifiers(self, default_country_code: str = "972") -> list[InvitationTarget]:
        """Normalized email/phone targets this user can be invited through."""
        return InvitationTarget.identifiers_of(
            self.email, self.phone, default_country_code
        )

    @property
    def name_for_display(self) -> str:
        """Display name, falling back to the email local part."""
        if self.display_name:
            return self.display_name
        if self.email:
            return self.email.split("@")[0]
        return "User"
