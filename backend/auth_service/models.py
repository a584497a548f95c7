"""
Organizer model for the authentication service.

This defines what an "organizer" looks like once it has been read from the
`organizer` table. The password hash is kept on the object so login can
verify it, but to_public() never includes it.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
VALID_STATUSES = (STATUS_PENDING, STATUS_APPROVED)


@dataclass
class Organizer:
    organizer_id: int
    organizer_name: str
    fname: str
    lname: str
    email: str
    password_hash: str
    status: str = STATUS_PENDING
    contact_no: Optional[str] = None

    @property
    def is_approved(self) -> bool:
        return self.status == STATUS_APPROVED

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Organizer":
        """Build an Organizer from a DictCursor row."""
        return cls(
            organizer_id=row["organizer_id"],
            organizer_name=row["organizer_name"],
            fname=row["fname"],
            lname=row["lname"],
            email=row["email"],
            password_hash=row["password_hash"],
            status=row["status"],
            contact_no=row.get("contact_no"),
        )

    def to_public(self) -> Dict[str, Any]:
        """
        JSON-safe representation. The username is an alias of the email;
        the password hash is left out.
        """
        return {
            "organizer_id": self.organizer_id,
            "organizer_name": self.organizer_name,
            "fname": self.fname,
            "lname": self.lname,
            "username": self.email,
            "email": self.email,
            "contact_no": self.contact_no,
            "status": self.status,
        }
