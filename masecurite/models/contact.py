from typing import Optional

from pydantic import BaseModel


class ContactRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None

    def missing_required(self) -> list[str]:
        return [
            field
            for field in ("name", "email", "subject", "message")
            if not (getattr(self, field) or "").strip()
        ]
