"""
Display masking for leaked personal data.

These transforms are lossy and one-way. Every function accepts None or an
empty string and returns "".
"""

from __future__ import annotations

import re
from typing import Optional

from masecurite.models.breach import LeakEntry

PASSWORD_MAX_STARS = 8

_WHITESPACE = re.compile(r"\s")


def mask_email(email: Optional[str]) -> str:
    if not email:
        return ""
    user, sep, domain = email.partition("@")
    if not sep or not domain:
        return email[:3] + "***"
    label, _, suffix = domain.partition(".")
    return f"{user[:3]}***@{label[:3]}***.{suffix}"


def mask_password(password: Optional[str]) -> str:
    if not password:
        return ""
    if len(password) <= 4:
        return "****"
    stars = "*" * min(len(password) - 4, PASSWORD_MAX_STARS)
    return password[:2] + stars + password[-2:]


def mask_phone(phone: Optional[str]) -> str:
    if not phone:
        return ""
    cleaned = _WHITESPACE.sub("", phone)
    if len(cleaned) < 8:
        return "***" + cleaned[-4:]
    return cleaned[:4] + "****" + cleaned[-4:]


def mask_name(name: Optional[str]) -> str:
    if not name:
        return ""
    return " ".join(part[0] + "***" if part else "***" for part in name.split(" "))


def mask_address(address: Optional[str]) -> str:
    if not address:
        return ""
    if len(address) <= 15:
        return address[:8] + "***"
    tail = ", " + address[-5:] if len(address) > 25 else ""
    return address[:12] + "***" + tail


def _masked(value: Optional[str], mask) -> Optional[str]:
    return mask(value) if value else value


def mask_leak_entry(entry: LeakEntry) -> LeakEntry:
    """Copy of `entry` with every sensitive field masked; None stays None."""
    return entry.model_copy(
        update={
            "email": _masked(entry.email, mask_email),
            "password": _masked(entry.password, mask_password),
            "phone": _masked(entry.phone, mask_phone),
            "name": _masked(entry.name, mask_name),
            "first_name": _masked(entry.first_name, mask_name),
            "last_name": _masked(entry.last_name, mask_name),
            "address": _masked(entry.address, mask_address),
        }
    )
