from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field

from masecurite.core.constants import DEFAULT_LEAKCHECK_TYPE


# =========================================================
# REQUESTS
# =========================================================

class EmailLookupRequest(BaseModel):
    email: Optional[str] = None


class PasswordLookupRequest(BaseModel):
    passwordHash: Optional[str] = None


class LeakCheckRequest(BaseModel):
    query: Optional[str] = None
    email: Optional[str] = None
    type: Optional[str] = None

    @property
    def resolved_query(self) -> str:
        return (self.query or self.email or "").strip()

    @property
    def resolved_type(self) -> str:
        return (self.type or DEFAULT_LEAKCHECK_TYPE).strip().lower()


# =========================================================
# HIBP
# =========================================================

class BreachRecord(BaseModel):
    """One HIBP breach, trimmed to the fields the site displays."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(alias="Name")
    title: str = Field(default="", alias="Title")
    domain: str = Field(default="", alias="Domain")
    breach_date: Optional[str] = Field(default=None, alias="BreachDate")
    pwn_count: int = Field(default=0, alias="PwnCount")
    data_classes: Tuple[str, ...] = Field(default=(), alias="DataClasses")
    is_verified: bool = Field(default=False, alias="IsVerified")


class HibpResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    breaches: Tuple[BreachRecord, ...] = ()

    @computed_field
    @property
    def count(self) -> int:
        return len(self.breaches)


# =========================================================
# PWNED PASSWORDS
# =========================================================

class PasswordCheckResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    pwned: bool
    count: int
    message: str


# =========================================================
# LEAKCHECK (upstream payload)
# =========================================================

class LeakCheckSource(BaseModel):
    name: Optional[str] = None
    breach_date: Optional[str] = None


class LeakCheckUpstreamItem(BaseModel):
    source: Optional[LeakCheckSource] = None
    email: Optional[str] = None
    password: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    dob: Optional[str] = None
    fields: List[str] = Field(default_factory=list)


class LeakCheckUpstreamResponse(BaseModel):
    success: bool
    found: int = 0
    quota: int = 0
    result: List[LeakCheckUpstreamItem] = Field(default_factory=list)
    error: Optional[str] = None


# =========================================================
# LEAKCHECK (normalized)
# =========================================================

class LeakEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = "Unknown"
    breach_date: Optional[str] = Field(default=None, alias="breachDate")
    email: Optional[str] = None
    password: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    dob: Optional[str] = None
    fields: Tuple[str, ...] = ()

    @classmethod
    def from_upstream(cls, item: LeakCheckUpstreamItem) -> "LeakEntry":
        source = item.source or LeakCheckSource()
        return cls(
            source=source.name or "Unknown",
            breach_date=source.breach_date or None,
            email=item.email or None,
            password=item.password or None,
            username=item.username or None,
            first_name=item.first_name or None,
            last_name=item.last_name or None,
            name=item.name or None,
            phone=item.phone or None,
            address=item.address or None,
            dob=item.dob or None,
            fields=tuple(item.fields),
        )


class LeakCheckResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    found: int = 0
    quota: int = 0
    entries: Tuple[LeakEntry, ...] = ()
    error: Optional[str] = None

    @classmethod
    def unavailable(cls, error: str) -> "LeakCheckResult":
        return cls(success=False, error=error)

    @computed_field
    @property
    def fields(self) -> List[str]:
        seen: dict[str, None] = {}
        for entry in self.entries:
            for field in entry.fields:
                seen.setdefault(field, None)
        return list(seen)

    @computed_field(alias="passwordCount")
    @property
    def password_count(self) -> int:
        return sum(1 for entry in self.entries if entry.password)

    @computed_field(alias="hasPasswords")
    @property
    def has_passwords(self) -> bool:
        return self.password_count > 0


# =========================================================
# AGGREGATE
# =========================================================

class DataClassBadge(BaseModel):
    name: str
    label: str
    severity: str


class AggregatedResult(BaseModel):
    """
    HIBP breaches and LeakCheck entries for one email.

    Every count is derived from the two collections on access.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    breaches: Tuple[BreachRecord, ...] = ()
    leak_check: LeakCheckResult = Field(alias="leakCheck")

    @computed_field
    @property
    def count(self) -> int:
        return len(self.breaches)

    @computed_field(alias="passwordCount")
    @property
    def password_count(self) -> int:
        return sum(1 for entry in self.leak_check.entries if entry.password)

    @computed_field(alias="phoneCount")
    @property
    def phone_count(self) -> int:
        return sum(1 for entry in self.leak_check.entries if entry.phone)

    @computed_field(alias="addressCount")
    @property
    def address_count(self) -> int:
        return sum(1 for entry in self.leak_check.entries if entry.address)

    @property
    def has_personal_info(self) -> bool:
        return any(
            entry.phone or entry.address or entry.dob
            for entry in self.leak_check.entries
        )


class EmailExposureReport(BaseModel):
    """Aggregated result enriched for display (masked entries, labels)."""

    model_config = ConfigDict(populate_by_name=True)

    breaches: List[BreachRecord]
    count: int
    leak_check: LeakCheckResult = Field(alias="leakCheck")
    password_count: int = Field(alias="passwordCount")
    phone_count: int = Field(alias="phoneCount")
    address_count: int = Field(alias="addressCount")
    severity: str
    data_value: int = Field(alias="dataValue")
    data_value_display: str = Field(alias="dataValueDisplay")
    data_classes: List[DataClassBadge] = Field(alias="dataClasses")
