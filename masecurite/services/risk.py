from __future__ import annotations

from typing import Sequence

from masecurite.core.constants import DataValueWeight, HIGH_BREACH_THRESHOLD, Severity
from masecurite.models.breach import BreachRecord, LeakEntry


def classify_severity(
    breach_count: int,
    has_plaintext_passwords: bool,
    has_personal_info: bool,
) -> Severity:
    # order matters: plaintext exposure dominates everything else
    if has_plaintext_passwords:
        return Severity.CRITICAL
    if breach_count > HIGH_BREACH_THRESHOLD or has_personal_info:
        return Severity.HIGH
    if breach_count > 0:
        return Severity.MEDIUM
    return Severity.SAFE


def estimate_data_value(
    breaches: Sequence[BreachRecord] = (),
    entries: Sequence[LeakEntry] = (),
) -> int:
    """
    Nominal dark-web "street value" in euros, for display only.
    Each signal counts once, whatever the number of records carrying it.
    """
    value = 0

    if breaches:
        value += DataValueWeight.BREACH.value
    if any(entry.password for entry in entries):
        value += DataValueWeight.PASSWORD.value
    if any(entry.phone for entry in entries):
        value += DataValueWeight.PHONE.value
    if any(entry.address for entry in entries):
        value += DataValueWeight.ADDRESS.value
    if any(entry.username for entry in entries):
        value += DataValueWeight.USERNAME.value

    return value
