"""
French display helpers for breach results.

Labels and severities shown next to HIBP data classes and LeakCheck
fields on the breach checker page.
"""

from __future__ import annotations

from typing import Iterable

from masecurite.models.breach import BreachRecord, DataClassBadge

NARROW_NBSP = "\u202f"

MONTHS_FR = [
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
]

DATA_CLASS_LABELS = {
    "Email addresses": "Adresses e-mail",
    "Passwords": "Mots de passe",
    "Usernames": "Noms d'utilisateur",
    "Names": "Noms",
    "Phone numbers": "Numéros de téléphone",
    "Physical addresses": "Adresses physiques",
    "IP addresses": "Adresses IP",
    "Dates of birth": "Dates de naissance",
    "Credit cards": "Cartes de crédit",
    "Bank account numbers": "Numéros de compte bancaire",
    "Social security numbers": "Numéros de sécurité sociale",
    "Genders": "Genres",
    "Employers": "Employeurs",
    "Job titles": "Titres de poste",
    "Geographic locations": "Localisations géographiques",
}

CRITICAL_DATA_CLASSES = {
    "Passwords",
    "Credit cards",
    "Bank account numbers",
    "Social security numbers",
}
HIGH_DATA_CLASSES = {
    "Email addresses",
    "Phone numbers",
    "Physical addresses",
    "Names",
    "Dates of birth",
}

FIELD_LABELS = {
    "username": "Nom d'utilisateur",
    "password": "Mot de passe",
    "first_name": "Prénom",
    "last_name": "Nom de famille",
    "name": "Nom complet",
    "email": "E-mail",
    "phone": "Téléphone",
    "address": "Adresse",
    "dob": "Date de naissance",
    "zip": "Code postal",
    "ip": "Adresse IP",
    "hash": "Hash de mot de passe",
}

CRITICAL_FIELDS = {"password", "hash"}
HIGH_FIELDS = {"phone", "address", "dob", "ssn", "credit_card"}
MEDIUM_FIELDS = {"username", "first_name", "last_name", "name", "ip"}


def format_number(value: int) -> str:
    """Group thousands the fr-FR way: 3861493 -> '3 861 493'."""
    return f"{value:,}".replace(",", NARROW_NBSP)


def format_breach_date(date_str: str | None) -> str:
    if not date_str:
        return "Date inconnue"
    parts = date_str.split("-")
    year = parts[0]
    if len(parts) < 2:
        return year
    try:
        month_index = int(parts[1]) - 1
    except ValueError:
        return year
    if 0 <= month_index < len(MONTHS_FR):
        return f"{MONTHS_FR[month_index]} {year}"
    return year


def translate_data_class(data_class: str) -> str:
    return DATA_CLASS_LABELS.get(data_class, data_class)


def data_class_severity(data_class: str) -> str:
    if data_class in CRITICAL_DATA_CLASSES:
        return "critical"
    if data_class in HIGH_DATA_CLASSES:
        return "high"
    return "medium"


def translate_field(field: str) -> str:
    return FIELD_LABELS.get(field, field.replace("_", " ", 1))


def field_severity(field: str) -> str:
    if field in CRITICAL_FIELDS:
        return "critical"
    if field in HIGH_FIELDS:
        return "high"
    if field in MEDIUM_FIELDS:
        return "medium"
    return "low"


def data_class_badges(breaches: Iterable[BreachRecord]) -> list[DataClassBadge]:
    seen: dict[str, None] = {}
    for breach in breaches:
        for data_class in breach.data_classes:
            seen.setdefault(data_class, None)

    return [
        DataClassBadge(
            name=data_class,
            label=translate_data_class(data_class),
            severity=data_class_severity(data_class),
        )
        for data_class in seen
    ]
