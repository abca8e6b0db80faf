from __future__ import annotations

from enum import Enum


SERVICE_NAME = "masecurite-backend"
SERVICE_VERSION = "1.0.0"

USER_AGENT = "MaSecurite-BreachChecker"

HIBP_EMAIL_API = "https://haveibeenpwned.com/api/v3/breachedaccount"
PWNED_PASSWORDS_API = "https://api.pwnedpasswords.com/range"
LEAKCHECK_API = "https://leakcheck.io/api/v2/query"
RESEND_EMAILS_API = "https://api.resend.com/emails"

EMAIL_MAX_LENGTH = 254
SHA1_PREFIX_LENGTH = 5

DEFAULT_LEAKCHECK_TYPE = "email"


CORS_ALLOW_ORIGINS = ["*"]
CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type", "Authorization", "X-Client-Info", "Apikey"]


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    SAFE = "safe"


HIGH_BREACH_THRESHOLD = 5


class DataValueWeight(int, Enum):
    BREACH = 1
    PASSWORD = 50
    PHONE = 30
    ADDRESS = 25
    USERNAME = 10


# USD per 1k tokens
OPENAI_COST_PER_1K_TOKENS: dict[str, float] = {
    "gpt-4o": 0.0025,
}
OPENAI_DEFAULT_COST_PER_1K_TOKENS = 0.00015

DEFAULT_FEATURED_IMAGE = (
    "https://images.pexels.com/photos/60504/security-protection-anti-virus-software-60504.jpeg"
)

CONTACT_SENDER = "MaSécurité <noreply@masecurite.be>"
CONTACT_DEFAULT_RECIPIENTS = ("info@masecurite.be",)
