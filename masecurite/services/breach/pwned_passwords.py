import logging
import re

from masecurite.core.constants import PWNED_PASSWORDS_API, SHA1_PREFIX_LENGTH
from masecurite.models.breach import PasswordCheckResult
from masecurite.services.breach.base import (
    BreachProvider,
    InvalidQueryError,
    UpstreamError,
    UpstreamSchemaError,
)
from masecurite.services.presentation import format_number

logger = logging.getLogger(__name__)

_SHA1_HEX = re.compile(r"[0-9A-Fa-f]{40}")


def split_sha1(password_hash: str) -> tuple[str, str]:
    """Return (prefix, suffix) of an upper-cased SHA-1 hex digest."""
    if not isinstance(password_hash, str) or not _SHA1_HEX.fullmatch(password_hash):
        raise InvalidQueryError("Password hash must be a 40-character hex SHA-1 digest")
    digest = password_hash.upper()
    return digest[:SHA1_PREFIX_LENGTH], digest[SHA1_PREFIX_LENGTH:]


def pwned_message(count: int) -> str:
    if count:
        return (
            f"Ce mot de passe a été vu {format_number(count)} fois "
            "dans des fuites de données"
        )
    return "Ce mot de passe n'apparaît dans aucune fuite connue"


class PwnedPasswordsProvider(BreachProvider):
    """
    Pwned Passwords range lookup (k-anonymity).

    Only the 5-character hash prefix ever leaves this process; the hash
    itself must never be logged.
    """

    name = "pwned_passwords"

    def lookup(self, query: str) -> PasswordCheckResult:
        return self.check_hash(query)

    def check_hash(self, password_hash: str) -> PasswordCheckResult:
        prefix, suffix = split_sha1(password_hash)

        resp = self._get(f"{PWNED_PASSWORDS_API}/{prefix}")

        if resp.status_code != 200:
            logger.warning("pwned_passwords_lookup status=%s", resp.status_code)
            raise UpstreamError("Password breach service unavailable", resp.status_code)

        count = 0
        for line in resp.text.splitlines():
            hash_suffix, sep, raw_count = line.strip().partition(":")
            if not sep or hash_suffix.upper() != suffix:
                continue
            try:
                count = int(raw_count)
            except ValueError as exc:
                raise UpstreamSchemaError("Unexpected password service response") from exc
            break

        logger.info("pwned_passwords_lookup status=200 pwned=%s", count > 0)
        return PasswordCheckResult(
            pwned=count > 0,
            count=count,
            message=pwned_message(count),
        )
