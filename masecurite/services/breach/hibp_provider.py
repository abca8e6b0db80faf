import logging
from urllib.parse import quote

from pydantic import TypeAdapter, ValidationError

from masecurite.core.constants import HIBP_EMAIL_API
from masecurite.models.breach import BreachRecord, HibpResult
from masecurite.services.breach.base import (
    BreachProvider,
    UpstreamError,
    UpstreamSchemaError,
)

logger = logging.getLogger(__name__)

_BREACH_LIST = TypeAdapter(list[BreachRecord])


class HIBPProvider(BreachProvider):
    """
    Have I Been Pwned email lookup.
    A 404 from HIBP means "no breaches", not a failure.
    """

    name = "hibp"

    def lookup(self, query: str) -> HibpResult:
        return self.check_email(query)

    def check_email(self, email: str) -> HibpResult:
        api_key = self.require_api_key()
        url = f"{HIBP_EMAIL_API}/{quote(email, safe='')}"

        resp = self._get(
            url,
            headers={"hibp-api-key": api_key},
            params={"truncateResponse": "false"},
        )

        # ---------- NO BREACH ----------
        if resp.status_code == 404:
            logger.info("hibp_lookup status=404 breaches=0")
            return HibpResult()

        if resp.status_code != 200:
            logger.warning("hibp_lookup status=%s", resp.status_code)
            raise UpstreamError("Email breach service unavailable", resp.status_code)

        try:
            breaches = _BREACH_LIST.validate_python(resp.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("hibp_lookup schema_mismatch error=%s", type(exc).__name__)
            raise UpstreamSchemaError("Unexpected breach service response") from exc

        logger.info("hibp_lookup status=200 breaches=%s", len(breaches))
        return HibpResult(breaches=tuple(breaches))
