import logging
from urllib.parse import quote

from pydantic import ValidationError

from masecurite.core.constants import DEFAULT_LEAKCHECK_TYPE, LEAKCHECK_API
from masecurite.models.breach import (
    LeakCheckResult,
    LeakCheckUpstreamResponse,
    LeakEntry,
)
from masecurite.services.breach.base import (
    BreachProvider,
    UpstreamError,
    UpstreamSchemaError,
)

logger = logging.getLogger(__name__)


class LeakCheckProvider(BreachProvider):
    """
    LeakCheck.io v2 search.

    Results may contain plaintext passwords; entries are returned as-is
    and masking happens at the presentation layer.
    """

    name = "leakcheck"

    def lookup(self, query: str) -> LeakCheckResult:
        return self.search(query, DEFAULT_LEAKCHECK_TYPE)

    def search(self, query: str, query_type: str = DEFAULT_LEAKCHECK_TYPE) -> LeakCheckResult:
        api_key = self.require_api_key()

        resp = self._get(
            f"{LEAKCHECK_API}/{quote(query, safe='')}",
            headers={
                "Accept": "application/json",
                "X-API-Key": api_key,
            },
            params={"type": query_type},
        )

        if resp.status_code != 200:
            logger.warning("leakcheck_lookup status=%s", resp.status_code)
            raise UpstreamError("LeakCheck API error", resp.status_code)

        try:
            payload = LeakCheckUpstreamResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("leakcheck_lookup schema_mismatch error=%s", type(exc).__name__)
            raise UpstreamSchemaError("Unexpected LeakCheck response") from exc

        # a 200 with success=false (quota, bad query) is unavailable data, not zero leaks
        if not payload.success:
            logger.warning("leakcheck_lookup status=200 success=false")
            raise UpstreamError(payload.error or "LeakCheck API error", resp.status_code)

        entries = tuple(LeakEntry.from_upstream(item) for item in payload.result)

        result = LeakCheckResult(
            success=payload.success,
            found=payload.found,
            quota=payload.quota,
            entries=entries,
            error=payload.error,
        )

        logger.info(
            "leakcheck_lookup status=200 found=%s entries=%s passwords=%s",
            result.found,
            len(entries),
            result.password_count,
        )
        return result
