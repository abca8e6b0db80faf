from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait

from masecurite.core.constants import DEFAULT_LEAKCHECK_TYPE
from masecurite.models.breach import AggregatedResult, EmailExposureReport
from masecurite.services.breach.base import UpstreamError
from masecurite.services.breach.hibp_provider import HIBPProvider
from masecurite.services.breach.leakcheck_provider import LeakCheckProvider
from masecurite.services.masking import mask_leak_entry
from masecurite.services.presentation import data_class_badges, format_number
from masecurite.services.risk import classify_severity, estimate_data_value

logger = logging.getLogger(__name__)


def check_email_exposure(
    email: str,
    hibp: HIBPProvider,
    leakcheck: LeakCheckProvider,
) -> AggregatedResult:
    """
    Run the HIBP and LeakCheck lookups concurrently and merge them.

    Both lookups always run to completion. If either one raised, the first
    failure is re-raised and no partial result is returned. A LeakCheck
    result with success=false is a failure too.
    """
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="breach-lookup") as pool:
        hibp_future = pool.submit(hibp.check_email, email)
        leak_future = pool.submit(leakcheck.search, email, DEFAULT_LEAKCHECK_TYPE)
        wait([hibp_future, leak_future])

    hibp_result = hibp_future.result()
    leak_result = leak_future.result()

    if not leak_result.success:
        raise UpstreamError(leak_result.error or "LeakCheck data unavailable")

    return AggregatedResult(
        breaches=hibp_result.breaches,
        leak_check=leak_result,
    )


def build_exposure_report(result: AggregatedResult) -> EmailExposureReport:
    severity = classify_severity(
        breach_count=result.count,
        has_plaintext_passwords=result.password_count > 0,
        has_personal_info=result.has_personal_info,
    )
    data_value = estimate_data_value(result.breaches, result.leak_check.entries)

    masked_leak_check = result.leak_check.model_copy(
        update={
            "entries": tuple(mask_leak_entry(e) for e in result.leak_check.entries),
        }
    )

    logger.info(
        "email_exposure breaches=%s leaks=%s severity=%s",
        result.count,
        len(result.leak_check.entries),
        severity.value,
    )

    return EmailExposureReport(
        breaches=list(result.breaches),
        count=result.count,
        leak_check=masked_leak_check,
        password_count=result.password_count,
        phone_count=result.phone_count,
        address_count=result.address_count,
        severity=severity.value,
        data_value=data_value,
        data_value_display=f"{format_number(data_value)} €",
        data_classes=data_class_badges(result.breaches),
    )
