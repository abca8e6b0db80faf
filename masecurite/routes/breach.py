import logging

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from masecurite.core.constants import EMAIL_MAX_LENGTH
from masecurite.models.breach import (
    EmailExposureReport,
    EmailLookupRequest,
    HibpResult,
    LeakCheckRequest,
    LeakCheckResult,
    PasswordCheckResult,
    PasswordLookupRequest,
)
from masecurite.services.breach.aggregator import build_exposure_report, check_email_exposure
from masecurite.services.breach.base import (
    BreachServiceError,
    InvalidQueryError,
    MissingConfigurationError,
)
from masecurite.services.breach.hibp_provider import HIBPProvider
from masecurite.services.breach.leakcheck_provider import LeakCheckProvider
from masecurite.services.breach.manager import (
    get_hibp_provider,
    get_leakcheck_provider,
    get_pwned_passwords_provider,
)
from masecurite.services.breach.pwned_passwords import PwnedPasswordsProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/breach", tags=["Breach Checker"])


def error_response(message: str, status_code: int, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


async def breach_validation_error_handler(request: Request, exc: RequestValidationError):
    """
    Malformed bodies on /breach/* (non-string email or hash, invalid JSON)
    are input errors: 400 in the gateway's own error shape, not FastAPI's 422.
    """
    path = request.url.path
    if not path.startswith(router.prefix):
        return await request_validation_exception_handler(request, exc)

    logger.info("breach_request_invalid path=%s errors=%s", path, len(exc.errors()))
    if path == f"{router.prefix}/leakcheck":
        return _leakcheck_failure("Invalid request body", 400)
    return error_response("Invalid request body", 400)


def normalize_email_input(raw_email: str | None) -> str:
    value = (raw_email or "").strip()
    if not value:
        raise InvalidQueryError("Email is required")

    if len(value) > EMAIL_MAX_LENGTH:
        raise InvalidQueryError(f"Email must be <= {EMAIL_MAX_LENGTH} characters")

    try:
        parsed = validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise InvalidQueryError("Invalid email format")

    return parsed.normalized.lower()


# =========================================================
# HIBP
# =========================================================

@router.post("/hibp", response_model=HibpResult)
def check_hibp(
    payload: EmailLookupRequest,
    provider: HIBPProvider = Depends(get_hibp_provider),
):
    try:
        email = normalize_email_input(payload.email)
    except InvalidQueryError as exc:
        return error_response(str(exc), 400)

    try:
        return provider.check_email(email)
    except MissingConfigurationError:
        return error_response("Breach service not configured", 500)
    except BreachServiceError:
        return error_response("Email breach service unavailable", 500)


# =========================================================
# PWNED PASSWORDS
# =========================================================

@router.post("/password", response_model=PasswordCheckResult)
def check_password(
    payload: PasswordLookupRequest,
    provider: PwnedPasswordsProvider = Depends(get_pwned_passwords_provider),
):
    if not payload.passwordHash:
        return error_response("Password hash is required", 400)

    try:
        return provider.check_hash(payload.passwordHash.strip())
    except InvalidQueryError as exc:
        return error_response(str(exc), 400)
    except BreachServiceError:
        return error_response("Password breach service unavailable", 500)


# =========================================================
# LEAKCHECK
# =========================================================

@router.post("/leakcheck", response_model=LeakCheckResult)
def check_leakcheck(
    payload: LeakCheckRequest,
    provider: LeakCheckProvider = Depends(get_leakcheck_provider),
):
    query = payload.resolved_query
    if not query:
        return _leakcheck_failure("Query is required", 400)

    try:
        return provider.search(query, payload.resolved_type)
    except MissingConfigurationError:
        return _leakcheck_failure("API key not configured", 500)
    except BreachServiceError as exc:
        return _leakcheck_failure(str(exc), 500)


def _leakcheck_failure(message: str, status_code: int) -> JSONResponse:
    # fail closed: callers must read this as "data unavailable", not "no leaks"
    body = LeakCheckResult.unavailable(message).model_dump(mode="json", by_alias=True)
    return JSONResponse(status_code=status_code, content=body)


# =========================================================
# AGGREGATED EMAIL CHECK
# =========================================================

@router.post("/email", response_model=EmailExposureReport)
def check_email(
    payload: EmailLookupRequest,
    hibp: HIBPProvider = Depends(get_hibp_provider),
    leakcheck: LeakCheckProvider = Depends(get_leakcheck_provider),
):
    try:
        email = normalize_email_input(payload.email)
    except InvalidQueryError as exc:
        return error_response(str(exc), 400)

    try:
        result = check_email_exposure(email, hibp=hibp, leakcheck=leakcheck)
    except Exception:
        logger.exception("email_exposure_failed")
        return error_response("Search failed, please try again", 500)

    return build_exposure_report(result)
