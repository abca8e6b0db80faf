from fastapi import Depends

from masecurite.core.config import Settings, get_settings
from masecurite.services.breach.hibp_provider import HIBPProvider
from masecurite.services.breach.leakcheck_provider import LeakCheckProvider
from masecurite.services.breach.pwned_passwords import PwnedPasswordsProvider


def get_hibp_provider(settings: Settings = Depends(get_settings)) -> HIBPProvider:
    """
    Returns a new provider instance per request.
    """
    return HIBPProvider(api_key=settings.hibp_api_key, timeout=settings.http_timeout)


def get_pwned_passwords_provider(
    settings: Settings = Depends(get_settings),
) -> PwnedPasswordsProvider:
    return PwnedPasswordsProvider(timeout=settings.http_timeout)


def get_leakcheck_provider(settings: Settings = Depends(get_settings)) -> LeakCheckProvider:
    return LeakCheckProvider(api_key=settings.leakcheck_api_key, timeout=settings.http_timeout)
