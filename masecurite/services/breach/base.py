import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests

from masecurite.core.constants import USER_AGENT

logger = logging.getLogger(__name__)


class BreachServiceError(Exception):
    """Base class for breach lookup failures."""


class InvalidQueryError(BreachServiceError, ValueError):
    pass


class MissingConfigurationError(BreachServiceError):
    pass


class UpstreamError(BreachServiceError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamSchemaError(UpstreamError):
    """Upstream answered 2xx but the body does not have the expected shape."""


class BreachProvider(ABC):
    """
    Shared plumbing for the upstream breach APIs.

    API keys are sent as headers and must NEVER be logged.
    """

    name = "breach"

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 8.0,
        user_agent: str = USER_AGENT,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.user_agent = user_agent

    @abstractmethod
    def lookup(self, query: str):
        """
        Run the provider's lookup for one query (email or SHA-1 digest).
        Raises BreachServiceError subclasses; never returns a partial result.
        """
        pass

    def require_api_key(self) -> str:
        if not self.api_key:
            logger.error("%s_api_key_missing", self.name)
            raise MissingConfigurationError(f"{self.name} API key not configured")
        return self.api_key

    def _get(
        self,
        url: str,
        headers: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> requests.Response:
        request_headers = {"user-agent": self.user_agent}
        if headers:
            request_headers.update(headers)

        try:
            return requests.get(
                url,
                headers=request_headers,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s_request_failed error=%s", self.name, type(exc).__name__)
            raise UpstreamError(f"{self.name} service unreachable") from exc
