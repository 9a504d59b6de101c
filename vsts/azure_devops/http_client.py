"""HTTP execution used by the VSTS clients."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, TypeVar

import requests

from ..utils.logger import setup_logger
from .auth import VstsAuth

logger = setup_logger(__name__)

T = TypeVar("T")

Parser = Callable[[Dict[str, Any]], T]


class HttpClient(ABC):
    """
    Abstract HTTP execution capability.

    Implementations perform the request, decode the JSON body and hand it to
    ``parser``. A response without a body yields None. Errors are not caught.
    """

    @abstractmethod
    def execute_get(self, url: str, parser: Parser) -> Optional[T]:
        """
        Perform a GET request.

        Args:
            url: Absolute request URL
            parser: Callable turning the JSON document into a model

        Returns:
            Parsed model, or None when the response has no body
        """
        pass

    @abstractmethod
    def execute_post(self, url: str, body: Any, parser: Parser) -> Optional[T]:
        """
        Perform a POST request with a JSON body.

        Args:
            url: Absolute request URL
            body: JSON-serializable request body
            parser: Callable turning the JSON document into a model

        Returns:
            Parsed model, or None when the response has no body
        """
        pass

    def close(self) -> None:
        """Release resources held by the client."""


class DefaultHttpClient(HttpClient):
    """HttpClient backed by an authenticated requests session."""

    def __init__(self, auth: VstsAuth, timeout: Optional[int] = None):
        """
        Initialize HTTP client.

        Args:
            auth: Authentication handler providing the session
            timeout: Request timeout in seconds (defaults to the auth config)
        """
        self.auth = auth
        self.timeout = timeout if timeout is not None else auth.config.timeout

    def execute_get(self, url: str, parser: Parser) -> Optional[T]:
        logger.debug(f"GET {url}")
        try:
            response = self.auth.get_session().get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"GET {url} failed: {e}")
            raise

        return self._parse(response, parser)

    def execute_post(self, url: str, body: Any, parser: Parser) -> Optional[T]:
        logger.debug(f"POST {url}")
        try:
            response = self.auth.get_session().post(url, json=body, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"POST {url} failed: {e}")
            raise

        return self._parse(response, parser)

    def close(self) -> None:
        self.auth.close()

    @staticmethod
    def _parse(response: requests.Response, parser: Parser) -> Optional[T]:
        if response.status_code == 204 or not response.content:
            return None

        data = response.json()
        if data is None:
            return None
        return parser(data)
