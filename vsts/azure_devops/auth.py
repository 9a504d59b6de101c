"""Session and credential handling for the VSTS REST API."""

import requests
import urllib3
from typing import Optional, Any
from requests.adapters import HTTPAdapter
from requests.auth import HTTPBasicAuth
from urllib3.util.retry import Retry

from ..config.config import VstsConfig
from ..utils.logger import setup_logger
from .url_builder import VstsUrlBuilder

logger = setup_logger(__name__)

RETRY_TOTAL = 3
RETRY_BACKOFF = 1
RETRY_STATUSES = (429, 500, 502, 503, 504)
# WIQL queries are read-only POSTs
RETRY_METHODS = frozenset({"HEAD", "GET", "OPTIONS", "POST"})

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def pat_credentials(pat_token: Optional[str]) -> HTTPBasicAuth:
    """
    Build Basic credentials for a personal access token.

    VSTS ignores the user name, so it is left empty and the token is sent
    as the password.

    Raises:
        ValueError: If no token is available
    """
    if not pat_token:
        raise ValueError(
            "Personal access token is required for authentication. "
            "Set it in config.yaml or the VSTS_ACCESS_TOKEN environment variable."
        )
    return HTTPBasicAuth("", pat_token)


def _retrying_adapter() -> HTTPAdapter:
    retries = Retry(
        total=RETRY_TOTAL,
        backoff_factor=RETRY_BACKOFF,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=RETRY_METHODS,
    )
    return HTTPAdapter(max_retries=retries)


class VstsAuth:
    """Owns the authenticated session shared by every request to one instance."""

    def __init__(self, config: VstsConfig):
        self.config = config
        self._session: Optional[requests.Session] = None

    def get_session(self) -> requests.Session:
        """Return the session, opening it on first use."""
        if self._session is None:
            self._session = self._open_session()
        return self._session

    def _open_session(self) -> requests.Session:
        credentials = pat_credentials(self.config.pat_token)

        session = requests.Session()
        session.auth = credentials
        session.headers.update(JSON_HEADERS)

        adapter = _retrying_adapter()
        for prefix in ("https://", "http://"):
            session.mount(prefix, adapter)

        session.verify = self.config.verify_ssl
        if not session.verify:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            logger.warning(f"SSL verification disabled for {self.config.instance_name}")

        logger.debug(f"Opened session for {self.config.instance_name}")
        return session

    def close(self) -> None:
        """Close the session, if one was opened."""
        if self._session is not None:
            self._session.close()
            self._session = None
            logger.debug(f"Closed session for {self.config.instance_name}")

    def test_connection(self) -> bool:
        """
        Check that the instance answers an authenticated request.

        Lists the projects of the instance; any request failure is logged
        and reported as False.
        """
        url = (
            VstsUrlBuilder.create(self.config.instance_name)
            .with_section("_apis")
            .with_section("projects")
            .build(self.config.api_version)
        )

        try:
            response = self.get_session().get(url, timeout=self.config.timeout)
            response.raise_for_status()
        except requests.exceptions.SSLError as e:
            logger.error(f"SSL verification failed for {url}: {e} (see verify_ssl)")
            return False
        except requests.exceptions.RequestException as e:
            logger.error(f"Connection check failed for {url}: {e}")
            return False

        logger.info(f"Connected to {self.config.instance_name}")
        return True

    def __enter__(self) -> "VstsAuth":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
