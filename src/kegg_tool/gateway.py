"""HTTP gateway to the KEGG REST service."""

import threading
import time
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import GatewayConfig
from .errors import RemoteCallFailure
from .logging_config import LogTimer, log_api_call


class KEGGGateway:
    """Performs GET calls against the KEGG REST API.

    Failed calls are not retried: any transport error, timeout, non-2xx
    status or undecodable body surfaces as ``RemoteCallFailure``. Each
    thread gets its own session unless one is injected.
    """

    def __init__(self, config: Optional[GatewayConfig] = None, session: Optional[requests.Session] = None):
        """Initialize the gateway.

        Args:
            config: Connection settings (base URL, timeout, user agent)
            session: Optional pre-built session shared by all threads, mainly for tests
        """
        self.config = config or GatewayConfig()
        self._shared_session = session
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._local.session = self._create_session()
        return session

    def _create_session(self) -> requests.Session:
        """Create a session with retries disabled."""
        session = requests.Session()
        adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers.update({
            'User-Agent': self.config.user_agent,
            'Accept': 'text/plain'
        })
        return session

    def url_for(self, path: str) -> str:
        return f"{self.config.base_url}{path}"

    def fetch_bytes(self, path: str) -> bytes:
        """GET ``path`` and return the raw body.

        Raises:
            RemoteCallFailure: On any transport or status failure
        """
        url = self.url_for(path)
        start = time.time()
        status = None

        try:
            with LogTimer(f"GET {path}"):
                response = self.session.get(url, timeout=self.config.timeout_seconds)
            status = response.status_code
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            log_api_call(path, status, time.time() - start, False)
            raise RemoteCallFailure(
                f"Request timed out after {self.config.timeout_seconds}s", endpoint=path
            ) from e
        except requests.exceptions.HTTPError as e:
            log_api_call(path, status, time.time() - start, False)
            raise RemoteCallFailure(
                f"Request failed with status code {status}", endpoint=path, status_code=status
            ) from e
        except requests.exceptions.RequestException as e:
            log_api_call(path, status, time.time() - start, False)
            raise RemoteCallFailure(str(e) or type(e).__name__, endpoint=path) from e

        log_api_call(path, status, time.time() - start, True)
        return response.content

    def fetch_text(self, path: str) -> str:
        """GET ``path`` and decode the body as UTF-8 text."""
        body = self.fetch_bytes(path)
        try:
            return body.decode('utf-8')
        except UnicodeDecodeError as e:
            raise RemoteCallFailure(f"Response body is not valid UTF-8 text: {e}", endpoint=path) from e
