"""Bounded HTTP fetching of article pages."""

from collections.abc import Mapping

import requests

from .config import Config
from .logger import get_logger
from .models import FetchFailure, FetchRequest, FetchResult, FetchSuccess, NetworkErrorKind

logger = get_logger()


class HTMLFetcher:
    """Fetch article markup with a single bounded GET request.

    Never raises for network problems; every failure comes back as a
    ``FetchFailure``. There are no retries here.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        """
        Initialize fetcher.

        Args:
            config: Configuration providing the default timeout and headers
            session: Optional requests session. If None, creates new one.
        """
        self.config = config or Config()
        self.session = session or requests.Session()

    def fetch(
        self, url: str, timeout_ms: int | None = None, headers: Mapping[str, str] | None = None
    ) -> FetchResult:
        """
        Fetch a page.

        Args:
            url: URL to fetch
            timeout_ms: Request timeout in milliseconds. Defaults to the configured one.
            headers: Request headers. Defaults to the configured browser-like headers.

        Returns:
            FetchSuccess with the decoded body, or FetchFailure with a classification
        """
        request = FetchRequest(
            url=url,
            timeout_ms=timeout_ms if timeout_ms is not None else self.config.timeout_ms,
            headers=dict(headers if headers is not None else self.config.request_headers),
        )
        return self._send(request)

    def _send(self, request: FetchRequest) -> FetchResult:
        try:
            response = self.session.get(
                request.url, timeout=request.timeout_ms / 1000, headers=dict(request.headers)
            )
        except requests.Timeout as e:
            # ConnectTimeout is also a ConnectionError; report it as a timeout
            return self._failure(request, NetworkErrorKind.TIMEOUT, str(e))
        except requests.ConnectionError as e:
            return self._failure(request, NetworkErrorKind.CONNECTION, str(e))
        except requests.RequestException as e:
            return self._failure(request, NetworkErrorKind.UNKNOWN, str(e))

        if not 200 <= response.status_code < 300:
            detail = f"{response.status_code} {response.reason or ''}".strip()
            return self._failure(request, NetworkErrorKind.HTTP_STATUS, detail, response.status_code)

        if "charset" not in response.headers.get("Content-Type", "").lower():
            response.encoding = response.apparent_encoding

        logger.debug(
            "Fetched page", extra={"url": request.url, "status": response.status_code}
        )
        return FetchSuccess(body=response.text)

    @staticmethod
    def _failure(
        request: FetchRequest, kind: NetworkErrorKind, detail: str, status: int | None = None
    ) -> FetchFailure:
        failure = FetchFailure(kind=kind, detail=detail, status_code=status)
        logger.warning(
            "Fetch failed", extra={"url": request.url, "kind": failure.label, "error": detail}
        )
        return failure
