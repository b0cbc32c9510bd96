r"""Download the HTML export of the source document.

Authors share the editor URL of a document (``.../document/d/<id>/edit``).
:func:`export_url` turns that into the HTML export endpoint and
:class:`DocumentFetcher` downloads it with retries on transient server errors.

Example
-------
>>> from doc_blocks.fetch import export_url
>>> export_url("https://docs.google.com/document/d/abc123/edit")
'https://docs.google.com/document/d/abc123/export?output=html'
"""

from __future__ import annotations

import logging
import re

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ._constants import DEFAULT_TIMEOUT, EXPORT_URL_TEMPLATE

logger = logging.getLogger(__name__)

DOCUMENT_ID_PATTERN = re.compile(r"/document/d/([^/]+)")


class DocumentSourceError(ValueError):
    """Raised when a document URL cannot be mapped to an HTML export."""


class DocumentFetchError(RuntimeError):
    """Raised when the HTML export cannot be downloaded."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def export_url(doc_url: str | None) -> str | None:
    """Return the HTML export URL for an editor document URL, or ``None``."""
    if not doc_url:
        return None
    match = DOCUMENT_ID_PATTERN.search(doc_url)
    if not match:
        return None
    return EXPORT_URL_TEMPLATE.format(doc_id=match.group(1))


class DocumentFetcher:
    """Fetch document exports over HTTP with bounded retries."""

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        """Initialise the fetcher.

        Parameters
        ----------
        timeout : float, optional
            Per-request timeout in seconds. Defaults to ``30``.
        """
        self.timeout = timeout

    def _session(self) -> requests.Session:
        """Return a session that retries idempotent requests on 5xx responses."""
        session = requests.Session()
        retry = Retry(
            total=5,
            read=5,
            connect=3,
            backoff_factor=0.5,
            status_forcelist=(500, 502, 503, 504),
            allowed_methods=("GET", "HEAD"),
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session

    def fetch(self, doc_url: str) -> str:
        """Download the HTML export for ``doc_url``.

        Parameters
        ----------
        doc_url : str
            Editor URL of the document.

        Returns
        -------
        str
            The exported HTML.

        Raises
        ------
        DocumentSourceError
            If ``doc_url`` does not identify a document.
        DocumentFetchError
            If the download fails or the server responds with an error status.
        """
        url = export_url(doc_url)
        if url is None:
            msg = f"'{doc_url}' is not a document URL."
            raise DocumentSourceError(msg)

        logger.info("Fetching document export from %s", url)
        session = self._session()
        try:
            response = session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            failed = exc.response
            status = failed.status_code if failed is not None else None
            reason = failed.reason if failed is not None else ""
            msg = f"Failed to fetch document: {status} {reason}".rstrip()
            raise DocumentFetchError(msg, status_code=status) from exc
        except requests.RequestException as exc:
            msg = f"Failed to reach document export at '{url}': {exc}"
            raise DocumentFetchError(msg) from exc
        finally:
            session.close()
        return response.text


__all__ = [
    "DocumentFetchError",
    "DocumentFetcher",
    "DocumentSourceError",
    "export_url",
]
