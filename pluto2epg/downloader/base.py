"""
Base HTTP downloader for pluto2epg

Wraps a persistent requests session with browser-like headers and a bounded
timeout. Failed requests are reported once; there is no automatic retry.
"""

import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


class DownloadError(Exception):
    """Raised when a download fails at the network or HTTP level"""


class OptimizedDownloader:
    """Single-session download manager"""

    USER_AGENT = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    def __init__(self, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session: Optional[requests.Session] = session
        self.total_requests = 0
        self.bytes_downloaded = 0

        if self.session is None:
            self.init_session()

    def init_session(self):
        """Initialize session with keep-alive and retries disabled"""
        if self.session:
            self.session.close()

        self.session = requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/json, text/plain, */*",
                "Accept-Language": "en-US,en;q=0.9",
                "Accept-Encoding": "gzip, deflate",
                "Connection": "keep-alive",
                "User-Agent": self.USER_AGENT,
            }
        )

        # Every failure is terminal for the run
        adapter = HTTPAdapter(max_retries=Retry(total=0, backoff_factor=0, status_forcelist=[]))
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

        logging.debug("HTTP session initialized (timeout: %.1fs)", self.timeout)

    def download(self, url: str) -> bytes:
        """GET url and return the body, raising DownloadError on failure"""
        self.total_requests += 1
        logging.debug("  GET %s (timeout: %.1fs)", url, self.timeout)

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise DownloadError(f"Timeout after {self.timeout}s") from e
        except requests.exceptions.ConnectionError as e:
            raise DownloadError(f"Connection error: {e}") from e
        except requests.exceptions.RequestException as e:
            raise DownloadError(str(e)) from e

        if not 200 <= response.status_code < 300:
            raise DownloadError(f"HTTP error {response.status_code}")

        content = response.content
        self.bytes_downloaded += len(content)
        logging.debug("  Success: %d bytes received", len(content))
        return content

    def close(self):
        """Close the HTTP session"""
        if self.session:
            self.session.close()
            self.session = None
