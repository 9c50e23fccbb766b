"""Retrieval of calendar feeds from disk or over HTTP."""
import logging
import time
from typing import Optional

import requests

logger = logging.getLogger(__name__)


class FeedLoader:
    """Loads raw calendar feed text from a file or URL."""

    def __init__(self, timeout: int = 30, max_retries: int = 3):
        """
        Initialize the feed loader.

        Args:
            timeout: HTTP request timeout in seconds (default: 30)
            max_retries: Number of HTTP attempts before giving up (default: 3)
        """
        self.timeout = timeout
        self.max_retries = max(1, max_retries)

    def load(self, url: Optional[str] = None, path: Optional[str] = None) -> str:
        """
        Load the feed from whichever source is given.

        Args:
            url: HTTP(S) URL of the feed
            path: Local file path of the feed

        Returns:
            Feed content as string

        Raises:
            ValueError: If neither source is given
        """
        if path:
            return self.read_file(path)
        if url:
            return self.fetch_url(url)
        raise ValueError("Either a URL or a file path is required")

    def read_file(self, path: str) -> str:
        """
        Read a feed from a local file.

        Raises:
            OSError: If the file cannot be read
        """
        logger.info(f"Reading calendar feed from file {path}")
        with open(path, encoding='utf-8', errors='replace') as handle:
            return handle.read()

    def fetch_url(self, url: str) -> str:
        """
        Download a feed with retry logic.

        Args:
            url: Feed URL

        Returns:
            Response body as string

        Raises:
            requests.RequestException: If all retry attempts fail
        """
        base_delay = 1  # seconds

        for attempt in range(self.max_retries):
            try:
                logger.info(
                    f"Downloading calendar feed (attempt {attempt + 1}/{self.max_retries})"
                )
                response = requests.get(url, timeout=self.timeout)
                response.raise_for_status()
                return response.text

            except requests.RequestException as e:
                if attempt < self.max_retries - 1:
                    delay = base_delay * (2 ** attempt)
                    logger.warning(
                        f"Request failed (attempt {attempt + 1}/{self.max_retries}): {e}. "
                        f"Retrying in {delay} seconds..."
                    )
                    time.sleep(delay)
                else:
                    logger.error(
                        f"All {self.max_retries} retry attempts failed. Last error: {e}"
                    )
                    raise
