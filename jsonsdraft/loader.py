"""
Loads schema documents from http(s) and file URLs.
"""

import json
import logging
import os
from typing import Any, Dict
from urllib.parse import ParseResult, unquote, urlparse

import requests

from jsonsdraft.constants import LOADER_TIMEOUT

logger = logging.getLogger(__name__)


class LoadError(Exception):
    """
    Raised when a schema document cannot be fetched or parsed.

    Attributes:
        url: The URL that failed to load.
    """

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(f"{url}: {message}")


def to_url(path_or_url: str) -> str:
    """Turn a local file path into an absolute file URL; URLs are returned unchanged."""
    parsed_url = urlparse(path_or_url)
    if parsed_url.scheme in ('http', 'https', 'file'):
        return path_or_url
    abs_path = os.path.abspath(path_or_url).replace('\\', '/')
    if not abs_path.startswith('/'):
        abs_path = '/' + abs_path
    return 'file://' + abs_path


class SchemaLoader:
    """
    Fetches schema documents.

    Attributes:
        timeout: Seconds to wait for a remote document.
        content_cache: Fetched text by URL.
    """

    def __init__(self, timeout: float = LOADER_TIMEOUT) -> None:
        self.timeout = timeout
        self.content_cache: Dict[str, str] = {}

    def fetch_content(self, url: str | ParseResult) -> str:
        """
        Fetches the content from the specified URL.

        Args:
            url (str or ParseResult): The URL to fetch the content from.

        Returns:
            str: The fetched content.

        Raises:
            LoadError: If the scheme is unsupported or the content cannot be read.
        """
        if isinstance(url, str):
            parsed_url = urlparse(url)
        else:
            parsed_url = url

        key = parsed_url._replace(fragment='').geturl()
        if key in self.content_cache:
            return self.content_cache[key]
        scheme = parsed_url.scheme

        if scheme in ['http', 'https']:
            logger.debug("Fetching %s", key)
            try:
                response = requests.get(key, timeout=self.timeout)
                # Raises an HTTPError if the response status code is 4XX/5XX
                response.raise_for_status()
            except requests.RequestException as e:
                raise LoadError(key, str(e)) from e
            self.content_cache[key] = response.text
            return response.text

        elif scheme == 'file':
            file_path = unquote(parsed_url.path)
            # On Windows, a file URL might start with a '/' but it's not part of the actual path
            if os.name == 'nt' and file_path.startswith('/'):
                file_path = file_path[1:]
            logger.debug("Reading %s", file_path)
            try:
                with open(file_path, 'r', encoding='utf-8') as file:
                    text = file.read()
            except OSError as e:
                raise LoadError(key, str(e)) from e
            self.content_cache[key] = text
            return text
        else:
            raise LoadError(key, f'Unsupported URL scheme: {scheme}')

    def load(self, url: str) -> Any:
        """Fetch a document and parse it as JSON."""
        content = self.fetch_content(url)
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise LoadError(url, f'Error decoding JSON: {e}') from e
