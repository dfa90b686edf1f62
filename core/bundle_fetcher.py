# -*- coding: utf-8 -*-
"""
LocForge Bundle Fetchers

Sources for locale bundles, addressed as <base>/<language>/<namespace>.json:
- HttpBundleFetcher: retrieves bundles from the web app's static locales path
- DirectoryBundleFetcher: reads the same layout from a local directory
"""

import asyncio
import json
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional, Union

import httpx

from core.locale_tree import LocaleTree
from locforge_exceptions import NetworkFailureError
from locforge_logger import get_logger

logger = get_logger("core.bundle_fetcher")


def _require_object(payload, language: str, namespace: str, source: str) -> LocaleTree:
    if not isinstance(payload, dict):
        raise NetworkFailureError(
            f"Bundle {source} is not a JSON object (got {type(payload).__name__})",
            language=language, namespace=namespace,
        )
    return payload


class BundleFetcher(ABC):
    """Retrieves one locale tree per (language, namespace)."""

    @asynccontextmanager
    async def open(self) -> AsyncIterator["BundleFetcher"]:
        """Session scope for a batch of fetches. Default: nothing to open."""
        yield self

    @abstractmethod
    async def fetch(self, language: str, namespace: str) -> LocaleTree:
        """Return the parsed tree or raise NetworkFailureError."""

    @abstractmethod
    def describe(self, language: str, namespace: str) -> str:
        """Human readable location of a bundle, for logs."""


class HttpBundleFetcher(BundleFetcher):
    """
    GET <base_url>/<language>/<namespace>.json with httpx.

    No timeout is applied by default: a hung request leaves the namespace in
    LOADING. Pass `transport` (e.g. httpx.MockTransport) to stub the network.
    """

    def __init__(self, base_url: str, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def describe(self, language: str, namespace: str) -> str:
        return f"{self.base_url}/{language}/{namespace}.json"

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            follow_redirects=True,
            timeout=httpx.Timeout(self.timeout),
            transport=self.transport,
        )

    @asynccontextmanager
    async def open(self) -> AsyncIterator["HttpBundleFetcher"]:
        async with self._make_client() as client:
            self._client = client
            try:
                yield self
            finally:
                self._client = None

    async def fetch(self, language: str, namespace: str) -> LocaleTree:
        url = self.describe(language, namespace)
        if self._client is None:
            async with self._make_client() as client:
                return await self._get(client, url, language, namespace)
        return await self._get(self._client, url, language, namespace)

    async def _get(self, client: httpx.AsyncClient, url: str,
                   language: str, namespace: str) -> LocaleTree:
        try:
            response = await client.get(url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise NetworkFailureError(
                f"Failed to load {language}/{namespace}: HTTP {e.response.status_code}",
                language=language, namespace=namespace,
            ) from e
        except httpx.HTTPError as e:
            raise NetworkFailureError(
                f"Failed to load {language}/{namespace}: {e}",
                language=language, namespace=namespace,
            ) from e
        except ValueError as e:
            raise NetworkFailureError(
                f"Invalid JSON in {url}: {e}",
                language=language, namespace=namespace,
            ) from e

        logger.debug(f"Fetched {url}")
        return _require_object(payload, language, namespace, url)


class DirectoryBundleFetcher(BundleFetcher):
    """Reads <root>/<language>/<namespace>.json from disk, off the event loop."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def describe(self, language: str, namespace: str) -> str:
        return str(self.root / language / f"{namespace}.json")

    def _read(self, language: str, namespace: str) -> LocaleTree:
        json_path = self.root / language / f"{namespace}.json"

        if not json_path.is_file():
            raise NetworkFailureError(
                f"Bundle file not found: {json_path}",
                language=language, namespace=namespace,
            )

        try:
            with json_path.open('r', encoding='utf-8') as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise NetworkFailureError(
                f"Invalid JSON in {json_path}: {e}",
                language=language, namespace=namespace,
            ) from e
        except OSError as e:
            raise NetworkFailureError(
                f"Error reading {json_path}: {e}",
                language=language, namespace=namespace,
            ) from e

        return _require_object(payload, language, namespace, str(json_path))

    async def fetch(self, language: str, namespace: str) -> LocaleTree:
        return await asyncio.to_thread(self._read, language, namespace)
