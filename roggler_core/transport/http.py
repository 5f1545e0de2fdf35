"""Roggler HTTP Transport - requests-Based Fetch Transport.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import requests

from roggler_core.errors import FetchError
from roggler_core.fetch.query import UpstreamQuery, dictionary_path
from roggler_core.transport.backend import Transport, TransportConfig

logger = logging.getLogger(__name__)


class HttpTransport(Transport):
    """Fetches search responses and dictionaries over HTTP.

    Any non-2xx status and any requests exception becomes a FetchError
    labelled with the query's label or the dictionary hash.
    """

    def __init__(
        self,
        config: TransportConfig = None,
        session: Optional[requests.Session] = None,
    ):
        super().__init__(config)
        self._session = session or requests.Session()
        self._session.headers.update({
            "User-Agent": self.config.user_agent,
            "Accept": self.config.accept,
        })

    def _get(self, label: str, path: str, params: Optional[List[Tuple[str, str]]] = None) -> bytes:
        url = f"{self.config.base_url.rstrip('/')}{path}"
        try:
            resp = self._session.get(url, params=params, timeout=self.config.timeout)
        except requests.RequestException as e:
            logger.warning(f"Request for {label} failed: {e}")
            raise FetchError(label, str(e)) from e

        if not 200 <= resp.status_code < 300:
            logger.warning(f"Request for {label} returned HTTP {resp.status_code}")
            raise FetchError(label, f"HTTP {resp.status_code}", status=resp.status_code)
        return resp.content

    def fetch(self, query: UpstreamQuery) -> bytes:
        return self._get(query.label or query.signature, query.path, query.params())

    def fetch_dictionary(self, dict_hash: str) -> bytes:
        return self._get(dict_hash, dictionary_path(dict_hash))

    def close(self) -> None:
        self._session.close()


__all__ = ["HttpTransport"]
