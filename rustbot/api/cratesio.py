"""crates.io registry lookups."""

from __future__ import annotations

import logging
from urllib.parse import quote

import aiohttp

from ..errors.handling import handle_api_error
from .models import CrateInfo


class CratesIOAPI:
    BASE_URL = "https://crates.io/api/v1"

    def __init__(self, session: aiohttp.ClientSession, base_url: str | None = None):
        if not session:
            raise ValueError("aiohttp session required")
        self._session = session
        self.base_url = (base_url or self.BASE_URL).rstrip("/")

    def crate_url(self, name: str) -> str:
        return f"{self.base_url}/crates/{quote(name, safe='')}"

    async def crate_info(self, name: str) -> CrateInfo:
        """Look up a crate by name.

        Raises:
            ServiceError: Unknown crate (404) or another error status.
            NetworkError: The registry could not be reached.
            ParsingError: The response did not match the expected schema.
        """
        url = self.crate_url(name)

        async def operation():
            async with self._session.get(url) as resp:
                logging.debug(f"crates.io response: status={resp.status} crate={name}")
                resp.raise_for_status()
                data = await resp.json()
            return CrateInfo.model_validate(data)

        return await handle_api_error(operation, f"crates.io lookup ({name})")
