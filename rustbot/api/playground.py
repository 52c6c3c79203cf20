"""Thin asynchronous client for the Rust playground.

Wraps the three endpoints the playground module needs: code execution,
toolchain version lookup and gist creation for full output pastes.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import aiohttp

from ..errors.handling import handle_api_error
from .models import (
    Channel,
    ExecuteRequest,
    ExecuteResponse,
    Mode,
    PasteRequest,
    PasteResponse,
    VersionResponse,
)


class PlaygroundAPI:
    """Asynchronous client for the playground HTTP API.

    Every method raises one of the internal error types (``NetworkError``,
    ``ServiceError``, ``ParsingError``) on failure; callers decide whether the
    failure is reported to the user.

    Attributes:
        BASE_URL (str): Default playground location.
    """

    BASE_URL = "https://play.rust-lang.org"

    def __init__(self, session: aiohttp.ClientSession, base_url: str | None = None):
        if not session:
            raise ValueError("aiohttp session required")
        self._session = session
        self.base_url = (base_url or self.BASE_URL).rstrip("/")

    async def execute(self, request: ExecuteRequest) -> ExecuteResponse:
        """Compile and run code.

        Args:
            request (ExecuteRequest): Code plus channel and build mode.

        Returns:
            ExecuteResponse: Success flag and captured stdout/stderr.
        """
        data = await self._request_json(
            "POST", "/execute", "playground execute", payload=request.to_payload()
        )
        return await self._validate(ExecuteResponse, data, "playground execute")

    async def version(self, channel: Channel) -> VersionResponse:
        """Fetch the toolchain version of a release channel."""
        context = f"playground version ({channel.value})"
        data = await self._request_json("GET", f"/meta/version/{channel.value}", context)
        return await self._validate(VersionResponse, data, context)

    async def paste(self, code: str, channel: Channel, mode: Mode) -> str:
        """Store code as a gist and return a playground URL that loads it.

        Args:
            code (str): Text to store.
            channel (Channel): Channel preselected when the link is opened.
            mode (Mode): Build mode preselected when the link is opened.

        Returns:
            str: Shareable playground URL.
        """
        payload = PasteRequest(code=code).model_dump()
        data = await self._request_json("POST", "/meta/gist/", "playground paste", payload=payload)
        gist = await self._validate(PasteResponse, data, "playground paste")
        query = urlencode({"gist": gist.id, "version": channel.value, "mode": mode.value})
        return f"{self.base_url}/?{query}"

    async def _request_json(
        self,
        method: str,
        path: str,
        context: str,
        *,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self.base_url}{path}"

        async def operation():
            async with self._session.request(method, url, json=payload) as resp:
                logging.debug(f"Playground response: status={resp.status} url={url}")
                resp.raise_for_status()
                return await resp.json()

        return await handle_api_error(operation, context)

    @staticmethod
    async def _validate(model, data: Any, context: str):
        async def operation():
            return model.model_validate(data)

        return await handle_api_error(operation, context)
