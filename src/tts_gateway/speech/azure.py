"""
Azure Speech REST backend.

Posts SSML to the Cognitive Services text-to-speech endpoint:

    POST https://{region}.tts.speech.microsoft.com/cognitiveservices/v1
    Ocp-Apim-Subscription-Key: <key>
    Content-Type: application/ssml+xml
    X-Microsoft-OutputFormat: audio-24khz-48kbitrate-mono-mp3

Status handling:
    200       audio bytes
    400       SSML rejected -> SpeechServiceError containing "SSML is invalid"
    other     SpeechServiceError (retryable)

Transport failures (timeouts, connection resets) propagate as httpx
exceptions and are retried by the pipeline like any other transient error.
"""
from __future__ import annotations

from typing import Optional

import httpx

from tts_gateway.core.config import SpeechConfig
from tts_gateway.core.logging import debug, get_logger
from tts_gateway.speech.base import INVALID_SSML_MARKER, BaseSpeechService, SpeechServiceError

_LOG = get_logger("tts-gateway.azure")

AZURE_TTS_URL = "https://{region}.tts.speech.microsoft.com/cognitiveservices/v1"


class AzureSpeechService(BaseSpeechService):
    """
    Azure Speech synthesis over HTTPS.

    A single AsyncClient is shared by all requests and created lazily on the
    first call, so constructing the service does no I/O.
    """

    name = "azure"

    def __init__(self, config: SpeechConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.url = config.endpoint or AZURE_TTS_URL.format(region=config.region)
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout_s)
        return self._client

    async def convert(self, ssml: str, fmt: str) -> bytes:
        headers = {
            "Ocp-Apim-Subscription-Key": self.config.key,
            "Content-Type": "application/ssml+xml",
            "X-Microsoft-OutputFormat": fmt,
            "User-Agent": self.config.user_agent,
        }
        response = await self._get_client().post(
            self.url, headers=headers, content=ssml.encode("utf-8")
        )
        debug(_LOG, "azure_response", status=response.status_code, bytes=len(response.content))

        if response.status_code == 400:
            detail = response.text[:200].strip()
            raise SpeechServiceError(
                f"{INVALID_SSML_MARKER}: {detail}" if detail else INVALID_SSML_MARKER,
                status_code=400,
            )
        if response.status_code != 200:
            raise SpeechServiceError(
                f"speech service returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        if not response.content:
            raise SpeechServiceError("speech service returned no audio", status_code=200)

        return response.content

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
