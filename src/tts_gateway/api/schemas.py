"""
API Request Schemas.

The synthesis endpoint takes all of its input from the query string:

    GET /?voice=<token>&text=你好&voiceName=zh-CN-XiaoxiaoNeural&rate=%2B10%25
         &format=audio-24khz-48kbitrate-mono-mp3&token=<shared secret>

SynthesisQuery validates the assembled values. The ``voice`` token is checked
here, so a stale or forged token fails schema validation and never reaches
the service layer.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from tts_gateway.core.config import Defaults
from tts_gateway.services.synthesis_service import SynthesizeRequest
from tts_gateway.services.validators import validate_voice_token


class SynthesisQuery(BaseModel):
    """
    Validated query of the synthesis endpoint.

    Attributes:
        voice: Voice token (obfuscated timestamp, at most 6 hours old).
        text: Text to speak. Empty text is allowed.
        voice_name: Neural voice name (``voiceName`` on the wire).
        pitch / rate / volume: Prosody values, e.g. "-50%", "+10%", "loud".
        format: Output format identifier.
        token: Shared secret, required only when the server has one.
    """
    voice: str = Field(..., description="Voice token")
    text: str = Field(default="", description="Text to synthesize")
    voice_name: str = Field(default=Defaults.VOICE_NAME, description="Voice name")
    pitch: Optional[str] = Field(default=None, description="Pitch")
    rate: Optional[str] = Field(default=None, description="Speaking rate")
    volume: Optional[str] = Field(default=None, description="Volume")
    format: str = Field(default=Defaults.AUDIO_FORMAT, description="Audio format")
    token: Optional[str] = Field(default=None, description="Shared secret")

    @field_validator("voice")
    @classmethod
    def _check_voice_token(cls, value: str) -> str:
        return validate_voice_token(value)

    def to_request(self) -> SynthesizeRequest:
        return SynthesizeRequest(
            text=self.text,
            voice_name=self.voice_name,
            pitch=self.pitch,
            rate=self.rate,
            volume=self.volume,
            format=self.format,
            token=self.token,
        )
