"""
SSML document builder.

Turns text plus loosely-typed voice parameters into a single-voice SSML
document understood by Azure/Edge neural voices:

    <speak xmlns="http://www.w3.org/2001/10/synthesis" version="1.0" xml:lang="zh-CN">
      <voice name="zh-CN-XiaoxiaoNeural">
        <prosody rate="+10%">你好</prosody>
      </voice>
    </speak>

(Emitted on a single line; shown indented here for readability.)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from xml.sax.saxutils import escape, quoteattr

SSML_NAMESPACE = "http://www.w3.org/2001/10/synthesis"
MSTTS_NAMESPACE = "http://www.w3.org/2001/mstts"
DEFAULT_LANG = "en-US"


@dataclass(frozen=True)
class VoiceOptions:
    """
    Voice parameters as they arrive from the query string.

    pitch/rate/volume accept anything the speech service accepts
    ("-50%", "+2st", "low", "1.2", ...); they are passed through verbatim.
    """
    voice_name: str
    pitch: Optional[str] = None
    rate: Optional[str] = None
    volume: Optional[str] = None


def voice_locale(voice_name: str) -> str:
    """Locale prefix of a voice name, e.g. zh-CN for zh-CN-XiaoxiaoNeural."""
    parts = voice_name.split("-")
    if len(parts) >= 3 and parts[0].isalpha() and parts[1].isalpha():
        return f"{parts[0]}-{parts[1]}"
    return DEFAULT_LANG


def build_ssml(text: str, options: VoiceOptions) -> str:
    """
    Build the SSML document for one synthesis call.

    ``text`` is escaped so it is always spoken literally. Absent or empty
    prosody values produce no attribute, and no <prosody> element at all
    when none are given.
    """
    prosody_attrs = [
        f"{name}={quoteattr(value)}"
        for name, value in (
            ("pitch", options.pitch),
            ("rate", options.rate),
            ("volume", options.volume),
        )
        if value
    ]

    body = escape(text)
    if prosody_attrs:
        body = f"<prosody {' '.join(prosody_attrs)}>{body}</prosody>"

    return (
        f'<speak xmlns="{SSML_NAMESPACE}" xmlns:mstts="{MSTTS_NAMESPACE}" '
        f'version="1.0" xml:lang="{voice_locale(options.voice_name)}">'
        f"<voice name={quoteattr(options.voice_name)}>{body}</voice>"
        "</speak>"
    )
