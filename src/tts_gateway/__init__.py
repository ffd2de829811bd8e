"""
tts-gateway: Token-gated SSML speech synthesis gateway.

A small HTTP service that turns text plus voice parameters into audio by
delegating synthesis to an external speech service (Azure Speech REST).

Request pipeline:
    1. Voice token freshness check (obfuscated millisecond timestamp)
    2. Optional shared-secret check (TOKEN)
    3. Output format validation
    4. SSML construction from voice parameters
    5. Bounded-retry synthesis call with fatal/transient classification

Example Usage:
    >>> from tts_gateway.services.ssml import VoiceOptions, build_ssml
    >>> build_ssml("Hello", VoiceOptions(voice_name="en-US-JennyNeural"))
    '<speak ...><voice name="en-US-JennyNeural">Hello</voice></speak>'
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
