"""
Command-Line Interface for tts-gateway.

Runs the synthesis pipeline without the HTTP server and helps with voice
tokens during development.

Usage Examples:
    # Issue a fresh voice token (for local testing)
    tts-gateway --issue-token

    # Inspect a token
    tts-gateway --check-token "Xbhaaaaaaaaaaa!"

    # Print the SSML only
    tts-gateway "你好，世界" --rate +10% --dry-run

    # Synthesize to a file through the speech service
    tts-gateway --text "Hello" --voice-name en-US-JennyNeural \\
        --format riff-24khz-16bit-mono-pcm --out hello.wav

Environment Variables:
    AZURE_SPEECH_KEY / AZURE_SPEECH_REGION: Speech service credentials
    TTS_GATEWAY_SETTINGS: Settings file (default config/settings.yaml)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from tts_gateway.core.config import (
    Settings,
    StaticConfigProvider,
    apply_env_overrides,
    load_settings,
)
from tts_gateway.core.logging import configure_logging, get_logger, info, set_request_id
from tts_gateway.services import token_codec
from tts_gateway.services.ssml import build_ssml
from tts_gateway.services.synthesis_service import GatewayError, SynthesisService, SynthesizeRequest
from tts_gateway.speech.base import get_speech_service


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="tts-gateway CLI (serverless synth)")

    parser.add_argument("text_pos", nargs="?", help="Text to synthesize (positional)")
    parser.add_argument("--text", help="Text to synthesize")
    parser.add_argument("--out", help="Output audio file")

    parser.add_argument("--voice-name", help="Voice name override")
    parser.add_argument("--pitch", help="Pitch, e.g. -50%%, low")
    parser.add_argument("--rate", help="Rate, e.g. +10%%")
    parser.add_argument("--volume", help="Volume, e.g. loud")
    parser.add_argument("--format", help="Output format identifier")

    parser.add_argument("--dry-run", action="store_true",
                        help="Print the SSML without calling the speech service")
    parser.add_argument("--json", action="store_true",
                        help="Print JSON summary")

    parser.add_argument("--issue-token", action="store_true",
                        help="Print a voice token for the current time")
    parser.add_argument("--check-token", metavar="TOKEN",
                        help="Decode a voice token and report freshness")

    return parser.parse_args(argv)


def _load_settings() -> Settings:
    path = os.getenv("TTS_GATEWAY_SETTINGS", "config/settings.yaml")
    try:
        return load_settings(path)
    except FileNotFoundError:
        return Settings(raw=apply_env_overrides({}))


def _check_token(token: str, as_json: bool) -> int:
    decoded = token_codec.decode(token)
    fresh = token_codec.is_fresh(token)
    summary = {
        "decoded": decoded,
        "valid_format": token_codec.is_valid_timestamp_format(decoded),
        "fresh": fresh,
    }
    if as_json:
        print(json.dumps(summary, ensure_ascii=False))
    else:
        print(f"decoded={decoded!r} valid_format={summary['valid_format']} fresh={fresh}")
    return 0 if fresh else 1


async def _synthesize(settings: Settings, request: SynthesizeRequest, rid: str):
    # Local use: the caller is trusted, so no shared secret
    service = SynthesisService(
        speech=get_speech_service(settings),
        config=settings.get_gateway_config(),
        config_provider=StaticConfigProvider(None),
    )
    try:
        return await service.synthesize(request, rid)
    finally:
        await service.close()


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Returns:
        Exit code (0 on success).
    """
    args = _parse_args(argv)
    configure_logging()
    log = get_logger("tts-gateway.cli")

    if args.issue_token:
        print(token_codec.encode(token_codec.now_ms()))
        return 0

    if args.check_token is not None:
        return _check_token(args.check_token, args.json)

    text = args.text or args.text_pos
    if text is None:
        raise SystemExit("Provide text (positional or --text), --issue-token or --check-token.")

    settings = _load_settings()
    request = SynthesizeRequest(
        text=text,
        voice_name=settings.default_voice_name if args.voice_name is None else args.voice_name,
        pitch=args.pitch,
        rate=args.rate,
        volume=args.volume,
        format=settings.default_format if args.format is None else args.format,
    )

    if args.dry_run:
        ssml = build_ssml(request.text, request.voice_options)
        if args.json:
            print(json.dumps({"format": request.format, "ssml": ssml}, ensure_ascii=False))
        else:
            print(ssml)
        return 0

    if not args.out:
        raise SystemExit("--out is required unless --dry-run is used.")

    rid = uuid4().hex[:12]
    set_request_id(rid)

    try:
        result = asyncio.run(_synthesize(settings, request, rid))
    except GatewayError as e:
        print(json.dumps(e.to_dict(), ensure_ascii=False), file=sys.stderr)
        return 1

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(result.audio)
    info(log, "written", path=str(out), bytes=len(result.audio), attempts=result.attempts)

    if args.json:
        print(json.dumps({
            "request_id": rid,
            "out": str(out),
            "bytes": len(result.audio),
            "content_type": result.content_type,
            "attempts": result.attempts,
            "seconds": round(result.total_seconds, 3),
        }, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
