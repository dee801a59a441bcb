"""
Command-line entry point for the audio merger

  audio-merger serve --port 8000
  audio-merger mix speech.mp3 music.wav -o merged-audio.mp3
  audio-merger upload speech.mp3 music.wav --url http://localhost:8000
"""
import argparse
import asyncio
import sys
from typing import List, Optional

import httpx

from config.settings import settings
from models.audio import MUSIC, SPEECH
from services.local_merge import LocalMergeSession
from services.merge_client import MergeClient
from utils.errors import AudioMergerError


def _status(message: str) -> None:
    print(message, file=sys.stderr)


async def run_local_mix(speech: str, music: str, output: Optional[str]) -> int:
    session = LocalMergeSession(on_status=_status)
    try:
        session.select(SPEECH, speech)
        session.select(MUSIC, music)
        await session.start()
        result = await session.submit()
    except AudioMergerError:
        print(session.error, file=sys.stderr)
        return 1
    finally:
        await session.close()

    path = result.save(output)
    print(f"Audio files merged successfully: {path} ({result.size} bytes)")
    return 0


async def run_upload(speech: str, music: str, url: Optional[str], output: Optional[str]) -> int:
    client = MergeClient(base_url=url)
    try:
        result = await client.merge_paths(speech, music)
    except AudioMergerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except httpx.HTTPError as e:
        print(f"Could not reach merge server at {client.base_url}: {e}", file=sys.stderr)
        return 1

    path = result.save(output)
    print(f"Audio files merged successfully: {path} ({result.size} bytes)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="audio-merger",
        description="Merge a speech track (100%) with background music (40%) into one MP3.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the HTTP merge server")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)

    mix = sub.add_parser("mix", help="merge locally, nothing is uploaded")
    mix.add_argument("speech", help="speech audio file")
    mix.add_argument("music", help="background music file")
    mix.add_argument("-o", "--output", help="output file (default: merged-audio.mp3)")

    upload = sub.add_parser("upload", help="merge on a running server")
    upload.add_argument("speech", help="speech audio file")
    upload.add_argument("music", help="background music file")
    upload.add_argument("--url", default=settings.server_url, help="server base URL")
    upload.add_argument("-o", "--output", help="output file (default: name suggested by the server)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        import uvicorn
        uvicorn.run("main:app", host=args.host, port=args.port)
        return 0

    try:
        if args.command == "mix":
            return asyncio.run(run_local_mix(args.speech, args.music, args.output))
        return asyncio.run(run_upload(args.speech, args.music, args.url, args.output))
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
