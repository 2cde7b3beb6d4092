"""
CLI entrypoint:
  article-video make URL [-o video.mp4] [--server http://host:8000]
  article-video debug-tone [-o tone.mp4]
  article-video serve [--host 127.0.0.1] [--port 8000]
"""

import argparse
import os
import sys
from datetime import datetime
from typing import Optional

import requests

from article_video.config import Settings
from article_video.domain.models import NarrationPayload
from article_video.errors import ArticleVideoError


def fetch_remote_payload(server: str, url: str, timeout: float = 300) -> NarrationPayload:
    """Ask a running server for the narration payload instead of processing locally."""
    endpoint = f"{server.rstrip('/')}/api/process"
    response = requests.post(endpoint, json={"url": url}, timeout=timeout)
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}
    if not response.ok:
        raise ArticleVideoError(body.get("error") or f"Server returned HTTP {response.status_code}")
    try:
        return NarrationPayload.from_dict(body)
    except (ValueError, TypeError) as e:
        raise ArticleVideoError(f"Server returned an invalid narration payload: {e}") from e


def _default_output(settings: Settings, prefix: str) -> str:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join(settings.output_dir, f"{prefix}_{timestamp}.mp4")


def _make_video(payload: NarrationPayload, output: str, adapters: dict, settings: Settings) -> int:
    from article_video.application.creator import VideoCreator

    creator = VideoCreator.from_adapters(adapters, settings)
    job = creator.create(payload, output)
    if job is None:
        print(f"\n❌ No narration audio: {creator.status}")
        print("\nSummary:\n" + payload.summary)
        return 1
    if job.artifact is None:
        return 1
    print(f"\n✅ Success! Video saved to: {job.artifact.path} ({job.artifact.size_bytes} bytes, {job.artifact.codec})")
    return 0


def cmd_make(args, settings: Settings) -> int:
    from article_video.adapters import default_adapters
    from article_video.application.pipeline import NarrationPipeline

    adapters = default_adapters(settings)
    try:
        if args.server:
            print(f"Requesting narration from {args.server}...")
            payload = fetch_remote_payload(args.server, args.url)
        else:
            payload = NarrationPipeline.from_adapters(adapters, settings).process(args.url)
    except (ArticleVideoError, requests.RequestException) as e:
        print(f"\n❌ {e}")
        return 1

    if args.summary_only:
        print("\nSummary:\n" + payload.summary)
        return 0
    return _make_video(payload, args.output or _default_output(settings, "article_video"), adapters, settings)


def cmd_debug_tone(args, settings: Settings) -> int:
    from article_video.adapters import default_adapters
    from article_video.debug import debug_tone_payload

    payload = debug_tone_payload()
    return _make_video(payload, args.output or _default_output(settings, "debug_tone"), default_adapters(settings), settings)


def cmd_serve(args, settings: Settings) -> int:
    import uvicorn

    from article_video.server import create_app

    uvicorn.run(create_app(settings), host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="article-video",
        description="Turn a web article into a short narrated MP4 video",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    make = sub.add_parser("make", help="Create a video from an article URL")
    make.add_argument("url", help="Article URL")
    make.add_argument("-o", "--output", help="Output MP4 path (default: OUTPUT_DIR/article_video_<timestamp>.mp4)")
    make.add_argument("--server", help="Use a running server for the narration instead of processing locally")
    make.add_argument("--summary-only", action="store_true", help="Print the narration and stop")
    make.set_defaults(func=cmd_make)

    tone = sub.add_parser("debug-tone", help="Create a video from a synthetic 3s tone")
    tone.add_argument("-o", "--output", help="Output MP4 path")
    tone.set_defaults(func=cmd_debug_tone)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[list] = None) -> None:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    sys.exit(args.func(args, settings))


if __name__ == "__main__":
    main()
