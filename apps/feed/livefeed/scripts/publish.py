"""Publish one JSON event to a running feed server."""
from __future__ import annotations

import argparse
import asyncio
import json
import sys

import httpx

from ..core.http_client import create_publisher


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("payload", help="JSON object to publish")
    parser.add_argument("--url", default="http://127.0.0.1:3000", help="feed server base URL")
    return parser.parse_args(argv)


async def _publish(base_url: str, payload: dict) -> dict:
    async with create_publisher(base_url) as publisher:
        return await publisher.publish(payload)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        payload = json.loads(args.payload)
    except json.JSONDecodeError as exc:
        print(f"payload is not valid JSON: {exc}", file=sys.stderr)
        return 2
    if not isinstance(payload, dict):
        print("payload must be a JSON object", file=sys.stderr)
        return 2
    try:
        reply = asyncio.run(_publish(args.url, payload))
    except httpx.HTTPError as exc:
        print(f"publish failed: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(reply))
    return 0


if __name__ == "__main__":
    sys.exit(main())
