#!/usr/bin/env python3
"""
Manage a bucket on S3-compatible storage (R2/OVH/S3) from the command line.

Usage:
    python scripts/store.py <command> [args]

Examples:
    python scripts/store.py create-bucket
    python scripts/store.py upload notes.txt docs/notes.txt --cache-control max-age=60
    python scripts/store.py get docs/notes.txt notes-copy.txt
    python scripts/store.py url docs/notes.txt --expires-in 3600
    python scripts/store.py delete docs/notes.txt
"""
import os
import sys
import asyncio
import logging
import argparse
import mimetypes
from pathlib import Path
from typing import List, Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables from .env
from dotenv import load_dotenv
load_dotenv()

from objectstore import ObjectStoreClient, StorageError, StorageResult


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "info").upper(),
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def format_size(bytes_size: float) -> str:
    """Format bytes to human-readable size."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if bytes_size < 1024.0:
            return f"{bytes_size:.2f} {unit}"
        bytes_size /= 1024.0
    return f"{bytes_size:.2f} TB"


def guess_content_type(filename: str) -> str:
    """Guess MIME content type from the file extension."""
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or 'application/octet-stream'


def report(result: StorageResult, success_message: str) -> int:
    """Print the outcome of an operation and return the exit code."""
    if result.ok:
        print(f"✅ {success_message}")
        return 0
    if result.not_found:
        print(f"❌ Not found: {result.error}")
    else:
        print(f"❌ Storage Error: {result.error}")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="S3-compatible object storage tool")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("create-bucket", help="Create the configured bucket")
    commands.add_parser("delete-bucket", help="Delete the configured bucket")

    upload = commands.add_parser("upload", help="Upload a local file")
    upload.add_argument("file_path", help="Local file to upload")
    upload.add_argument("object_key", nargs="?", help="Object key (defaults to the file name)")
    upload.add_argument("--cache-control", help="Cache-Control header (e.g. max-age=60)")
    upload.add_argument("--content-type", help="Content-Type header (guessed when omitted)")

    get = commands.add_parser("get", help="Download an object")
    get.add_argument("object_key", help="Object key")
    get.add_argument("output", nargs="?", help="Output file (defaults to stdout)")

    delete = commands.add_parser("delete", help="Delete an object")
    delete.add_argument("object_key", help="Object key")

    url = commands.add_parser("url", help="Print a signed download URL")
    url.add_argument("object_key", help="Object key")
    url.add_argument(
        "--expires-in",
        type=int,
        default=ObjectStoreClient.URL_EXPIRY_SECONDS,
        help="URL validity in seconds (default: 24h)",
    )

    return parser


async def run(args: argparse.Namespace) -> int:
    """Execute one command against the configured bucket."""
    client = await ObjectStoreClient.from_env()
    logger.debug(f"Using {client!r}")

    if args.command == "create-bucket":
        return report(await client.create_bucket(), f"Created bucket {client.bucket_name}")

    if args.command == "delete-bucket":
        return report(await client.delete_bucket(), f"Deleted bucket {client.bucket_name}")

    if args.command == "upload":
        if not os.path.exists(args.file_path):
            print(f"❌ Error: File not found: {args.file_path}")
            return 1
        object_key = args.object_key or os.path.basename(args.file_path)
        data = Path(args.file_path).read_bytes()

        print(f"📁 File: {args.file_path}")
        print(f"📏 Size: {format_size(len(data))}")
        print(f"🔑 Object Key: {object_key}")

        result = await client.upload(
            object_key,
            data,
            cache_control=args.cache_control,
            content_type=args.content_type or guess_content_type(object_key),
        )
        return report(result, f"Uploaded {object_key} to {client.bucket_name}")

    if args.command == "get":
        result = await client.get(args.object_key)
        if not result.ok:
            return report(result, "")
        if args.output:
            Path(args.output).write_bytes(result.data)
            print(f"✅ Saved {args.object_key} to {args.output} ({format_size(len(result.data))})")
        else:
            sys.stdout.buffer.write(result.data)
            sys.stdout.flush()
        return 0

    if args.command == "delete":
        return report(
            await client.delete(args.object_key),
            f"Deleted {args.object_key} from {client.bucket_name}",
        )

    if args.command == "url":
        print(client.presigned_get_url(args.object_key, expires_in=args.expires_in))
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entrypoint."""
    args = build_parser().parse_args(argv)

    try:
        return asyncio.run(run(args))
    except StorageError as e:
        print(f"❌ Storage Error: {e}")
        print("\nTroubleshooting:")
        print("1. Check .env file has STORAGE_BUCKET, STORAGE_ACCESS_KEY_ID, STORAGE_SECRET_ACCESS_KEY")
        print("2. Set STORAGE_ENDPOINT for R2/OVH, or STORAGE_REGION for AWS")
        return 1
    except KeyboardInterrupt:
        print("\n⚠️  Cancelled by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
