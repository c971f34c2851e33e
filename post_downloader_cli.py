#!/usr/bin/env python3
"""
Post Downloader Cli

Description: Command-line interface that downloads every media link of a forum post into one zip archive
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.

Dual License:
1. Non-Commercial Use: This software is licensed under the terms of the
   Creative Commons Attribution-NonCommercial 4.0 International License.
   To view a copy of this license, visit http://creativecommons.org/licenses/by-nc/4.0/

2. Commercial Use: For commercial use, a separate license is required.
   Please contact Eric Hiss at eric@historic.camera or eric@rollei.us for licensing options.

Dependencies:
This code depends on several third-party libraries, each with its own license.
See CREDITS.md for a comprehensive list of dependencies and their licenses.

Usage Examples:
  # Download a saved post fragment
  python post_downloader_cli.py --content-file post.html --post-id 123 --post-number 4 --thread-title "Thread"

  # Password protected gofile folders, log and link list inside the archive
  python post_downloader_cli.py --content-file post.html --post-id 123 --password secret --generate-log --generate-links

  # Show the supported hosts
  python post_downloader_cli.py --list-hosts
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from post_downloader.exceptions import PostDownloaderError
from post_downloader.models import PostContent, RunOptions
from post_downloader.orchestrator import download_post
from post_downloader.output_sink import DirectoryOutputSink
from post_downloader.progress import FileDoneEvent, FileProgressEvent, ProgressReporter
from post_downloader.run_context import RunRegistry, run_registry
from site_hosts import HOSTS
from utils.helpers import limit
from utils.http_client import HttpClient
from utils.persistent_settings import PersistentSettings, get_settings_manager


class ConsoleProgressReporter(ProgressReporter):
    """Prints run progress to stdout."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def status(self, message: str):
        if not self.quiet:
            print(f"ℹ️  {message}")

    def file_progress(self, event: FileProgressEvent):
        if self.quiet:
            return
        loaded_mb = event.loaded / 1024 / 1024
        if event.fraction is None:
            line = f"{event.completed} / {event.total_files} 🢒 {event.host} 🢒 {loaded_mb:.2f} MB"
        else:
            total_mb = event.total / 1024 / 1024
            line = f"{event.completed} / {event.total_files} 🢒 {event.host} 🢒 {loaded_mb:.2f} MB / {total_mb:.2f} MB"
        print(f"\r⬇️  {line} 🢒 {limit(event.url, 60)}", end="", flush=True)

    def file_done(self, event: FileDoneEvent):
        if self.quiet:
            return
        if event.ok:
            print(f"\r✅ {event.completed} / {event.total_files} {event.path}")
        else:
            print(f"\r❌ {event.completed} / {event.total_files} {event.url}: {event.error}")


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser"""
    parser = argparse.ArgumentParser(
        description="Forum Post Downloader - Standalone CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Archive every image and video linked in a post
  python post_downloader_cli.py --content-file post.html --post-id 123 --post-number 4 --thread-title "Thread"

  # Put every file at the archive root, no album folders
  python post_downloader_cli.py --content-file post.html --post-id 123 --flatten

  # Ignore a host
  python post_downloader_cli.py --content-file post.html --post-id 123 --disable-host gofile.io
        """
    )

    # Post input
    parser.add_argument("--content-file", "-f", help="HTML fragment of the post ('-' reads stdin)")
    parser.add_argument("--post-id", default="", help="Post id used for logging and the run registry")
    parser.add_argument("--post-number", default="", help="Post number shown in the archive name")
    parser.add_argument("--thread-title", default="", help="Thread title used for the archive name and folder")
    parser.add_argument(
        "--password", "-p",
        action="append",
        default=[],
        help="Password for protected folders. Can be specified multiple times."
    )

    # Host selection
    parser.add_argument(
        "--disable-host",
        action="append",
        default=[],
        help="Host name or 'name:category' to ignore. Can be specified multiple times."
    )
    parser.add_argument("--list-hosts", action="store_true", help="List supported hosts and exit")

    # Run options (defaults come from the settings file)
    parser.add_argument("--flatten", action="store_true", default=None, help="Do not create album folders")
    parser.add_argument("--generate-links", action="store_true", default=None,
                        help="Store resolved links as generated/links.txt")
    parser.add_argument("--generate-log", action="store_true", default=None,
                        help="Store the run log as generated/log.txt")
    parser.add_argument("--keep-duplicates", action="store_true", help="Do not drop files sharing a name")
    parser.add_argument("--skip-download", action="store_true", default=None,
                        help="Resolve only, package an archive without media")
    parser.add_argument("--filename", help="Custom name template (:title:, :#:, :id:) for single-file posts")

    # Output and configuration
    parser.add_argument(
        "--output-dir", "-o",
        default="post_downloader_output",
        help="Output directory for archives (default: post_downloader_output)"
    )
    parser.add_argument("--config", help="Settings JSON file (default: configs/post_downloader_settings.json)")
    parser.add_argument("--json-output", action="store_true", help="Output results in JSON format")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only print the result")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    return parser


def validate_args(args) -> None:
    """Validate command line arguments"""
    if args.list_hosts:
        return
    if not args.content_file:
        raise ValueError("--content-file is required")
    if args.content_file != '-' and not Path(args.content_file).is_file():
        raise ValueError(f"Content file not found: {args.content_file}")
    if not args.post_id:
        args.post_id = Path(args.content_file).stem if args.content_file != '-' else 'post'


def build_options(args, settings: PersistentSettings) -> RunOptions:
    """Settings file run_options overridden by the flags given on the command line"""
    values = dict(settings.get_all('run_options'))
    for name in ('flatten', 'generate_links', 'generate_log', 'skip_download'):
        value = getattr(args, name)
        if value is not None:
            values[name] = value
    if args.keep_duplicates:
        values['skip_duplicates'] = False
    if args.filename:
        values['custom_filename'] = args.filename
    return RunOptions.from_mapping(values)


def read_content(path: str) -> str:
    if path == '-':
        return sys.stdin.read()
    return Path(path).read_text(encoding='utf-8', errors='replace')


def format_hosts() -> str:
    lines = ["🌐 Supported hosts:"]
    for host in HOSTS:
        lines.append(f"  • {host.name}" + (f" ({host.category})" if host.category else " (files/folders)"))
    return "\n".join(lines)


def format_results(archive, saved_path, args) -> str:
    """Format run results for output"""
    if args.json_output:
        return json.dumps({
            "status": "success" if archive else "empty",
            "archive": archive.name if archive else None,
            "path": str(saved_path) if saved_path else None,
            "entries": archive.entry_paths if archive else [],
        }, indent=2)

    if archive is None:
        return "⚠️  Nothing to download in this post"

    lines = [
        "🎉 Download Complete!",
        "=" * 50,
        f"📦 Archive: {archive.name}",
        f"📁 Saved to: {saved_path}",
        f"📊 Entries: {len(archive.entry_paths)}",
    ]
    if archive.entry_paths:
        lines.extend(["", "📋 Files:", *[f"  • {p}" for p in archive.entry_paths[:10]]])
        if len(archive.entry_paths) > 10:
            lines.append(f"  ... and {len(archive.entry_paths) - 10} more")
    return "\n".join(lines)


async def main():
    """Main CLI function"""
    parser = create_parser()
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    if args.quiet:
        logging.getLogger("post-downloader").setLevel(logging.WARNING)

    if args.list_hosts:
        print(format_hosts())
        return

    try:
        validate_args(args)
    except ValueError as e:
        print(f"❌ Argument error: {e}")
        sys.exit(1)

    settings = PersistentSettings(Path(args.config)) if args.config else get_settings_manager()
    options = build_options(args, settings)
    post = PostContent(
        content=read_content(args.content_file),
        post_id=args.post_id,
        post_number=args.post_number,
        thread_title=args.thread_title,
        passwords=args.password,
    )
    sink = DirectoryOutputSink(args.output_dir, settings.get('naming', 'invalid_char_substitute', '-'))
    progress = ConsoleProgressReporter(quiet=args.quiet)

    if not args.quiet:
        print(f"🔍 Downloading post {post.post_id} ({len(post.content)} characters of content)...")

    try:
        async with HttpClient(timeout=float(settings.get('resolvers', 'request_timeout', 60))) as http:
            archive = await download_post(post, http, options, disabled_hosts=args.disable_host,
                                          progress=progress, settings=settings)
            saved_path = sink.save(archive, title=post.thread_title) if archive else None
        print(format_results(archive, saved_path, args))
    except PostDownloaderError as e:
        print(f"❌ Download failed: {e}")
        sys.exit(1)


def interruption_warning(registry: RunRegistry = run_registry) -> Optional[str]:
    """Exit warning for runs cut off while downloading, None when no run was in flight."""
    post_ids = registry.interrupted_runs()
    if not post_ids:
        return None
    return (f"⚠️  Interrupted while post(s) {', '.join(post_ids)} were still downloading, "
            f"no archive was written for them")


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        warning = interruption_warning()
        print(f"\n{warning}" if warning else "\n⏹️  Interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    run()
