"""
Download Orchestrator

Description: Runs one post download: match hosts, resolve, dedupe, transfer concurrently, package
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
"""

import asyncio
import logging
from typing import Iterable, List, Optional, Sequence

from post_downloader.archive_builder import ArchiveBuilder, suggest_archive_name
from post_downloader.exceptions import TransferError
from post_downloader.models import (AlbumResult, Archive, ArchiveEntry, DownloadTarget, PostContent,
                                    RunOptions, TransferResult, TransferSummary)
from post_downloader.naming import FilenameAssigner, build_entry_path, dedupe_targets, derive_basename
from post_downloader.output_sink import OutputSink
from post_downloader.progress import FileDoneEvent, FileProgressEvent, ProgressReporter
from post_downloader.run_context import RunContext, run_registry
from site_hosts import HostMatch, HostSignature, enabled_hosts, match_hosts
from site_resolvers import RESOLVERS, ResolverSettings, resolve_resource
from utils.helpers import limit, sanitize_path_component
from utils.persistent_settings import PersistentSettings, get_settings_manager

logger = logging.getLogger("post-downloader")


async def resolve_targets(matches: List[HostMatch], context: RunContext, http,
                          resolvers=RESOLVERS, resolver_settings: ResolverSettings = None,
                          progress: ProgressReporter = None) -> List[DownloadTarget]:
    """
    Resolve every matched resource, one at a time, into download targets.

    A resolver that raises or finds nothing only costs its own resource.

    Returns:
        List[DownloadTarget]: Downloadable targets in document order
    """
    progress = progress or ProgressReporter()
    resolver_settings = resolver_settings if resolver_settings is not None else ResolverSettings()
    passwords = context.post.password_candidates()
    total = sum(len(m.resources) for m in matches)

    targets = []
    done = 0
    for host_match in matches:
        host = host_match.host
        for resource in host_match.resources:
            done += 1
            progress.status(f"Resolving {done} / {total} 🢒 {host.name} 🢒 {limit(resource, 80)}")
            try:
                result = await resolve_resource(resource, http, passwords, resolvers, resolver_settings,
                                                log=context.log)
            except Exception as e:
                context.log.error(f"::Failed to resolve::: {resource} ({type(e).__name__}: {e})", host.name)
                continue

            if not result:
                context.log.error(f"::Could not resolve::: {resource}", host.name)
            elif isinstance(result, AlbumResult):
                context.log.info(f"::Resolved album::: {result.folder_name or resource} "
                                 f"({len(result.resolved_urls)} file(s))", host.name)
                targets.extend(DownloadTarget(url=url, host=host, original_resource=resource,
                                              folder_name=result.folder_name)
                               for url in result.resolved_urls if url)
            else:
                context.log.info(f"::Resolved::: {result}", host.name)
                targets.append(DownloadTarget(url=result, host=host, original_resource=resource))
    return targets


class DownloadOrchestrator:
    """
    Fans out the final downloads of a run and collects them into archive entries.

    Every target becomes its own task. Results are consumed in completion order
    by a single loop, which is the only place the completed counter and the
    filename table are touched.
    """

    def __init__(self, http, progress: ProgressReporter = None, max_concurrent: int = 0,
                 substitute: str = '-'):
        self.http = http
        self.progress = progress or ProgressReporter()
        self.max_concurrent = max_concurrent
        self.substitute = substitute

    async def _fetch(self, target: DownloadTarget, summary: TransferSummary,
                     semaphore: Optional[asyncio.Semaphore]) -> TransferResult:
        def on_progress(loaded, total):
            self.progress.file_progress(FileProgressEvent(
                url=target.url, host=target.host.name, loaded=loaded, total=total,
                completed=summary.completed, total_files=summary.total,
            ))

        try:
            if semaphore is not None:
                async with semaphore:
                    blob = await self.http.download(target.url, on_progress=on_progress)
            else:
                blob = await self.http.download(target.url, on_progress=on_progress)
        except TransferError as e:
            return TransferResult(target=target, error=str(e))
        except Exception as e:
            logger.exception("Unexpected error downloading %s", target.url)
            return TransferResult(target=target, error=f"{type(e).__name__}: {e}")

        content_type = blob.header('content-type')
        filename = derive_basename(target.url, blob.header('content-disposition'), content_type)
        return TransferResult(target=target, data=blob.data, filename=filename, content_type=content_type)

    async def transfer(self, targets: Sequence[DownloadTarget], context: RunContext) -> TransferSummary:
        """
        Download every target concurrently.

        Returns once every task has finished, failed ones included.

        Returns:
            TransferSummary: Counters plus the archive entries of the successful downloads
        """
        summary = TransferSummary(total=len(targets))
        if not targets:
            return summary

        semaphore = asyncio.Semaphore(self.max_concurrent) if self.max_concurrent and self.max_concurrent > 0 else None
        assigner = FilenameAssigner()

        for target in targets:
            context.log.info(f"::Downloading::: {target.url}")
        tasks = [asyncio.ensure_future(self._fetch(target, summary, semaphore)) for target in targets]

        for future in asyncio.as_completed(tasks):
            result = await future
            summary.completed += 1
            target = result.target

            if not result.ok:
                summary.failed += 1
                context.log.error(f"::Failed::: {target.url} ({result.error})")
                self.progress.file_done(FileDoneEvent(url=target.url, host=target.host.name,
                                                      completed=summary.completed, total_files=summary.total,
                                                      error=result.error))
                continue

            basename = assigner.assign(result.filename)
            if summary.total == 1 and context.custom_filename:
                basename = sanitize_path_component(context.custom_filename, self.substitute)

            path = build_entry_path(basename, target.folder_name, summary.total,
                                    context.options.flatten, self.substitute)
            summary.entries.append(ArchiveEntry(path=path, data=result.data))
            summary.succeeded += 1

            context.log.separator()
            context.log.info(f"::Completed::: {target.url}")
            if target.folder_name:
                context.log.info(f"::Saving as::: {basename} ::to:: {target.folder_name}")
            else:
                context.log.info(f"::Saving as::: {basename}")
            self.progress.file_done(FileDoneEvent(url=target.url, host=target.host.name,
                                                  completed=summary.completed, total_files=summary.total,
                                                  path=path))
            self.progress.status(f"{summary.completed} / {summary.total} 🢒 {limit(target.url, 80)}")

        return summary


async def download_post(post: PostContent, http, options: RunOptions = None, *,
                        hosts: Sequence[HostSignature] = None,
                        resolvers=RESOLVERS,
                        disabled_hosts: Iterable[str] = (),
                        progress: ProgressReporter = None,
                        sink: OutputSink = None,
                        settings: PersistentSettings = None,
                        resolver_settings: ResolverSettings = None) -> Optional[Archive]:
    """
    Download everything linked from one post into a single archive.

    Args:
        post: The post fragment and its metadata
        http: Fetch client (see utils.http_client.HttpClient)
        options: Run switches, taken from the settings file when omitted
        hosts: Host signature table, the built-in one when omitted
        resolvers: Ordered resolver registry
        disabled_hosts: Host names or 'name:category' signatures to ignore
        progress: Progress reporter
        sink: Receives the archive when given
        settings: Settings store, the shared one when omitted
        resolver_settings: Resolver tunables, read from settings when omitted

    Returns:
        Archive: The packaged archive, or None when nothing was downloadable

    Raises:
        PackagingError: If the archive could not be built or saved
    """
    settings = settings or get_settings_manager()
    options = options or RunOptions.from_mapping(settings.get_all('run_options'))
    progress = progress or ProgressReporter()
    resolver_settings = resolver_settings or ResolverSettings.from_settings(settings)
    substitute = settings.get('naming', 'invalid_char_substitute', '-')
    max_concurrent = int(settings.get('resolvers', 'max_concurrent_transfers', 0) or 0)

    context = RunContext(post=post, options=options)
    matches = enabled_hosts(match_hosts(post.content, hosts), disabled_hosts)
    if not matches:
        context.log.info("::No resources found::")
        progress.status("No resources found")
        return None

    stored_token = resolver_settings.gofile_token
    targets = await resolve_targets(matches, context, http, resolvers, resolver_settings, progress)
    if resolver_settings.gofile_token and resolver_settings.gofile_token != stored_token:
        settings.set('resolvers', 'gofile_token', resolver_settings.gofile_token)

    if options.skip_duplicates:
        before = len(targets)
        targets = dedupe_targets(targets, context.log)
        if len(targets) != before:
            progress.status(f"Removed {before - len(targets)} duplicates...")

    if not targets:
        context.log.error("::Nothing to download::")
        progress.status("Nothing to download")
        return None

    run_registry.set_processing(post.post_id, True)
    try:
        context.log.separator()
        context.log.info(f"::Found {len(targets)} resource(s)::")
        context.log.separator()

        if options.skip_download:
            context.log.info("::Skipping download::")
            summary = TransferSummary(total=len(targets))
        else:
            orchestrator = DownloadOrchestrator(http, progress, max_concurrent, substitute)
            summary = await orchestrator.transfer(targets, context)

        name = suggest_archive_name(post, options, len(targets), context.custom_filename, substitute)
        context.log.separator()
        context.log.info("::Preparing zip::")

        log_text = None
        if options.generate_log:
            context.log.info("::Generating log file::")
            log_text = context.log.transcript()
        links = None
        if options.generate_links:
            context.log.info("::Generating links::")
            links = [target.url for target in targets]

        archive = ArchiveBuilder().build(summary.entries, name, links=links, log_text=log_text)
        progress.status(f"Packaged {len(summary.entries)} / {summary.total} file(s) into {archive.name}")
        if sink is not None:
            sink.save(archive, title=post.thread_title)
        return archive
    except asyncio.CancelledError:
        run_registry.mark_interrupted(post.post_id)
        raise
    finally:
        run_registry.set_processing(post.post_id, False)
