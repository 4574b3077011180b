"""
Run orchestration for Kubelogs.

Ties pod discovery to log streaming for a single invocation: resolve the
pods of every pattern, then stream all their containers and wait for them.
"""

import logging
from typing import List, Optional, Sequence

from .kube import KubeContext, resolve_pods
from .models import LogOptions, TaskResult
from .streamer import LogStreamer


async def run_logs(
    patterns: Sequence[str],
    options: LogOptions,
    kube: KubeContext,
    log: logging.Logger,
    max_concurrency: Optional[int] = None,
) -> List[TaskResult]:
    """
    Discover matching pods and stream their logs.

    Raises:
        PatternCompileError: If a pattern is not a valid regex
        ExternalToolError: If pod discovery fails
    """
    pods = await resolve_pods(kube, patterns, options.container, options.namespace, log)
    log.info(f"kubelogs for {len(pods)} pod(s)")

    streamer = LogStreamer(kube, options, log, max_concurrency=max_concurrency)
    results = await streamer.stream(pods)

    failed = sum(1 for r in results if not r.ok)
    if failed:
        log.debug(f"[run] {failed} of {len(results)} stream(s) ended with an error")
    return results
