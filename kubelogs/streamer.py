"""
Concurrent log streaming for Kubelogs.

One `kubectl logs` process is started per pod/container pair, all at once
unless a concurrency cap is configured. Each process gets two readers that
drain standard output and standard error independently, so neither pipe can
fill up and stall the process. Every line is logged with its
"[<pod> <container>]" prefix; lines of different streams interleave freely.

Failures of a single stream (kubectl missing, non-zero exit, unreadable
pipe) are logged and only end that stream. `LogStreamer.stream` returns once
every process has exited and its pipes are drained.

Example:
    ```python
    streamer = LogStreamer(KubeContext(), LogOptions(follow=True), log)
    results = await streamer.stream(pods)
    failed = [r for r in results if not r.ok]
    ```
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import AsyncContextManager, List, Optional

from .constants import DRAIN_CHUNK_SIZE, EXIT_MARKER, STREAM_LINE_LIMIT
from .kube import KubeContext, build_logs_command
from .models import LogOptions, PodSet, StreamTask, TaskResult


def make_prefix(pod: str, container: str) -> str:
    return f"[{pod} {container}]"


class LogStreamer:
    """
    Fan-out of `kubectl logs` over a PodSet.

    Attributes:
        kube: Cluster access settings
        options: Forwarded log flags
        log: Logger receiving log lines, exit markers and errors
        max_concurrency: Cap on simultaneous processes, None for no cap
    """

    def __init__(self, kube: KubeContext, options: LogOptions, log: logging.Logger, max_concurrency: Optional[int] = None):
        self.kube = kube
        self.options = options
        self.log = log
        self.max_concurrency = max_concurrency

    def build_task(self, pod: str, container: str) -> StreamTask:
        command = build_logs_command(self.kube, pod, container, self.options)
        return StreamTask(pod=pod, container=container, command=tuple(command), prefix=make_prefix(pod, container))

    async def stream(self, pods: PodSet) -> List[TaskResult]:
        """
        Stream every container of every pod and wait for all of them.

        Returns:
            List[TaskResult]: One result per pod/container pair, in pair order
        """
        slots: AsyncContextManager = (
            asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else contextlib.nullcontext()
        )
        jobs = []
        for pod, container in pods.pairs():
            task = self.build_task(pod.name, container.name)
            self.log.info(f"{pod.name} {container.name}")
            self.log.debug(task.command_line)
            jobs.append(self._run_task(task, slots))
        # every task finishes before an unexpected error propagates
        results = await asyncio.gather(*jobs, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return results

    async def _run_task(self, task: StreamTask, slots: AsyncContextManager) -> TaskResult:
        async with slots:
            try:
                proc = await asyncio.create_subprocess_exec(
                    *task.command,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    limit=STREAM_LINE_LIMIT,
                )
            except OSError as e:
                self.log.error(f"{task.prefix} failed to start: {e}")
                return TaskResult(task=task, error=str(e))

            _, _, returncode = await asyncio.gather(
                self._pump(task, proc.stdout, "stdout"),
                self._pump(task, proc.stderr, "stderr"),
                proc.wait(),
            )

        if returncode != 0:
            self.log.error(f"{task.prefix} exited with status {returncode}")
        else:
            self.log.info(f"{task.prefix} {EXIT_MARKER}")
        return TaskResult(task=task, returncode=returncode)

    async def _pump(self, task: StreamTask, reader: asyncio.StreamReader, channel: str) -> None:
        """Log every line of one pipe until end of stream."""
        try:
            while True:
                raw = await reader.readline()
                if not raw:
                    return
                line = raw.decode("utf-8", "replace").rstrip("\r\n")
                self.log.info(f"{task.prefix} {line}")
        except (ValueError, OSError) as e:
            self.log.debug(f"{task.prefix} stopped reading {channel}: {e}")
        await self._discard(reader)

    async def _discard(self, reader: asyncio.StreamReader) -> None:
        try:
            while await reader.read(DRAIN_CHUNK_SIZE):
                pass
        except OSError:
            return
