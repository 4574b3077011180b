"""
Data models for Kubelogs.

This module defines the data structures passed between pod discovery and log
streaming.

Key Models:
- Container: A container of a pod
- Pod: Pod name and its containers in discovery order
- PodSet: Ordered pods accumulated over all patterns
- LogOptions: The `kubectl logs` flags forwarded to every stream
- StreamTask: One pod/container stream about to be launched
- TaskResult: How a stream terminated

Example:
    ```python
    pod = Pod(name="api-7d9c", containers=(Container("app"), Container("istio-proxy")))
    pods = PodSet()
    pods.extend([pod])
    for pod, container in pods.pairs():
        print(pod.name, container.name)
    ```
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple

from .constants import DEFAULT_NAMESPACE


@dataclass(frozen=True)
class Container:
    """A named container inside a pod."""
    name: str


@dataclass(frozen=True)
class Pod:
    """
    Pod name and containers.

    Attributes:
        name: Pod name, unique within its namespace
        containers: Containers kept after filtering, regular containers first
            and init containers after them, as listed by the cluster. May be
            empty when the container filter matched nothing.
    """
    name: str
    containers: Tuple[Container, ...] = ()


@dataclass
class PodSet:
    """
    Ordered collection of pods.

    Pods are appended in the order patterns were given. The same pod appears
    twice when it matches two patterns.
    """
    items: List[Pod] = field(default_factory=list)

    def extend(self, pods: Iterable[Pod]) -> None:
        self.items.extend(pods)

    def pairs(self) -> Iterator[Tuple[Pod, Container]]:
        """Yield every (pod, container) pair in discovery order."""
        for pod in self.items:
            for container in pod.containers:
                yield pod, container

    def __iter__(self) -> Iterator[Pod]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class LogOptions:
    """
    Options for the `kubectl logs` invocations.

    Only explicitly set values are forwarded, everything else keeps kubectl's
    own default.

    Attributes:
        follow: Stream logs continuously
        timestamps: Prefix each line with its timestamp
        limit_bytes: Maximum bytes returned per container
        previous: Logs of the previous container instance
        tail: Number of trailing lines (None means all)
        since_time: RFC3339 absolute cutoff
        since: Relative cutoff such as "10m"
        container: Exact container name filter ("" means every container)
        namespace: Namespace of the pods
    """
    follow: bool = False
    timestamps: bool = False
    limit_bytes: Optional[int] = None
    previous: bool = False
    tail: Optional[int] = None
    since_time: Optional[str] = None
    since: Optional[str] = None
    container: str = ""
    namespace: str = DEFAULT_NAMESPACE

    def forwarded_flags(self) -> List[str]:
        """Render the set log flags in long-flag spelling."""
        flags = []
        if self.follow:
            flags.append("--follow=true")
        if self.limit_bytes is not None:
            flags.append(f"--limit-bytes={self.limit_bytes}")
        if self.previous:
            flags.append("--previous=true")
        if self.since:
            flags.append(f"--since={self.since}")
        if self.since_time:
            flags.append(f"--since-time={self.since_time}")
        if self.tail is not None:
            flags.append(f"--tail={self.tail}")
        if self.timestamps:
            flags.append("--timestamps=true")
        return flags


@dataclass(frozen=True)
class StreamTask:
    """
    One log stream: a pod/container pair and the command that fetches it.

    Attributes:
        pod: Pod name
        container: Container name
        command: Argument vector of the kubectl invocation
        prefix: Line prefix, "[<pod> <container>]"
    """
    pod: str
    container: str
    command: Tuple[str, ...]
    prefix: str

    @property
    def command_line(self) -> str:
        return shlex.join(self.command)


@dataclass(frozen=True)
class TaskResult:
    """Termination of a stream task: exit status, or the launch error."""
    task: StreamTask
    returncode: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.returncode == 0
