"""
kubectl interactions for Kubelogs.

This module is the interface between Kubelogs and the cluster. Every cluster
access goes through the kubectl binary, started with an argument vector and
never through a shell, so pod, container and flag values cannot be
interpreted as shell syntax.

Key Components:
- KubeContext: kubectl binary plus the global flags added to every call
- run_kubectl: Run kubectl to completion and capture its combined output
- list_pod_containers: Project every pod of a namespace to "name containers|"
- resolve_pods: Discover the pods matching a list of patterns
- build_logs_command: Argument vector of the `kubectl logs` call for one container

Example:
    ```python
    kube = KubeContext(kubeconfig="/path/to/config", context="staging")
    pods = await resolve_pods(kube, ["^api-"], "", "prod", log)
    cmd = build_logs_command(kube, "api-7d9c", "app", LogOptions(follow=True))
    ```
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .constants import DEFAULT_KUBECTL, DEFAULT_NAMESPACE, POD_LISTING_JSONPATH
from .exceptions import ExternalToolError
from .models import LogOptions, PodSet
from .pod_processing import parse_pod_records
from .validation import validate_regex_pattern


@dataclass(frozen=True)
class KubeContext:
    """
    How to reach the cluster.

    Attributes:
        kubectl: Path or name of the kubectl binary
        kubeconfig: Optional kubeconfig file passed with --kubeconfig
        context: Optional context name passed with --context

    Example:
        ```python
        kube = KubeContext(context="staging")
        kube.command("get", "pod")
        # ['kubectl', '--context=staging', 'get', 'pod']
        ```
    """
    kubectl: str = DEFAULT_KUBECTL
    kubeconfig: Optional[str] = None
    context: Optional[str] = None

    def global_flags(self) -> List[str]:
        flags = []
        if self.kubeconfig:
            flags.append(f"--kubeconfig={self.kubeconfig}")
        if self.context:
            flags.append(f"--context={self.context}")
        return flags

    def command(self, *args: str) -> List[str]:
        return [self.kubectl, *self.global_flags(), *args]


async def run_kubectl(command: Sequence[str]) -> str:
    """
    Run a kubectl command to completion and return its output.

    Standard output and standard error are captured together.

    Args:
        command: Full argument vector, binary first

    Returns:
        str: Combined output

    Raises:
        ExternalToolError: If kubectl cannot be started or exits non-zero
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except OSError as e:
        raise ExternalToolError(list(command), f"Failed to start {command[0]}: {e}")
    out, _ = await proc.communicate()
    output = out.decode("utf-8", "replace")
    if proc.returncode != 0:
        raise ExternalToolError(
            list(command),
            f"{command[0]} exited with status {proc.returncode}: {output.strip()}",
            returncode=proc.returncode,
            output=output,
        )
    return output


async def list_pod_containers(kube: KubeContext, namespace: str = DEFAULT_NAMESPACE) -> str:
    """List every pod of a namespace with its regular and init container names."""
    return await run_kubectl(kube.command(
        "get", "pod", "-n", namespace, f"--output=jsonpath={POD_LISTING_JSONPATH}",
    ))


async def resolve_pods(
    kube: KubeContext,
    patterns: Sequence[str],
    container_filter: str,
    namespace: str,
    log: logging.Logger,
) -> PodSet:
    """
    Discover the pods matching each pattern.

    All patterns are compiled before the first kubectl call, so an invalid
    pattern fails the run without touching the cluster. The pod listing is
    then fetched once per pattern and the results are concatenated in
    pattern order. A pod matching two patterns is listed twice.

    Args:
        kube: Cluster access settings
        patterns: Pod name regexes, search semantics
        container_filter: Exact container name, "" for every container
        namespace: Namespace to list
        log: Logger for progress messages

    Returns:
        PodSet: Matching pods with their filtered containers

    Raises:
        PatternCompileError: If a pattern is not a valid regex
        ExternalToolError: If a pod listing fails
    """
    compiled = [validate_regex_pattern(p) for p in patterns]
    pods = PodSet()
    for regex in compiled:
        output = await list_pod_containers(kube, namespace)
        matched = parse_pod_records(output, regex, container_filter)
        log.debug(f"[resolve] pattern={regex.pattern!r} matched {len(matched)} pod(s)")
        pods.extend(matched)
    return pods


def build_logs_command(kube: KubeContext, pod: str, container: str, options: LogOptions) -> List[str]:
    """
    Build the `kubectl logs` argument vector for one container.

    The container is always named explicitly, so a container filter works
    for multi-container pods too.
    """
    return kube.command(
        "logs", pod,
        f"--namespace={options.namespace}",
        *options.forwarded_flags(),
        f"--container={container}",
    )
