"""
Command-line interface for Kubelogs.

This module provides the command-line interface for Kubelogs, handling
argument parsing, input validation, logging setup and the run itself. The
log flags mirror `kubectl logs` and are forwarded only when given.

Key Functions:
- build_parser: Create and configure the argument parser
- configure_logging: Set up the console logger handed to the core
- main: Main entry point for the CLI application

Exit codes:
- 0: All streams ran, even if some of them failed
- 1: Pod discovery failed
- 2: Invalid pattern or option
- 130: Interrupted

Example:
    ```bash
    kubelogs my-pod-v1
    kubelogs my-pod-v1 -c my-container
    kubelogs regex -f
    kubelogs my-pod-v1 --since 10m
    kubelogs '^api-' --tail 1 -n prod
    ```
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional, Sequence, TextIO

from . import __version__
from .constants import (
    DEFAULT_KUBECTL, DEFAULT_LOG_LEVEL, DEFAULT_NAMESPACE, EXIT_FAILURE,
    EXIT_INTERRUPTED, EXIT_USAGE, LOG_FORMAT, LOGGER_NAME, UNSET_TAIL
)
from .exceptions import ConfigurationError, ExternalToolError, PatternCompileError
from .kube import KubeContext
from .runner import run_logs
from .validation import (
    build_log_options, validate_context, validate_positive_int, validate_regex_pattern
)

USAGE = "kubelogs [-f] [-p] (POD | TYPE/NAME)... [-c CONTAINER] [flags]"


def build_parser() -> argparse.ArgumentParser:
    """
    Build and configure the command-line argument parser.

    Environment variables are used as defaults where appropriate.

    Returns:
        argparse.ArgumentParser: Configured argument parser with all options

    Environment Variables:
        KUBELOGS_NAMESPACE: Default namespace (default: default)
        KUBELOGS_KUBECTL: kubectl binary to run (default: kubectl)
    """
    env_namespace = os.getenv("KUBELOGS_NAMESPACE", DEFAULT_NAMESPACE)
    env_kubectl = os.getenv("KUBELOGS_KUBECTL", DEFAULT_KUBECTL)

    p = argparse.ArgumentParser(
        "kubelogs",
        usage=USAGE,
        description="Print the logs for the containers of every pod matching a regex",
    )
    p.add_argument("patterns", nargs="+", metavar="PATTERN", help="Regex matched against pod names (search semantics)")
    p.add_argument("-f", "--follow", action="store_true", help="Specify if the logs should be streamed.")
    p.add_argument("--timestamps", action="store_true", help="Include timestamps on each line in the log output")
    p.add_argument("--limit-bytes", type=int, default=None, help="Maximum bytes of logs to return. Defaults to no limit.")
    p.add_argument("-p", "--previous", action="store_true", help="Print the logs for the previous instance of the container if it exists.")
    p.add_argument("--tail", type=int, default=UNSET_TAIL, help="Lines of recent log file to display. Defaults to all lines.")
    p.add_argument("--since-time", default=None, help="Only return logs after a specific date (RFC3339). Only one of since-time / since may be used.")
    p.add_argument("--since", default=None, help="Only return logs newer than a relative duration like 5s, 2m, or 3h. Only one of since-time / since may be used.")
    p.add_argument("-c", "--container", default="", help="Print the logs of this container")
    p.add_argument("-n", "--namespace", default=env_namespace, help="The Kubernetes namespace where the pods are located (env: KUBELOGS_NAMESPACE)")
    p.add_argument("-v", "--debug", action="store_true", help="Debug output, including every kubectl command line")
    p.add_argument("--kubectl", default=env_kubectl, help="kubectl binary to run (env: KUBELOGS_KUBECTL)")
    p.add_argument("--kubeconfig", default=None, help="Path to kubeconfig (defaults to kube rules)")
    p.add_argument("--context", default=None, help="Kubecontext override")
    p.add_argument("--max-concurrency", type=int, default=None, help="Maximum number of simultaneous log streams (default: no limit)")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def configure_logging(debug: bool = False, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure the kubelogs logger and return it.

    Log lines go to stdout by default. The level comes from --debug, else
    from KUBELOGS_LOG_LEVEL, else INFO. Calling this again replaces the
    previous handler.
    """
    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, os.getenv("KUBELOGS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(), logging.INFO)

    log = logging.getLogger(LOGGER_NAME)
    for handler in list(log.handlers):
        log.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    log.addHandler(handler)
    log.setLevel(level)
    log.propagate = False
    return log


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main entry point for the Kubelogs CLI application.

    The function performs the following steps:
    1. Parse command-line arguments
    2. Validate patterns and options before touching the cluster
    3. Resolve the matching pods and stream their logs
    4. Exit 0 once every stream has ended, even if some failed

    Raises:
        SystemExit: On configuration errors (exit code 2), discovery errors
            (exit code 1) or interruption (exit code 130)
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    log = configure_logging(args.debug)

    try:
        for pattern in args.patterns:
            validate_regex_pattern(pattern)
        options = build_log_options(
            follow=args.follow,
            timestamps=args.timestamps,
            limit_bytes=args.limit_bytes,
            previous=args.previous,
            tail=args.tail,
            since_time=args.since_time,
            since=args.since,
            container=args.container,
            namespace=args.namespace,
        )
        max_concurrency = validate_positive_int(args.max_concurrency, "--max-concurrency")
        context = validate_context(args.context, args.kubeconfig)
    except (PatternCompileError, ConfigurationError) as e:
        log.critical(f"Configuration error: {e}")
        sys.exit(EXIT_USAGE)

    kube = KubeContext(kubectl=args.kubectl, kubeconfig=args.kubeconfig, context=context)

    try:
        asyncio.run(run_logs(args.patterns, options, kube, log, max_concurrency=max_concurrency))
    except KeyboardInterrupt:
        print("\nShutting down...", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)
    except ExternalToolError as e:
        log.critical(f"Pod discovery failed: {e}")
        sys.exit(EXIT_FAILURE)


if __name__ == "__main__":  # pragma: no cover
    main()
