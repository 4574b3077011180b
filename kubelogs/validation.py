"""
Input validation for Kubelogs.

This module validates every user input before any kubectl process is started,
so a bad pattern or flag never leaves half of the streams running.

Key Functions:
- validate_regex_pattern: Compiles a pod name pattern
- validate_duration: Checks a relative duration such as "1h30m"
- validate_since_time: Checks an RFC3339 timestamp
- validate_positive_int: Checks byte limits and concurrency caps
- validate_context: Checks that a kube context exists in the kubeconfig
- build_log_options: Validates and assembles the forwarded log flags

All validation functions raise PatternCompileError or ConfigurationError with
descriptive messages when validation fails.

Example:
    ```python
    try:
        pattern = validate_regex_pattern("^api-")
        since = validate_duration("10m")
    except (PatternCompileError, ConfigurationError) as e:
        print(f"Validation failed: {e}")
    ```
"""

import re
from datetime import datetime
from typing import Optional

from kubernetes import config
from kubernetes.config.config_exception import ConfigException

from .constants import DEFAULT_NAMESPACE, UNSET_TAIL
from .exceptions import ConfigurationError, PatternCompileError
from .models import LogOptions

# Go duration syntax as accepted by kubectl: "300ms", "1.5h", ".5h", "2h45m"
_DURATION_RE = re.compile(r"^(?:(?:\d+\.?\d*|\.\d+)(?:ns|us|µs|ms|s|m|h))+$")

# date, time, optional fraction of any length, then "Z" or a numeric offset
_RFC3339_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.\d+)?(?:[Zz]|[+-]\d{2}:\d{2})$"
)


def validate_regex_pattern(pattern: str) -> re.Pattern:
    """
    Compile a regex pattern for pod name matching.

    The pattern is used as given. It is matched with search semantics, so
    "api" selects "my-api-0" and an empty pattern selects every pod.

    Args:
        pattern: The regex pattern string to compile

    Returns:
        re.Pattern: Compiled regex pattern

    Raises:
        PatternCompileError: If the pattern is not valid regex syntax

    Example:
        ```python
        pattern = validate_regex_pattern("^api-")
        pattern.search("api-7d9c")  # match
        validate_regex_pattern("(")  # raises PatternCompileError
        ```
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternCompileError(f"Invalid regex pattern {pattern!r}: {e}")


def validate_duration(value: str) -> str:
    """Validate a relative duration like "5s", "2m" or "1h30m"."""
    value = value.strip()
    if value == "0" or _DURATION_RE.match(value):
        return value
    raise ConfigurationError(f"Invalid duration {value!r}, expected a value like 5s, 2m or 3h")


def validate_since_time(value: str) -> str:
    """
    Validate an RFC3339 timestamp.

    A timezone offset (or "Z") is required, as RFC3339 demands, and the
    fraction of a second may have any number of digits, as in the
    nanosecond timestamps kubectl prints. The value is returned unchanged so
    kubectl receives exactly what the user typed.

    Raises:
        ConfigurationError: If the value is not an RFC3339 timestamp
    """
    value = value.strip()
    match = _RFC3339_RE.match(value)
    if not match:
        raise ConfigurationError(f"Invalid --since-time {value!r}, expected RFC3339 like 2024-01-15T10:30:00Z")
    try:
        datetime(*(int(part) for part in match.groups()))
    except ValueError as e:
        raise ConfigurationError(f"Invalid --since-time {value!r}: {e}")
    return value


def validate_positive_int(value: Optional[int], name: str) -> Optional[int]:
    """Validate an optional integer option that must be greater than zero."""
    if value is None:
        return None
    if not isinstance(value, int) or value < 1:
        raise ConfigurationError(f"{name} must be greater than 0, got: {value}")
    return value


def validate_namespace(namespace: str) -> str:
    if not namespace or not namespace.strip():
        raise ConfigurationError("Namespace cannot be empty")
    return namespace.strip()


def validate_context(context: Optional[str], kubeconfig: Optional[str]) -> Optional[str]:
    """
    Check that a kube context exists before any kubectl process is started.

    Uses the kubernetes client's kubeconfig loader, which honours the
    KUBECONFIG environment variable when no explicit file is given.

    Args:
        context: Context name from --context (None skips the check)
        kubeconfig: Path from --kubeconfig, or None for the default location

    Returns:
        Optional[str]: The validated context name

    Raises:
        ConfigurationError: If the kubeconfig cannot be read or lacks the context
    """
    if not context:
        return None
    try:
        contexts, _ = config.list_kube_config_contexts(config_file=kubeconfig)
    except (ConfigException, OSError) as e:
        raise ConfigurationError(f"Cannot read kubeconfig: {e}")
    names = sorted(c["name"] for c in contexts or [])
    if context not in names:
        raise ConfigurationError(f"Context {context!r} not found in kubeconfig (available: {', '.join(names) or 'none'})")
    return context


def build_log_options(
    follow: bool = False,
    timestamps: bool = False,
    limit_bytes: Optional[int] = None,
    previous: bool = False,
    tail: Optional[int] = None,
    since_time: Optional[str] = None,
    since: Optional[str] = None,
    container: Optional[str] = None,
    namespace: str = DEFAULT_NAMESPACE,
) -> LogOptions:
    """
    Validate the log flags and assemble LogOptions.

    A tail of -1 is kubectl's "all lines" and is treated as unset.

    Raises:
        ConfigurationError: On an invalid value or when both --since and
            --since-time are given
    """
    if since and since_time:
        raise ConfigurationError("Only one of --since-time / --since may be used")
    if tail is not None and tail < UNSET_TAIL:
        raise ConfigurationError(f"--tail must be -1 or greater, got: {tail}")
    return LogOptions(
        follow=follow,
        timestamps=timestamps,
        limit_bytes=validate_positive_int(limit_bytes, "--limit-bytes"),
        previous=previous,
        tail=None if tail is None or tail == UNSET_TAIL else tail,
        since_time=validate_since_time(since_time) if since_time else None,
        since=validate_duration(since) if since else None,
        container=container or "",
        namespace=validate_namespace(namespace),
    )
