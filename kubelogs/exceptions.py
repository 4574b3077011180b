"""
Custom exceptions for Kubelogs.

Exception Hierarchy:
- KubelogsError: Base exception for all Kubelogs-specific errors
  - ExternalToolError: Raised when a kubectl invocation fails or cannot start
  - PatternCompileError: Raised when a pod pattern is not a valid regex
  - ConfigurationError: Raised when command-line options are invalid

Only pod discovery and configuration problems surface as exceptions. Failures
of individual log streams are logged by the streamer and never raised.

Example:
    ```python
    try:
        validate_regex_pattern("web-(")
    except PatternCompileError as e:
        print(f"Pattern validation failed: {e}")
    ```
"""

from typing import List, Optional


class KubelogsError(Exception):
    """Base exception for Kubelogs errors."""
    pass


class ExternalToolError(KubelogsError):
    """Raised when a kubectl invocation fails or cannot start."""

    def __init__(self, command: List[str], message: str, returncode: Optional[int] = None, output: str = ""):
        self.command = command
        self.returncode = returncode
        self.output = output
        super().__init__(message)


class PatternCompileError(KubelogsError):
    """Raised when a pod pattern is not a valid regular expression."""
    pass


class ConfigurationError(KubelogsError):
    """Raised when there's a configuration issue."""
    pass
