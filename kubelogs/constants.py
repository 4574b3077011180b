"""
Constants and configuration for Kubelogs.

Constants are organized by category:
- kubectl: Binary name and the pod discovery projection
- Discovery output: Separators of the record format
- Streaming: Pipe reader limits and the exit marker
- Logging: Default log level and record format
- Exit codes: Process exit statuses of the CLI
"""

# kubectl
DEFAULT_KUBECTL = "kubectl"
DEFAULT_NAMESPACE = "default"

# One record per pod: "<pod> <container> <container>...|", regular and init containers
POD_LISTING_JSONPATH = (
    "{range .items[*]}{.metadata.name} "
    "{.spec['containers', 'initContainers'][*].name}|{end}"
)

# Discovery output
RECORD_SEPARATOR = "|"
FIELD_SEPARATOR = " "

# Streaming
STREAM_LINE_LIMIT = 1024 * 1024  # 1 MiB per log line
DRAIN_CHUNK_SIZE = 64 * 1024
EXIT_MARKER = "exit"
UNSET_TAIL = -1

# Logging
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(message)s"
LOGGER_NAME = "kubelogs"

# Exit codes
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130
