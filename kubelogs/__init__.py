"""
Kubelogs - Multi-pod Kubernetes log tailing.

Kubelogs finds the pods of a namespace whose names match one or more regular
expressions and streams the logs of every matching container side by side.
Each output line is prefixed with the pod and container it came from, so the
interleaved output stays readable.

Key Features:
- Regex pod selection (search semantics, several patterns at once)
- Exact container filtering
- Concurrent `kubectl logs` processes with stdout and stderr drained in parallel
- Pass-through of the usual `kubectl logs` flags (--follow, --since, --tail, ...)

Example:
    Fetch the logs of every api pod:
    ```bash
    kubelogs '^api-'
    ```

    Follow one container of several deployments:
    ```bash
    kubelogs '^web-' '^worker-' -c app -f --since 10m
    ```
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
