"""
Pod discovery output processing.

This module turns the projected output of the pod listing into Pod models.
The projection prints one record per pod, records separated by "|" and
fields by a single space:

    pod-a web sidecar|pod-b web|

The first field is the pod name, the remaining fields are its regular and
init container names.

Key Functions:
- split_records: Split raw output into field lists
- filter_containers: Apply the exact container filter
- parse_pod_records: Select pods by regex and build Pod models

Example:
    ```python
    pods = parse_pod_records("pod-a web sidecar|pod-b web|", re.compile("pod-a"))
    # [Pod(name='pod-a', containers=(Container('web'), Container('sidecar')))]
    ```
"""

from typing import Iterator, List, Pattern, Sequence, Tuple

from .constants import FIELD_SEPARATOR, RECORD_SEPARATOR
from .models import Container, Pod


def split_records(output: str) -> Iterator[List[str]]:
    """Yield the fields of every non-empty record."""
    for record in output.split(RECORD_SEPARATOR):
        fields = [f for f in record.strip().split(FIELD_SEPARATOR) if f]
        if fields:
            yield fields


def filter_containers(names: Sequence[str], container_filter: str = "") -> Tuple[Container, ...]:
    """Keep every container, or only those named exactly like the filter."""
    return tuple(Container(name=n) for n in names if not container_filter or n == container_filter)


def parse_pod_records(output: str, regex: Pattern[str], container_filter: str = "") -> List[Pod]:
    """
    Select pods whose name matches the regex and build Pod models.

    Matching uses search semantics: "abc" selects "xabcx". Pods whose
    containers are all filtered out are still returned, with no containers.

    Args:
        output: Raw discovery output
        regex: Compiled pod name pattern
        container_filter: Exact, case-sensitive container name ("" keeps all)

    Returns:
        List[Pod]: Matching pods in listing order
    """
    pods = []
    for fields in split_records(output):
        name, containers = fields[0], fields[1:]
        if not regex.search(name):
            continue
        pods.append(Pod(name=name, containers=filter_containers(containers, container_filter)))
    return pods
