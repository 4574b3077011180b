"""
Shared pytest fixtures for Kubelogs tests.

This module provides common fixtures including:
- fake_kubectl: An executable standing in for kubectl, driven by env vars
- test_log: A logger whose records reach pytest's caplog
"""

import json
import logging
import os
import stat
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# =============================================================================
# Fake kubectl
# =============================================================================

FAKE_KUBECTL = '''#!{python}
import json
import os
import sys
import time

args = sys.argv[1:]
with open(os.environ["FAKE_KUBECTL_CALLS"], "a") as f:
    f.write(json.dumps(args) + "\\n")

rest = [a for a in args if not a.startswith(("--kubeconfig=", "--context="))]

if rest[:2] == ["get", "pod"]:
    sys.stdout.write(os.environ.get("FAKE_KUBECTL_PODS", ""))
    sys.stdout.flush()
    status = int(os.environ.get("FAKE_KUBECTL_GET_STATUS", "0"))
    if status:
        sys.stderr.write("error: You must be logged in to the server (Unauthorized)\\n")
    sys.exit(status)

if rest[:1] == ["logs"]:
    pod = rest[1]
    container = [a.split("=", 1)[1] for a in rest if a.startswith("--container=")][-1]
    if "slow" in pod:
        time.sleep(0.3)
    if "huge" in pod:
        sys.stdout.write("x" * int(os.environ["FAKE_KUBECTL_HUGE_LINE"]) + "\\n")
        for i in range(20000):
            sys.stdout.write("after %d\\n" % i)
        sys.stdout.flush()
    for i in range(int(os.environ.get("FAKE_KUBECTL_LINES", "1"))):
        print("hello from %s/%s #%d" % (pod, container, i), flush=True)
    print("warning from %s/%s" % (pod, container), file=sys.stderr, flush=True)
    if "nonl" in pod:
        sys.stdout.write("partial line")
        sys.stdout.flush()
    sys.exit(3 if "fail" in pod else 0)

sys.exit(64)
'''


@dataclass
class FakeKubectl:
    """Handle on the fake kubectl executable and the calls it recorded."""
    path: Path
    calls_file: Path
    monkeypatch: pytest.MonkeyPatch

    def set_pods(self, output: str) -> None:
        self.monkeypatch.setenv("FAKE_KUBECTL_PODS", output)

    def fail_discovery(self, status: int = 1) -> None:
        self.monkeypatch.setenv("FAKE_KUBECTL_GET_STATUS", str(status))

    def set_lines(self, count: int) -> None:
        self.monkeypatch.setenv("FAKE_KUBECTL_LINES", str(count))

    @property
    def calls(self) -> List[List[str]]:
        if not self.calls_file.exists():
            return []
        return [json.loads(line) for line in self.calls_file.read_text().splitlines()]

    def calls_to(self, verb: str) -> List[List[str]]:
        return [c for c in self.calls if verb in c]


@pytest.fixture
def fake_kubectl(tmp_path, monkeypatch) -> FakeKubectl:
    """Write an executable kubectl stand-in to tmp_path."""
    path = tmp_path / "kubectl"
    path.write_text(FAKE_KUBECTL.replace("{python}", sys.executable))
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    calls_file = tmp_path / "calls.jsonl"
    monkeypatch.setenv("FAKE_KUBECTL_CALLS", str(calls_file))
    monkeypatch.delenv("FAKE_KUBECTL_GET_STATUS", raising=False)
    monkeypatch.delenv("FAKE_KUBECTL_LINES", raising=False)
    fake = FakeKubectl(path=path, calls_file=calls_file, monkeypatch=monkeypatch)
    fake.set_pods("pod-a web sidecar|pod-b web|")
    return fake


@pytest.fixture
def test_log(caplog) -> logging.Logger:
    """A logger outside the 'kubelogs' hierarchy so caplog sees every record."""
    caplog.set_level(logging.DEBUG, logger="kubelogs_test")
    return logging.getLogger("kubelogs_test")


@pytest.fixture
def kubeconfig(tmp_path) -> Path:
    """Minimal kubeconfig with the contexts 'dev' and 'prod'."""
    path = tmp_path / "kubeconfig"
    path.write_text(
        "apiVersion: v1\n"
        "kind: Config\n"
        "clusters:\n"
        "- name: c1\n"
        "  cluster:\n"
        "    server: https://127.0.0.1:6443\n"
        "users:\n"
        "- name: u1\n"
        "  user:\n"
        "    token: abc\n"
        "contexts:\n"
        "- name: dev\n"
        "  context:\n"
        "    cluster: c1\n"
        "    user: u1\n"
        "- name: prod\n"
        "  context:\n"
        "    cluster: c1\n"
        "    user: u1\n"
        "current-context: dev\n"
    )
    return path
