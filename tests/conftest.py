"""
pytest 설정:

로컬 작업 환경에 설치된 다른 버전의 cluster_deploy 패키지가 존재할 때,
`pytest` 실행 시 site-packages 쪽이 먼저 import 되어 테스트가 깨질 수 있다.
테스트는 항상 현재 레포의 소스를 대상으로 해야 하므로, repo root 를 sys.path 최상단에 고정한다.

외부 명령(gcloud/kubectl) 은 fake_commands 픽스처로 대체한다.
"""

from __future__ import annotations

import os
import sys
from typing import Dict, List, Sequence

import pytest


def pytest_configure() -> None:
    repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


class FakeCommands:
    """
    run_command 대체용. 호출된 명령을 기록하고,
    명령 앞부분(prefix) 으로 등록된 결과를 리턴한다. 등록되지 않은 명령은 성공(exit 0).
    """

    def __init__(self) -> None:
        self.calls: List[list[str]] = []
        self._responses: Dict[tuple[str, ...], tuple[int, str]] = {}
        # kubectl apply 시점의 파일 존재 여부/내용 기록
        self.applied_contents: List[str] = []

    def respond(self, prefix: Sequence[str], *, returncode: int = 0, stdout: str = "") -> None:
        self._responses[tuple(prefix)] = (returncode, stdout)

    def __call__(self, cmd: Sequence[str], **kwargs):  # noqa: ANN003, ANN204
        from cluster_deploy.subprocess_utils import RunResult

        cmd = list(cmd)
        self.calls.append(cmd)
        if cmd[:2] == ["kubectl", "apply"]:
            path = cmd[cmd.index("-f") + 1]
            with open(path, "r", encoding="utf-8") as f:
                self.applied_contents.append(f.read())

        best: tuple[int, str] = (0, "")
        best_len = -1
        for prefix, response in self._responses.items():
            if tuple(cmd[: len(prefix)]) == prefix and len(prefix) > best_len:
                best, best_len = response, len(prefix)
        returncode, stdout = best
        return RunResult(returncode=returncode, stdout=stdout, stderr="" if returncode == 0 else "boom")

    def matching(self, *prefix: str) -> List[list[str]]:
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]


@pytest.fixture
def fake_commands(monkeypatch: pytest.MonkeyPatch) -> FakeCommands:
    from cluster_deploy import gcloud, kubectl

    fake = FakeCommands()
    monkeypatch.setattr(gcloud, "run_command", fake)
    monkeypatch.setattr(kubectl, "run_command", fake)
    return fake
