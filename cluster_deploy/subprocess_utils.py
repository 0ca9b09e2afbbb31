from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass
from textwrap import shorten
from typing import Sequence

import click

from .logging_utils import get_logger


logger = get_logger(__name__)


# 실행 파일을 찾지 못했을 때 셸과 같은 exit 코드를 사용한다.
COMMAND_NOT_FOUND = 127


@dataclass(frozen=True)
class RunResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_command(cmd: Sequence[str]) -> RunResult:
    """
    subprocess 실행 공통 유틸.

    - 실행 전 셸 이스케이프된 명령을 출력한다(감사 용도, 로그 레벨과 무관)
    - stdout/stderr 를 캡처하고, stdout 은 그대로 출력한다
    - 실패(exit != 0) 시에만 stderr 를 빨간색으로 출력한다
    - 재시도/타임아웃 없음. 자식 프로세스가 끝날 때까지 블록한다
    """
    click.echo(f"$ {shlex.join(cmd)}")

    try:
        result = subprocess.run(  # noqa: S603
            list(cmd),
            check=False,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        message = f"필요한 명령을 찾을 수 없습니다: {cmd[0]} (gcloud/kubectl 이 설치되어 있는지 확인하세요)"
        click.secho(message, fg="red", err=True)
        return RunResult(returncode=COMMAND_NOT_FOUND, stdout="", stderr=message)

    stdout = result.stdout or ""
    stderr = result.stderr or ""

    if stdout:
        click.echo(stdout.rstrip("\n"))

    if result.returncode != 0:
        if stderr:
            click.secho(stderr.rstrip("\n"), fg="red", err=True)
        logger.debug(
            "명령 실패 (exit=%s): %s",
            result.returncode,
            shorten(stderr.strip(), width=2000) if stderr.strip() else "(stderr 없음)",
        )
    elif stderr:
        logger.debug("명령 stderr: %s", shorten(stderr.strip(), width=2000))

    return RunResult(returncode=result.returncode, stdout=stdout, stderr=stderr)
