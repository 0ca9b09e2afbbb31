from __future__ import annotations

from typing import Optional

from .config import DeploymentConfig
from .logging_utils import get_logger
from .result import ErrorKind, StepResult
from .subprocess_utils import run_command


logger = get_logger(__name__)


def apply_manifest(
    cfg: DeploymentConfig,
    path: str,
    *,
    source: Optional[str] = None,
    dry_run: bool = False,
) -> StepResult[None]:
    """
    kubectl apply 를 네임스페이스 범위로 실행한다.

    source 는 렌더링 전 원본 템플릿 경로로, 실패 메시지에 사용한다.
    (렌더링 결과는 임시 파일이라 경로만으로는 원인 파악이 어렵다)
    """
    cmd = [
        "kubectl",
        "apply",
        f"--namespace={cfg.namespace}",
        "-f",
        path,
    ]
    if dry_run:
        cmd.append("--dry-run=client")

    if not run_command(cmd).ok:
        return StepResult.fail(
            ErrorKind.COMMAND,
            f"매니페스트 적용에 실패했습니다: {source or path}",
        )
    return StepResult.success()
