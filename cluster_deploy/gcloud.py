"""
gcloud
------

서비스 계정 인증, 프로젝트 설정, 클러스터 credential 조회,
Deployment Manager 레코드 조회를 담당하는 gcloud 래퍼 모듈.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from .config import DeploymentConfig
from .discovery import ClusterTarget
from .logging_utils import get_logger
from .result import ErrorKind, StepResult
from .subprocess_utils import run_command


logger = get_logger(__name__)


def activate_service_account(cfg: DeploymentConfig) -> StepResult[None]:
    logger.info("서비스 계정 활성화: %s", cfg.key_file)
    cmd = [
        "gcloud",
        "auth",
        "activate-service-account",
        f"--key-file={cfg.key_file}",
    ]
    if not run_command(cmd).ok:
        return StepResult.fail(
            ErrorKind.COMMAND,
            f"서비스 계정 활성화에 실패했습니다 (key-file={cfg.key_file})",
        )
    return StepResult.success()


def set_project(cfg: DeploymentConfig) -> StepResult[None]:
    logger.info("프로젝트 설정: %s", cfg.project_id)
    cmd = ["gcloud", "config", "set", "project", cfg.project_id]
    if not run_command(cmd).ok:
        return StepResult.fail(
            ErrorKind.COMMAND,
            f"프로젝트 설정에 실패했습니다: {cfg.project_id}",
        )
    return StepResult.success()


def authenticate(cfg: DeploymentConfig) -> StepResult[None]:
    """
    서비스 계정 활성화 → 프로젝트 설정 순서로 실행한다.
    앞 단계가 실패하면 뒤 단계는 호출하지 않는다.
    """
    activated = activate_service_account(cfg)
    if not activated.ok:
        return activated
    return set_project(cfg)


def describe_deployment(cfg: DeploymentConfig) -> StepResult[Dict[str, Any]]:
    """
    Deployment Manager 레코드를 JSON 으로 조회한다.
    """
    logger.info("deployment 조회: %s", cfg.deployment_name)
    cmd = [
        "gcloud",
        "deployment-manager",
        "deployments",
        "describe",
        cfg.deployment_name,
        f"--project={cfg.project_id}",
        "--format=json",
    ]
    result = run_command(cmd)
    if not result.ok:
        return StepResult.fail(
            ErrorKind.COMMAND,
            f"deployment 조회에 실패했습니다: {cfg.deployment_name} (exit={result.returncode})",
        )

    try:
        record = json.loads(result.stdout)
    except ValueError as e:
        return StepResult.fail(
            ErrorKind.RESPONSE,
            f"deployment 응답을 JSON 으로 해석할 수 없습니다: {e}",
        )

    if not isinstance(record, dict):
        return StepResult.fail(
            ErrorKind.RESPONSE,
            "deployment 응답이 JSON 객체가 아닙니다.",
        )
    return StepResult.success(record)


def get_cluster_credentials(cfg: DeploymentConfig, target: ClusterTarget) -> StepResult[None]:
    """
    kubectl 컨텍스트를 대상 클러스터로 전환한다.
    """
    logger.info("클러스터 credential 조회: %s (zone=%s)", target.name, target.zone)
    cmd = [
        "gcloud",
        "container",
        "clusters",
        "get-credentials",
        target.name,
        f"--zone={target.zone}",
        f"--project={cfg.project_id}",
    ]
    if not run_command(cmd).ok:
        return StepResult.fail(
            ErrorKind.COMMAND,
            f"클러스터 credential 조회에 실패했습니다: {target.name} (zone={target.zone})",
        )
    return StepResult.success()
