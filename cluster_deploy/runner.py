"""
runner
------

인증 → 클러스터 탐색 → 클러스터별 매니페스트 적용을 순서대로 실행한다.

어느 단계든 실패하면 그 즉시 중단한다. (남은 템플릿/클러스터는 시도하지 않고,
이미 적용된 클러스터는 롤백하지 않는다)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping

from jinja2 import TemplateError

from .config import DeploymentConfig, is_template, list_manifest_files
from .discovery import ClusterTarget, extract_clusters
from .logging_utils import get_logger
from .result import ErrorKind, StepResult
from . import gcloud, kubectl, templating


logger = get_logger(__name__)


@dataclass
class DeploySummary:
    run_id: str
    clusters: List[ClusterTarget] = field(default_factory=list)
    # 클러스터 이름 -> 적용된 원본 파일 이름
    applied: Dict[str, List[str]] = field(default_factory=dict)

    def format(self, cfg: DeploymentConfig) -> str:
        lines: List[str] = []
        lines.append("# Deploy summary")
        lines.append(f"- project: {cfg.project_id}")
        lines.append(f"- deployment: {cfg.deployment_name}")
        lines.append(f"- namespace: {cfg.namespace}")
        lines.append(f"- revision: {cfg.revision}")
        lines.append(f"- run_id: {self.run_id}")
        lines.append("")

        lines.append("## Clusters")
        if not self.clusters:
            lines.append("- (none)")
        for target in self.clusters:
            files = self.applied.get(target.name, [])
            lines.append(f"- {target.name} ({target.zone}): {len(files)} file(s)")
            for name in files:
                lines.append(f"  - {name}")

        return "\n".join(lines)


class DeploymentRunner:
    def __init__(
        self,
        cfg: DeploymentConfig,
        *,
        entropy: Callable[[int], bytes] = os.urandom,
        dry_run: bool = False,
    ) -> None:
        self.cfg = cfg
        self.dry_run = dry_run
        self.run_id = templating.make_run_id(cfg.revision, entropy)
        self.variables = templating.template_variables(cfg.revision, self.run_id)

    def run(self) -> StepResult[DeploySummary]:
        cfg = self.cfg

        failure = cfg.validate()
        if failure is not None:
            return StepResult(failure=failure)

        auth = gcloud.authenticate(cfg)
        if not auth.ok:
            return StepResult(failure=auth.failure)

        described = gcloud.describe_deployment(cfg)
        if not described.ok:
            return StepResult(failure=described.failure)

        discovered = extract_clusters(described.value or {})
        if not discovered.ok:
            return StepResult(failure=discovered.failure)

        summary = DeploySummary(run_id=self.run_id)
        for target in discovered.value or []:
            creds = gcloud.get_cluster_credentials(cfg, target)
            if not creds.ok:
                return StepResult(failure=creds.failure)

            applied = self.apply_templates()
            if not applied.ok:
                return StepResult(failure=applied.failure)

            summary.clusters.append(target)
            summary.applied[target.name] = applied.value or []

        return StepResult.success(summary)

    def apply_templates(self) -> StepResult[List[str]]:
        """
        현재 kubectl 컨텍스트(클러스터)에 템플릿 디렉토리의 파일을 모두 적용한다.

        Returns:
            적용한 파일 이름 목록 (디렉토리 정렬 순서)
        """
        template_dir = self.cfg.template_dir
        applied: List[str] = []

        # validate 이후 디렉토리 내용이 바뀌었을 수 있으므로 다시 확인한다.
        try:
            names = list_manifest_files(template_dir)
        except OSError as e:
            return StepResult.fail(
                ErrorKind.PRECONDITION,
                f"템플릿 디렉토리를 읽을 수 없습니다: {template_dir} ({e})",
            )

        for name in names:
            path = os.path.join(template_dir, name)
            if is_template(name):
                result = self._apply_rendered(path, self.variables)
            else:
                result = kubectl.apply_manifest(self.cfg, path, dry_run=self.dry_run)

            if not result.ok:
                return StepResult(failure=result.failure)
            applied.append(name)

        if not applied:
            return StepResult.fail(
                ErrorKind.PRECONDITION,
                f"적용할 매니페스트 파일을 찾지 못했습니다: {template_dir}",
            )

        logger.info("매니페스트 %d개 적용 완료", len(applied))
        return StepResult.success(applied)

    def _apply_rendered(self, path: str, variables: Mapping[str, str]) -> StepResult[None]:
        try:
            with templating.rendered_manifest(path, variables) as rendered:
                return kubectl.apply_manifest(
                    self.cfg,
                    rendered,
                    source=path,
                    dry_run=self.dry_run,
                )
        except TemplateError as e:
            return StepResult.fail(
                ErrorKind.RENDER,
                f"템플릿 렌더링에 실패했습니다: {path} ({e})",
            )
        except OSError as e:
            return StepResult.fail(
                ErrorKind.RENDER,
                f"템플릿 파일을 읽거나 쓸 수 없습니다: {path} ({e})",
            )
