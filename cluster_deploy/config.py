from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

from .result import ErrorKind, Failure


ENV_FILES_DEFAULT_ORDER = [".env", ".env.deploy"]

# 환경변수 이름
ENV_REVISION = "DEPLOY_REVISION"
ENV_KEY_FILE = "GOOGLE_APPLICATION_CREDENTIALS"
ENV_ENVIRONMENT = "DEPLOY_ENV"
ENV_TEMPLATE_FOLDER = "TEMPLATE_FOLDER"

# TEMPLATE_FOLDER 가 없을 때 kubernetes/<DEPLOY_ENV> 를 사용한다.
DEFAULT_TEMPLATE_ROOT = "kubernetes"

MANIFEST_SUFFIX = ".yaml"
TEMPLATE_SUFFIX = ".yaml.j2"


def load_env_files(base_dir: str = ".",
                   files: Optional[List[str]] = None) -> None:
    """
    주어진 디렉토리에서 .env 계열 파일을 순서대로 로드한다.
    후순위 파일이 같은 키를 덮어쓴다.
    """
    order = files or ENV_FILES_DEFAULT_ORDER
    for name in order:
        path = os.path.join(base_dir, name)
        if os.path.exists(path):
            load_dotenv(path, override=True)


def is_manifest(name: str) -> bool:
    return name.endswith(MANIFEST_SUFFIX)


def is_template(name: str) -> bool:
    return name.endswith(TEMPLATE_SUFFIX)


def list_manifest_files(template_dir: str) -> List[str]:
    """
    템플릿 디렉토리에서 적용 대상 파일(.yaml / .yaml.j2) 이름을 정렬된 순서로 리턴한다.
    """
    names = sorted(os.listdir(template_dir))
    return [
        n
        for n in names
        if (is_manifest(n) or is_template(n))
        and os.path.isfile(os.path.join(template_dir, n))
    ]


def resolve_template_dir(environment: Optional[str],
                         template_folder: Optional[str]) -> Optional[str]:
    if template_folder:
        return template_folder
    if environment:
        return os.path.join(DEFAULT_TEMPLATE_ROOT, environment)
    return None


@dataclass(frozen=True)
class DeploymentConfig:
    namespace: str
    deployment_name: str
    project_id: str
    revision: str
    key_file: str
    template_dir: str

    @classmethod
    def from_inputs(
        cls,
        namespace: Optional[str],
        deployment_name: Optional[str],
        project_id: Optional[str],
        revision: Optional[str],
        key_file: Optional[str],
        environment: Optional[str] = None,
        template_folder: Optional[str] = None,
    ) -> "DeploymentConfig":
        """
        필수값이 하나라도 비어 있으면 외부 명령 호출 전에 ValueError 를 던진다.
        """
        missing: List[str] = []

        def req(name: str, val: Optional[str]) -> str:
            if not val:
                missing.append(name)
            return val or ""

        template_dir = resolve_template_dir(environment, template_folder)

        cfg = cls(
            namespace=req("namespace", namespace),
            deployment_name=req("deployment_name", deployment_name),
            project_id=req("project_id", project_id),
            revision=req(ENV_REVISION, revision),
            key_file=req(ENV_KEY_FILE, key_file),
            # 템플릿 경로는 TEMPLATE_FOLDER 또는 DEPLOY_ENV 중 하나가 필요
            template_dir=req(f"{ENV_TEMPLATE_FOLDER} 또는 {ENV_ENVIRONMENT}", template_dir),
        )

        if missing:
            raise ValueError(
                "필수 설정값이 누락되었습니다: " + ", ".join(missing)
            )

        return cfg

    @classmethod
    def from_env(
        cls,
        namespace: Optional[str],
        deployment_name: Optional[str],
        project_id: Optional[str],
    ) -> "DeploymentConfig":
        return cls.from_inputs(
            namespace=namespace,
            deployment_name=deployment_name,
            project_id=project_id,
            revision=os.getenv(ENV_REVISION),
            key_file=os.getenv(ENV_KEY_FILE),
            environment=os.getenv(ENV_ENVIRONMENT),
            template_folder=os.getenv(ENV_TEMPLATE_FOLDER),
        )

    def validate(self) -> Optional[Failure]:
        """
        키 파일/템플릿 디렉토리 존재 여부와 매니페스트 파일 유무를 점검한다.
        인증 등 외부 호출 전에 실행해야 한다.
        """
        if not os.path.isfile(self.key_file):
            return Failure(
                ErrorKind.PRECONDITION,
                f"서비스 계정 키 파일이 없습니다: {self.key_file}",
            )
        if not os.path.isdir(self.template_dir):
            return Failure(
                ErrorKind.PRECONDITION,
                f"템플릿 디렉토리가 없습니다: {self.template_dir}",
            )
        if not list_manifest_files(self.template_dir):
            return Failure(
                ErrorKind.PRECONDITION,
                f"템플릿 디렉토리에 *{MANIFEST_SUFFIX} / *{TEMPLATE_SUFFIX} 파일이 없습니다: "
                f"{self.template_dir}",
            )
        return None
