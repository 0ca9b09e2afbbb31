import os
import sys
from dataclasses import replace

import click

from .config import (
    DeploymentConfig,
    ENV_ENVIRONMENT,
    ENV_KEY_FILE,
    ENV_REVISION,
    ENV_TEMPLATE_FOLDER,
    list_manifest_files,
    load_env_files,
)
from .logging_utils import setup_logging, get_logger
from .runner import DeploymentRunner


logger = get_logger(__name__)


def _fatal(message: str) -> None:
    # 치명적 오류는 stdout 에 강조 출력 후 exit 1
    click.secho(f"[ERROR] {message}", fg="red", bold=True)
    sys.exit(1)


@click.group()
@click.option(
    "-C",
    "--chdir",
    "chdir",
    type=click.Path(file_okay=False, dir_okay=True, exists=True),
    default=".",
    help="작업 디렉토리 (기본: 현재 디렉토리). .env / .env.deploy 를 여기서 읽습니다.",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="로그 레벨을 DEBUG로 올립니다.",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="WARNING 이상의 로그만 출력합니다. (명령 stdout 과 요약은 그대로 출력)",
)
@click.pass_context
def main(ctx: click.Context, chdir: str, verbose: int, quiet: bool) -> None:
    """Deployment Manager 로 관리되는 GKE 클러스터에 Kubernetes 매니페스트를 배포하는 CLI"""
    setup_logging(verbose, quiet=quiet)
    ctx.ensure_object(dict)
    ctx.obj["chdir"] = chdir
    ctx.obj["verbose"] = verbose


def _load_config_from_ctx(
    ctx: click.Context, namespace: str, deployment: str, project: str
) -> DeploymentConfig:
    base_dir: str = ctx.obj["chdir"]
    load_env_files(base_dir)
    cfg = DeploymentConfig.from_env(namespace, deployment, project)

    # 상대 경로는 --chdir 기준으로 해석한다. (절대 경로는 join 후에도 그대로)
    cfg = replace(
        cfg,
        key_file=os.path.join(base_dir, cfg.key_file),
        template_dir=os.path.join(base_dir, cfg.template_dir),
    )
    logger.debug("Config loaded: %s", cfg)
    return cfg


@main.command(name="deploy")
@click.argument("namespace")
@click.argument("deployment")
@click.argument("project")
@click.option(
    "--dry-run",
    "dry_run",
    is_flag=True,
    help="kubectl apply 를 --dry-run=client 로 실행합니다. (인증/credential 조회는 실제로 수행)",
)
@click.pass_context
def deploy(ctx: click.Context, namespace: str, deployment: str, project: str, dry_run: bool) -> None:
    """deployment 의 모든 클러스터에 템플릿 디렉토리의 매니페스트를 적용"""
    try:
        cfg = _load_config_from_ctx(ctx, namespace, deployment, project)
    except ValueError as e:
        _fatal(f"설정 로드 실패: {e}")
        return

    runner = DeploymentRunner(cfg, dry_run=dry_run)
    result = runner.run()

    if not result.ok:
        _fatal(f"배포 실패: {result.failure}")
        return

    click.echo(result.value.format(cfg))


@main.command()
@click.argument("namespace")
@click.argument("deployment")
@click.argument("project")
@click.pass_context
def plan(ctx: click.Context, namespace: str, deployment: str, project: str) -> None:
    """설정과 적용 대상 매니페스트 목록을 출력 (외부 명령은 호출하지 않음)"""
    try:
        cfg = _load_config_from_ctx(ctx, namespace, deployment, project)
    except ValueError as e:
        _fatal(f"설정 로드 실패: {e}")
        return

    failure = cfg.validate()
    if failure is not None:
        _fatal(str(failure))
        return

    lines: list[str] = []
    lines.append("# Deploy plan")
    lines.append(f"- project: {cfg.project_id}")
    lines.append(f"- deployment: {cfg.deployment_name}")
    lines.append(f"- namespace: {cfg.namespace}")
    lines.append("")

    lines.append("## Config summary")
    lines.append(f"- {ENV_REVISION}: {cfg.revision}")
    lines.append(f"- {ENV_KEY_FILE}: {cfg.key_file}")
    lines.append(f"- {ENV_ENVIRONMENT}: {os.getenv(ENV_ENVIRONMENT) or '(not set)'}")
    lines.append(f"- {ENV_TEMPLATE_FOLDER}: {os.getenv(ENV_TEMPLATE_FOLDER) or '(not set)'}")
    lines.append(f"- template_dir: {cfg.template_dir}")
    lines.append("")

    lines.append("## Manifests")
    for name in list_manifest_files(cfg.template_dir):
        lines.append(f"- {name}")

    click.echo("\n".join(lines))
