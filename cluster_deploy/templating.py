"""
templating
----------

*.yaml.j2 템플릿을 Jinja2 로 렌더링한다.

템플릿에서 사용할 수 있는 변수는 두 개뿐이다.
- revision: 배포 리비전 (DEPLOY_REVISION)
- run_id: 리비전 앞 8자리 + 랜덤 8자리 hex. 실행마다 새로 만들며 저장하지 않는다.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from tempfile import NamedTemporaryFile
from types import MappingProxyType
from typing import Callable, Iterator, Mapping

from jinja2 import Environment, StrictUndefined

from .logging_utils import get_logger


logger = get_logger(__name__)


VAR_REVISION = "revision"
VAR_RUN_ID = "run_id"

RENDER_PREFIX = "cluster-deploy-"
RENDER_SUFFIX = ".yaml"


def make_run_id(revision: str, entropy: Callable[[int], bytes] = os.urandom) -> str:
    return revision[:8] + entropy(4).hex()


def template_variables(revision: str, run_id: str) -> Mapping[str, str]:
    return MappingProxyType({VAR_REVISION: revision, VAR_RUN_ID: run_id})


def render_template(path: str, variables: Mapping[str, str]) -> str:
    with open(path, "r", encoding="utf-8") as f:
        source = f.read()
    env = Environment(undefined=StrictUndefined, keep_trailing_newline=True)
    return env.from_string(source).render(**variables)


@contextmanager
def rendered_manifest(path: str, variables: Mapping[str, str]) -> Iterator[str]:
    """
    템플릿을 렌더링한 임시 파일 경로를 넘겨주고,
    블록이 끝나면(성공/실패 무관) 임시 파일을 삭제한다.

    렌더링 자체가 실패하면 jinja2.TemplateError 가 그대로 전파된다.
    """
    content = render_template(path, variables)
    with NamedTemporaryFile(
        "w",
        prefix=RENDER_PREFIX,
        suffix=RENDER_SUFFIX,
        delete=False,
        encoding="utf-8",
    ) as tmp:
        tmp.write(content)
        rendered_path = tmp.name

    logger.debug("템플릿 렌더링: %s -> %s", path, rendered_path)
    try:
        yield rendered_path
    finally:
        try:
            os.remove(rendered_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            # 적용 결과와 무관하게 정리는 best-effort
            logger.warning("렌더링 임시 파일 삭제 실패: %s (%s)", rendered_path, e)
