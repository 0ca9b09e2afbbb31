"""
discovery
---------

Deployment Manager 레코드의 resources 목록에서 GKE 클러스터 리소스를 골라
(이름, zone) 쌍으로 변환한다.

레코드는 실행마다 새로 조회하며, 로컬 캐시는 두지 않는다.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

import yaml

from .logging_utils import get_logger
from .result import ErrorKind, StepResult


logger = get_logger(__name__)


CLUSTER_RESOURCE_TYPES = frozenset(
    {
        "container.v1.cluster",
        "gcp-types/container-v1:projects.zones.clusters",
    }
)


@dataclass(frozen=True)
class ClusterTarget:
    name: str
    zone: str


def _decode_properties(resource: Mapping[str, Any]) -> Dict[str, Any] | None:
    # properties 는 YAML(또는 JSON) 문자열로 직렬화되어 내려온다.
    raw = resource.get("properties") or resource.get("finalProperties")
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return dict(raw)
    if not isinstance(raw, str):
        return None
    try:
        decoded = yaml.safe_load(raw)
    except yaml.YAMLError:
        return None
    return decoded if isinstance(decoded, dict) else None


def extract_clusters(record: Mapping[str, Any]) -> StepResult[List[ClusterTarget]]:
    """
    resources 목록 순서를 그대로 유지한다. (정렬/중복 제거 없음)
    클러스터 리소스가 하나도 없으면 빈 리스트를 리턴한다.
    """
    resources = record.get("resources") or []
    if not isinstance(resources, list):
        return StepResult.fail(ErrorKind.RESPONSE, "deployment 응답의 resources 가 목록이 아닙니다.")

    targets: List[ClusterTarget] = []
    for resource in resources:
        if not isinstance(resource, Mapping):
            continue
        if resource.get("type") not in CLUSTER_RESOURCE_TYPES:
            continue

        name = resource.get("name")
        props = _decode_properties(resource)
        if not name or props is None:
            return StepResult.fail(
                ErrorKind.RESPONSE,
                f"클러스터 리소스의 properties 를 해석할 수 없습니다: {name or '(이름 없음)'}",
            )

        zone = props.get("zone") or props.get("location")
        if not zone:
            return StepResult.fail(
                ErrorKind.RESPONSE,
                f"클러스터 리소스에 zone 정보가 없습니다: {name}",
            )

        targets.append(ClusterTarget(name=str(name), zone=str(zone)))

    logger.info("대상 클러스터 %d개: %s", len(targets), [t.name for t in targets])
    return StepResult.success(targets)
