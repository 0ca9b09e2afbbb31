"""
cluster_deploy
--------------

Deployment Manager 레코드에서 GKE 클러스터를 찾아
템플릿 기반 Kubernetes 매니페스트를 클러스터마다 적용하는 CLI 패키지.
서비스 계정 키로 인증하고, gcloud / kubectl 을 순서대로 호출한다.
"""

__all__ = [
    "config",
    "runner",
]
