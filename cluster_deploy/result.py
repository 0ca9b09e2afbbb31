"""
result
------

배포 단계별 성공/실패를 예외 대신 값으로 전달하기 위한 타입.

각 단계는 StepResult 를 리턴하고, 최상위(runner/cli)에서
Failure 를 메시지 출력 + exit 1 로 변환한다.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar


T = TypeVar("T")


class ErrorKind(str, Enum):
    # 키 파일/템플릿 디렉토리 누락 등 실행 전 조건 위반
    PRECONDITION = "precondition"
    # 외부 명령(gcloud/kubectl) 이 0 이 아닌 exit 로 종료
    COMMAND = "command"
    # deployment 레코드 응답을 해석할 수 없음
    RESPONSE = "response"
    # 템플릿 렌더링 실패
    RENDER = "render"


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


@dataclass(frozen=True)
class StepResult(Generic[T]):
    value: Optional[T] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "StepResult[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "StepResult[T]":
        return cls(failure=Failure(kind=kind, message=message))
