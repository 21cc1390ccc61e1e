"""
core/parallel/types.py - 병렬 실행 결과 타입

병렬 작업의 개별 결과(TaskResult)와 전체 결과(ParallelExecutionResult)를
구조화하여 Map-Reduce 방식으로 수집할 수 있게 합니다.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorCategory(Enum):
    """에러 카테고리 분류"""

    THROTTLING = "throttling"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    NETWORK = "network"
    TIMEOUT = "timeout"
    EXPIRED_TOKEN = "expired_token"
    INVALID_REQUEST = "invalid_request"
    SERVICE_ERROR = "service_error"
    UNKNOWN = "unknown"


# 작업 단위 재시도 대상
RETRYABLE_CATEGORIES = frozenset(
    {
        ErrorCategory.THROTTLING,
        ErrorCategory.NETWORK,
        ErrorCategory.TIMEOUT,
        ErrorCategory.SERVICE_ERROR,
    }
)


@dataclass
class TaskError:
    """개별 작업 실패 정보

    Attributes:
        identifier: 계정 ID
        region: 리전
        category: 에러 카테고리
        error_code: AWS 에러 코드 또는 예외 클래스명
        message: 에러 메시지
        retries: 재시도 횟수
        original_exception: 원본 예외 (traceback 제거됨)
        timestamp: 발생 시각
    """

    identifier: str
    region: str
    category: ErrorCategory
    error_code: str
    message: str
    retries: int = 0
    original_exception: BaseException | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def is_retryable(self) -> bool:
        """재시도 가능한 카테고리인지"""
        return self.category in RETRYABLE_CATEGORIES

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            "region": self.region,
            "category": self.category.value,
            "error_code": self.error_code,
            "message": self.message,
            "retries": self.retries,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        return f"[{self.identifier}/{self.region}] {self.error_code}: {self.message}"


@dataclass
class TaskResult(Generic[T]):
    """개별 작업 결과"""

    identifier: str
    region: str
    success: bool
    data: T | None = None
    error: TaskError | None = None
    duration_ms: float = 0.0

    def __str__(self) -> str:
        status = "OK" if self.success else "FAIL"
        return f"[{self.identifier}/{self.region}] {status} ({self.duration_ms:.0f}ms)"


@dataclass
class ParallelExecutionResult(Generic[T]):
    """전체 병렬 실행 결과

    Example:
        result = executor.execute(func, tasks)
        for data in result.get_data():
            ...
        if result.error_count:
            logger.warning(result.get_error_summary())
    """

    results: Sequence[TaskResult[T]] = field(default_factory=tuple)

    @property
    def successful(self) -> list[TaskResult[T]]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[TaskResult[T]]:
        return [r for r in self.results if not r.success]

    @property
    def total_count(self) -> int:
        return len(self.results)

    @property
    def success_count(self) -> int:
        return len(self.successful)

    @property
    def error_count(self) -> int:
        return len(self.failed)

    def has_any_failure(self) -> bool:
        return self.error_count > 0

    def get_data(self) -> list[T]:
        """성공한 작업의 데이터 (None 제외)"""
        return [r.data for r in self.results if r.success and r.data is not None]

    def get_errors(self) -> list[TaskError]:
        return [r.error for r in self.results if r.error is not None]

    def get_errors_by_category(self) -> dict[ErrorCategory, list[TaskError]]:
        grouped: dict[ErrorCategory, list[TaskError]] = {}
        for error in self.get_errors():
            grouped.setdefault(error.category, []).append(error)
        return grouped

    def get_error_summary(self) -> str:
        """카테고리별 실패 요약 문자열"""
        errors = self.get_errors()
        if not errors:
            return "실패한 작업 없음"

        lines = [f"총 {len(errors)}개 작업 실패"]
        for category, items in self.get_errors_by_category().items():
            lines.append(f"  [{category.value}] {len(items)}건")
            for err in items:
                lines.append(f"    - {err.identifier}/{err.region}: {err.error_code}")
        return "\n".join(lines)
