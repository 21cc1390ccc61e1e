"""
core/parallel/errors.py - 에러 수집 및 관리

병렬 스캔 중 발생하는 호출 단위 실패를 일관되게 수집합니다.
수집된 에러는 곧 "커버리지 공백"이며, 합계가 감사 가능하도록
계정/리전/작업/사유와 함께 기록됩니다.

주요 구성 요소:
- ErrorSeverity: 에러 심각도 분류
- CollectedError: 수집된 에러 상세 정보
- ErrorCollector: 스레드 세이프 에러 수집기
- try_or_default: 실패 시 기본값 반환 헬퍼

Example:
    collector = ErrorCollector("inventory")

    try:
        result = client.describe_instances()
    except ClientError as e:
        collector.collect(e, account_id, account_name, region, "ec2", "describe_instances")

    if collector.has_errors:
        print(collector.get_summary())
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from .retry import categorize_error, get_error_code
from .types import ErrorCategory, TaskError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorSeverity(Enum):
    """에러 심각도 분류"""

    CRITICAL = "critical"  # 핵심 기능 실패 - 반드시 보고
    WARNING = "warning"  # 부분 실패 - 보고하되 계속 진행
    INFO = "info"  # 정보성
    DEBUG = "debug"  # 디버그 - 개발 시에만 필요


@dataclass
class CollectedError:
    """수집된 에러 상세 정보

    Attributes:
        timestamp: 에러 발생 시각
        account_id: AWS 계정 ID
        account_name: AWS 계정 이름
        region: AWS 리전
        service: AWS 서비스 이름 (예: "ec2", "ecs")
        operation: API 작업 이름 (예: "describe_instances")
        error_code: AWS 에러 코드 (예: "AccessDenied")
        error_message: 에러 메시지
        severity: 에러 심각도
        category: 에러 카테고리 (ErrorCategory)
        resource_id: 관련 리소스 ID (예: 클러스터 ARN)
    """

    timestamp: datetime
    account_id: str
    account_name: str
    region: str
    service: str
    operation: str
    error_code: str
    error_message: str
    severity: ErrorSeverity
    category: ErrorCategory
    resource_id: str | None = None

    def __str__(self) -> str:
        loc = f"{self.account_id}/{self.region}"
        return f"[{self.severity.value.upper()}] {loc} - {self.service}.{self.operation}: {self.error_code}"

    def to_dict(self) -> dict[str, str | None]:
        """딕셔너리로 변환 (로깅/직렬화용)"""
        return {
            "timestamp": self.timestamp.isoformat(),
            "account_id": self.account_id,
            "account_name": self.account_name,
            "region": self.region,
            "service": self.service,
            "operation": self.operation,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "severity": self.severity.value,
            "category": self.category.value,
            "resource_id": self.resource_id,
        }


class ErrorCollector:
    """스레드 세이프 에러 수집기

    여러 워커 스레드에서 발생하는 호출 실패를 안전하게 수집하고
    계정별/심각도별 요약을 제공합니다.
    """

    def __init__(self, scope: str = "inventory"):
        """초기화

        Args:
            scope: 수집기 이름 (로그 구분용)
        """
        self.scope = scope
        self._errors: list[CollectedError] = []
        self._lock = threading.Lock()

    def collect(
        self,
        error: Exception,
        account_id: str,
        account_name: str,
        region: str,
        service: str,
        operation: str,
        severity: ErrorSeverity = ErrorSeverity.WARNING,
        resource_id: str | None = None,
    ) -> CollectedError:
        """예외를 수집하고 로깅

        ClientError는 응답의 에러 코드/메시지를,
        그 외(타임아웃, 연결 실패 등)는 예외 클래스명과 메시지를 사용합니다.

        Args:
            error: 발생한 예외
            account_id: AWS 계정 ID
            account_name: 계정 이름
            region: AWS 리전
            service: AWS 서비스 이름
            operation: API 작업 이름
            severity: 에러 심각도 (기본: WARNING)
            resource_id: 관련 리소스 ID (선택사항)

        Returns:
            수집된 CollectedError
        """
        if isinstance(error, ClientError):
            error_info = error.response.get("Error", {})
            error_message = error_info.get("Message", str(error))
        else:
            error_message = str(error)

        collected = CollectedError(
            timestamp=datetime.now(),
            account_id=account_id,
            account_name=account_name,
            region=region,
            service=service,
            operation=operation,
            error_code=get_error_code(error),
            error_message=error_message,
            severity=severity,
            category=categorize_error(error),
            resource_id=resource_id,
        )

        return self._record(collected)

    def collect_task_error(
        self,
        task_error: TaskError,
        account_name: str,
        service: str,
        operation: str,
        severity: ErrorSeverity = ErrorSeverity.WARNING,
    ) -> CollectedError:
        """병렬 실행기의 실패 결과(TaskError)를 수집

        작업 함수 자체가 실패한 경우 (예: Rate limiter 대기 시간 초과)에 사용합니다.
        """
        collected = CollectedError(
            timestamp=task_error.timestamp,
            account_id=task_error.identifier,
            account_name=account_name,
            region=task_error.region,
            service=service,
            operation=operation,
            error_code=task_error.error_code,
            error_message=task_error.message,
            severity=severity,
            category=task_error.category,
        )
        return self._record(collected)

    def _record(self, collected: CollectedError) -> CollectedError:
        with self._lock:
            self._errors.append(collected)

        log_msg = f"[{self.scope}] {collected} - {collected.error_message} (스킵하고 계속 진행)"
        if collected.severity == ErrorSeverity.CRITICAL:
            logger.error(log_msg)
        elif collected.severity == ErrorSeverity.WARNING:
            logger.warning(log_msg)
        elif collected.severity == ErrorSeverity.INFO:
            logger.info(log_msg)
        else:
            logger.debug(log_msg)

        return collected

    @property
    def errors(self) -> list[CollectedError]:
        """수집된 모든 에러의 복사본 반환"""
        with self._lock:
            return list(self._errors)

    @property
    def has_errors(self) -> bool:
        with self._lock:
            return len(self._errors) > 0

    def get_summary(self) -> str:
        """심각도별 에러 건수를 포함한 요약 문자열 반환

        Returns:
            포맷팅된 요약 문자열 (예: "에러 3건 (critical: 1건, warning: 2건)")
        """
        with self._lock:
            if not self._errors:
                return "에러 없음"

            by_severity: dict[str, int] = {}
            for e in self._errors:
                by_severity[e.severity.value] = by_severity.get(e.severity.value, 0) + 1

            parts = [f"{k}: {v}건" for k, v in sorted(by_severity.items())]
            return f"에러 {len(self._errors)}건 ({', '.join(parts)})"


def try_or_default(
    func: Callable[[], T],
    default: T,
    collector: ErrorCollector | None = None,
    account_id: str = "",
    account_name: str = "",
    region: str = "",
    service: str = "",
    operation: str = "",
    severity: ErrorSeverity = ErrorSeverity.WARNING,
    resource_id: str | None = None,
) -> T:
    """함수 실행, 실패 시 기본값 반환 + 에러 수집

    개별 API 호출이 실패해도 전체 스캔을 중단하지 않고
    기본값("이 호출의 데이터 없음")으로 대체합니다.

    Example:
        arns = try_or_default(
            lambda: _list_cluster_arns(ecs),
            default=[],
            collector=errors,
            account_id=account_id,
            region=region,
            service="ecs",
            operation="list_clusters",
        )
    """
    try:
        return func()
    except (ClientError, BotoCoreError) as e:
        if collector:
            collector.collect(e, account_id, account_name, region, service, operation, severity, resource_id)
        else:
            logger.warning(f"[{account_id}/{region}] {service}.{operation}: {get_error_code(e)} - {e}")
        return default
