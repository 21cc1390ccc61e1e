"""
core/parallel/retry.py - 호출 실패 분류와 작업 재시도 정책

botocore 자체 재시도(adaptive)가 끝난 뒤에도 남은 실패를
ErrorCategory로 분류하여, 실행기가 작업 단위로 다시 시도할지 결정합니다.

    - THROTTLING / TIMEOUT / NETWORK / SERVICE_ERROR: 재시도
    - ACCESS_DENIED / NOT_FOUND / EXPIRED_TOKEN / UNKNOWN: 즉시 실패 (커버리지 공백)
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from botocore.exceptions import ConnectionError as BotoConnectionError
from botocore.exceptions import ConnectTimeoutError, ReadTimeoutError

from core.exceptions import is_access_denied, is_not_found, is_throttling

from .types import RETRYABLE_CATEGORIES, ErrorCategory


@dataclass
class RetryConfig:
    """작업 단위 재시도 정책 (지수 백오프 + full jitter)

    max_retries=0이면 첫 실패를 그대로 결과로 남깁니다.
    """

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True

    def get_delay(self, attempt: int) -> float:
        """attempt번째(0부터) 실패 후 대기할 시간 (초)"""
        ceiling = min(self.max_delay, self.base_delay * self.exponential_base**attempt)
        return random.uniform(0, ceiling) if self.jitter else ceiling


_EXPIRED_TOKEN_CODES = frozenset({"ExpiredToken", "ExpiredTokenException"})
_SERVICE_ERROR_CODES = frozenset(
    {"ServiceUnavailable", "ServiceUnavailableException", "InternalError", "InternalServiceError"}
)

# ConnectTimeoutError는 botocore ConnectionError의 하위 클래스이므로 타임아웃을 먼저 검사
_TIMEOUT_ERRORS = (ConnectTimeoutError, ReadTimeoutError, TimeoutError)
_NETWORK_ERRORS = (BotoConnectionError, ConnectionError, OSError)


def _response_code(error: Exception) -> str | None:
    response = getattr(error, "response", None)
    if not isinstance(response, dict):
        return None
    return (response.get("Error") or {}).get("Code", "")


def get_error_code(error: Exception) -> str:
    """AWS 에러 코드, 응답이 없는 예외는 클래스명"""
    code = _response_code(error)
    if code is None:
        return error.__class__.__name__
    return code or "Unknown"


def categorize_error(error: Exception) -> ErrorCategory:
    """예외를 ErrorCategory로 분류"""
    if is_throttling(error):
        return ErrorCategory.THROTTLING
    if is_access_denied(error):
        return ErrorCategory.ACCESS_DENIED
    if is_not_found(error):
        return ErrorCategory.NOT_FOUND

    code = _response_code(error)
    if code:
        if code in _EXPIRED_TOKEN_CODES:
            return ErrorCategory.EXPIRED_TOKEN
        if code in _SERVICE_ERROR_CODES:
            return ErrorCategory.SERVICE_ERROR
        if "Timeout" in code:
            return ErrorCategory.TIMEOUT
        return ErrorCategory.UNKNOWN

    if isinstance(error, _TIMEOUT_ERRORS):
        return ErrorCategory.TIMEOUT
    if isinstance(error, _NETWORK_ERRORS):
        return ErrorCategory.NETWORK
    return ErrorCategory.UNKNOWN


def is_retryable(error: Exception) -> bool:
    return categorize_error(error) in RETRYABLE_CATEGORIES
