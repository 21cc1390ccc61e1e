"""
core/parallel - 병렬 처리 모듈

멀티 계정/리전 스캔을 제한된 워커 풀에서 안전하게 처리합니다.

주요 구성 요소:
- ParallelExecutor: Map-Reduce 패턴 병렬 실행기
- parallel_run: 간편한 병렬 실행 함수
- TokenBucketRateLimiter: API 쓰로틀링 방지 (backpressure)
- ErrorCollector: 호출 단위 실패(커버리지 공백) 수집

Example:
    from core.parallel import TaskSpec, parallel_run

    def scan(task):
        return collect_region(session, task.identifier, task.region, errors)

    result = parallel_run(scan, [TaskSpec("123456789012", r) for r in regions], max_workers=8)
    print(f"성공: {result.success_count}, 실패: {result.error_count}")
"""

from .client import get_client
from .retry import RetryConfig
from .errors import (
    CollectedError,
    ErrorCollector,
    ErrorSeverity,
    try_or_default,
)
from .executor import ParallelConfig, ParallelExecutor, TaskSpec, parallel_run
from .rate_limiter import (
    RateLimiterConfig,
    TokenBucketRateLimiter,
    get_rate_limiter,
    reset_rate_limiters,
)
from .types import ErrorCategory, ParallelExecutionResult, TaskError, TaskResult

__all__: list[str] = [
    # Executor
    "ParallelExecutor",
    "ParallelConfig",
    "TaskSpec",
    "parallel_run",
    # Client (retry 적용)
    "get_client",
    # Decorators
    "RetryConfig",
    # Error handling
    "ErrorCollector",
    "ErrorSeverity",
    "CollectedError",
    "try_or_default",
    # Rate Limiter
    "TokenBucketRateLimiter",
    "RateLimiterConfig",
    "get_rate_limiter",
    "reset_rate_limiters",
    # Types
    "ErrorCategory",
    "TaskError",
    "TaskResult",
    "ParallelExecutionResult",
]
