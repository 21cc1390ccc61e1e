"""
core/parallel/executor.py - 병렬 작업 실행기

Map-Reduce 패턴으로 계정/리전 단위 작업을 제한된 워커 풀에서 처리합니다.
ThreadPoolExecutor 기반이며, Rate limiting과 지수 백오프 재시도를 지원합니다.

두 가지 경계에서 사용됩니다:
- 계정 단위: 워커마다 독립된 자격 증명과 계정 Tally를 가짐
- 리전 단위: 하나의 계정 세션을 읽기 전용으로 공유

주요 구성 요소:
- ParallelConfig: 병렬 실행 설정 (워커 수, 재시도, Rate limit)
- TaskSpec: 개별 작업 명세 (계정 ID + 리전)
- ParallelExecutor: 제한된 워커 풀 실행기
- parallel_run: 간편한 병렬 실행 래퍼 함수

Example:
    from core.parallel import TaskSpec, parallel_run

    def collect(task):
        return collect_region(session, task.identifier, task.region, errors)

    tasks = [TaskSpec(identifier=account_id, region=r) for r in regions]
    result = parallel_run(collect, tasks, max_workers=8, service="ec2")
    for scan in result.get_data():
        tally.add_region(scan)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, TypeVar

from .retry import RetryConfig, categorize_error, get_error_code, is_retryable
from .rate_limiter import RateLimiterConfig, TokenBucketRateLimiter, get_rate_limiter
from .types import ErrorCategory, ParallelExecutionResult, TaskError, TaskResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _clear_exception_chain(e: BaseException) -> None:
    """traceback + chained exception 메모리 누수 방지"""
    e.__traceback__ = None
    if e.__context__ is not None:
        e.__context__.__traceback__ = None
    if e.__cause__ is not None:
        e.__cause__.__traceback__ = None


@dataclass
class ParallelConfig:
    """병렬 실행 설정

    Attributes:
        max_workers: 최대 동시 스레드 수 (1~100, 1이면 순차 실행)
        retry_config: 재시도 설정
        rate_limiter_config: Rate limiter 설정 (None이면 서비스별 기본값)
    """

    max_workers: int = 20
    retry_config: RetryConfig | None = None
    rate_limiter_config: RateLimiterConfig | None = None

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.max_workers > 100:
            self.max_workers = 100


@dataclass
class TaskSpec:
    """작업 명세

    Attributes:
        identifier: AWS 계정 ID
        region: 대상 리전 (계정 단위 작업이면 조직 API 리전)
        payload: 작업 함수에 전달할 부가 데이터 (예: AccountInfo)
    """

    identifier: str
    region: str
    payload: Any = field(default=None, compare=False)


class ParallelExecutor:
    """제한된 워커 풀 실행기

    특징:
    - ThreadPoolExecutor 기반 병렬 처리 (워커 수로 동시 실행 제한)
    - Rate limiting으로 쓰로틀링 방지
    - 재시도 가능한 에러만 지수 백오프 재시도
    - 작업 실패는 예외 대신 TaskResult로 수집
    """

    def __init__(self, config: ParallelConfig | None = None):
        self.config = config or ParallelConfig()
        self._retry_config = self.config.retry_config or RetryConfig()

    def execute(
        self,
        func: Callable[[TaskSpec], T],
        tasks: Sequence[TaskSpec],
        service: str = "default",
    ) -> ParallelExecutionResult[T]:
        """작업 함수를 모든 작업 명세에 병렬 실행

        Args:
            func: TaskSpec -> T 함수
            tasks: 실행할 작업 목록
            service: AWS 서비스 이름 (rate limit용, 로깅용)

        Returns:
            ParallelExecutionResult[T]: 전체 실행 결과
        """
        if not tasks:
            logger.debug(f"실행할 작업이 없습니다 (service={service})")
            return ParallelExecutionResult()

        logger.debug(f"병렬 실행 시작: {len(tasks)}개 작업, max_workers={self.config.max_workers}, service={service}")

        if self.config.rate_limiter_config is not None:
            rate_limiter = TokenBucketRateLimiter(self.config.rate_limiter_config)
        else:
            rate_limiter = get_rate_limiter(service)

        results: list[TaskResult[T]] = []
        start_time = time.monotonic()

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = {executor.submit(self._execute_single, func, task, rate_limiter): task for task in tasks}

            for future in as_completed(futures):
                task = futures[future]
                try:
                    results.append(future.result())
                except Exception as e:
                    logger.error(f"작업 실행 중 예외 [{task.identifier}/{task.region}]: {e}")
                    _clear_exception_chain(e)
                    results.append(
                        TaskResult(
                            identifier=task.identifier,
                            region=task.region,
                            success=False,
                            error=TaskError(
                                identifier=task.identifier,
                                region=task.region,
                                category=ErrorCategory.UNKNOWN,
                                error_code="ExecutorError",
                                message=str(e),
                                original_exception=e,
                            ),
                        )
                    )

        total_time = (time.monotonic() - start_time) * 1000
        exec_result = ParallelExecutionResult(results=tuple(results))

        logger.debug(
            f"병렬 실행 완료 ({service}): 성공 {exec_result.success_count}, "
            f"실패 {exec_result.error_count}, 총 {total_time:.0f}ms"
        )

        return exec_result

    def _execute_single(
        self,
        func: Callable[[TaskSpec], T],
        task: TaskSpec,
        rate_limiter: TokenBucketRateLimiter | None = None,
    ) -> TaskResult[T]:
        """단일 작업 실행 (워커 스레드 내에서 호출)"""
        start_time = time.monotonic()

        if rate_limiter and not rate_limiter.acquire():
            return TaskResult(
                identifier=task.identifier,
                region=task.region,
                success=False,
                error=TaskError(
                    identifier=task.identifier,
                    region=task.region,
                    category=ErrorCategory.THROTTLING,
                    error_code="RateLimitTimeout",
                    message="Rate limiter timeout",
                ),
                duration_ms=(time.monotonic() - start_time) * 1000,
            )

        return self._execute_with_retry(func, task, start_time)

    def _execute_with_retry(
        self,
        func: Callable[[TaskSpec], T],
        task: TaskSpec,
        start_time: float,
    ) -> TaskResult[T]:
        """지수 백오프 재시도 로직을 포함한 작업 실행

        재시도 가능한 에러(throttling, network 등) 발생 시 RetryConfig에 따라
        재시도하고, 재시도 불가능한 에러는 즉시 실패 결과로 반환합니다.
        """
        for attempt in range(self._retry_config.max_retries + 1):
            try:
                data = func(task)
                return TaskResult(
                    identifier=task.identifier,
                    region=task.region,
                    success=True,
                    data=data,
                    duration_ms=(time.monotonic() - start_time) * 1000,
                )

            except Exception as e:
                if not is_retryable(e) or attempt >= self._retry_config.max_retries:
                    _clear_exception_chain(e)
                    return TaskResult(
                        identifier=task.identifier,
                        region=task.region,
                        success=False,
                        error=TaskError(
                            identifier=task.identifier,
                            region=task.region,
                            category=categorize_error(e),
                            error_code=get_error_code(e),
                            message=str(e),
                            retries=attempt,
                            original_exception=e,
                        ),
                        duration_ms=(time.monotonic() - start_time) * 1000,
                    )

                delay = self._retry_config.get_delay(attempt)
                logger.debug(f"[{task.identifier}/{task.region}] 시도 {attempt + 1} 실패, {delay:.2f}초 후 재시도...")
                time.sleep(delay)

        # max_retries >= 0 이므로 도달하지 않음
        raise RuntimeError("retry loop exited without result")


def parallel_run(
    func: Callable[[TaskSpec], T],
    tasks: Sequence[TaskSpec],
    max_workers: int = 20,
    service: str = "default",
    retry_config: RetryConfig | None = None,
) -> ParallelExecutionResult[T]:
    """병렬 실행 편의 함수

    Args:
        func: TaskSpec -> T
        tasks: 작업 목록
        max_workers: 최대 동시 스레드 수
        service: AWS 서비스 이름
        retry_config: 재시도 설정 (None이면 기본값)

    Returns:
        ParallelExecutionResult[T]
    """
    config = ParallelConfig(max_workers=max_workers, retry_config=retry_config)
    return ParallelExecutor(config).execute(func, tasks, service)
