"""
core/parallel/rate_limiter.py - Token Bucket 기반 Rate Limiter

병렬 워커가 AWS API를 동시에 호출할 때 쓰로틀링을 피하기 위한
서비스별 토큰 버킷입니다. 작업 시작 전에 토큰을 획득하며,
토큰이 없으면 대기합니다 (backpressure). 대기 한도는 wait_timeout에서
시작해 함께 기다리는 스레드 수만큼 늘어납니다.

Example:
    limiter = get_rate_limiter("ecs")
    if limiter.acquire():
        ecs.list_clusters()
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class RateLimiterConfig:
    """Rate limiter 설정

    Attributes:
        requests_per_second: 초당 토큰 충전량
        burst_size: 버킷 최대 크기 (순간 허용량)
        wait_timeout: acquire() 기본 대기 한도 (초, 앞선 대기 스레드 몫은 별도)
    """

    requests_per_second: float = 10.0
    burst_size: int = 20
    wait_timeout: float = 30.0


# 서비스별 기본 설정 (계정/리전 단위 작업 시작 기준)
SERVICE_RATE_LIMITS: dict[str, RateLimiterConfig] = {
    "default": RateLimiterConfig(),
    "ec2": RateLimiterConfig(requests_per_second=20.0, burst_size=40),
    "ecs": RateLimiterConfig(requests_per_second=20.0, burst_size=40),
    "sts": RateLimiterConfig(requests_per_second=5.0, burst_size=10),
    "organizations": RateLimiterConfig(requests_per_second=1.0, burst_size=2),
}


class TokenBucketRateLimiter:
    """스레드 세이프 토큰 버킷"""

    def __init__(self, config: RateLimiterConfig | None = None):
        self.config = config or RateLimiterConfig()
        self._tokens = float(self.config.burst_size)
        self._last_refill = time.monotonic()
        self._lock = threading.Lock()
        self._waiters = 0

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self._last_refill
        self._tokens = min(
            float(self.config.burst_size),
            self._tokens + elapsed * self.config.requests_per_second,
        )
        self._last_refill = now

    @property
    def available_tokens(self) -> float:
        with self._lock:
            self._refill()
            return self._tokens

    def try_acquire(self, tokens: int = 1) -> bool:
        """대기 없이 토큰 획득 시도"""
        with self._lock:
            self._refill()
            if self._tokens >= tokens:
                self._tokens -= tokens
                return True
            return False

    def acquire(self, tokens: int = 1) -> bool:
        """토큰 획득 (필요 시 대기)

        대기 한도는 wait_timeout에 앞서 기다리는 스레드들의 몫
        (다른 대기 스레드 수 x tokens / requests_per_second)을 더한 값입니다.
        계정 x 리전 워커가 한 버킷을 나눠 쓰므로 워커 수가 늘면 한도도 함께 늘어납니다.

        Returns:
            대기 한도 안에 획득하면 True, 아니면 False
        """
        start = time.monotonic()
        ahead = 0
        waiting = False

        try:
            while True:
                with self._lock:
                    self._refill()
                    if self._tokens >= tokens:
                        self._tokens -= tokens
                        return True
                    if not waiting:
                        waiting = True
                        self._waiters += 1
                    ahead = max(ahead, self._waiters - 1)
                    missing = tokens - self._tokens
                    rate = self.config.requests_per_second

                if rate <= 0:
                    logger.debug("rate limiter 충전 속도가 0입니다")
                    return False

                budget = self.config.wait_timeout + ahead * tokens / rate
                remaining = start + budget - time.monotonic()
                if remaining <= 0:
                    logger.debug(f"rate limiter 대기 시간 초과 ({budget:.1f}초, 앞선 대기 {ahead}개)")
                    return False
                time.sleep(min(missing / rate, remaining))
        finally:
            if waiting:
                with self._lock:
                    self._waiters -= 1


_limiters: dict[str, TokenBucketRateLimiter] = {}
_limiters_lock = threading.Lock()


def get_rate_limiter(service: str) -> TokenBucketRateLimiter:
    """서비스별 rate limiter 싱글톤 조회"""
    with _limiters_lock:
        if service not in _limiters:
            config = SERVICE_RATE_LIMITS.get(service, SERVICE_RATE_LIMITS["default"])
            _limiters[service] = TokenBucketRateLimiter(config)
        return _limiters[service]


def reset_rate_limiters() -> None:
    """모든 rate limiter 초기화"""
    with _limiters_lock:
        _limiters.clear()
