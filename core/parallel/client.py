"""
core/parallel/client.py - boto3 client 생성

모든 client에 adaptive 재시도와 연결/읽기 타임아웃을 겁니다.
응답 없는 리전이나 계정은 스캔 전체를 붙잡지 않고 호출 실패로 끝납니다.

Example:
    ec2 = get_client(session, "ec2", region_name="ap-southeast-1")
    ec2 = get_client(session, "ec2", region_name="us-east-1", **config.client_options())
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, cast

from botocore.config import Config

if TYPE_CHECKING:
    import boto3

RetryMode = Literal["legacy", "standard", "adaptive"]

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_RETRY_MODE: RetryMode = "adaptive"
DEFAULT_CONNECT_TIMEOUT = 10  # 초
DEFAULT_READ_TIMEOUT = 30  # 초
DEFAULT_MAX_POOL_CONNECTIONS = 25  # region_workers 이상


def client_config(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    retry_mode: RetryMode = DEFAULT_RETRY_MODE,
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: int = DEFAULT_READ_TIMEOUT,
    max_pool_connections: int = DEFAULT_MAX_POOL_CONNECTIONS,
) -> Config:
    """옵션 조합별 botocore Config

    botocore가 client 생성 중 retries 항목을 고쳐 쓰므로 호출마다 새로 만듭니다.
    """
    return Config(
        retries={"max_attempts": max_attempts, "mode": retry_mode},  # pyright: ignore[reportArgumentType]
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        max_pool_connections=max_pool_connections,
    )


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    config: Config | None = None,
    **options: Any,
) -> Any:
    """재시도/타임아웃이 적용된 boto3 client

    Args:
        session: boto3 Session (계정 자격 증명 한정)
        service_name: ec2, ecs, sts, organizations
        region_name: 리전 (None이면 세션 기본값)
        config: 추가로 병합할 botocore Config
        **options: client_config() 인자 (max_attempts, read_timeout 등)
    """
    merged = client_config(**options)
    if config is not None:
        merged = merged.merge(config)

    return session.client(  # pyright: ignore[reportCallIssue]
        cast(Any, service_name),
        region_name=region_name,
        config=merged,
    )
