"""
core/config.py - 중앙 설정 관리

인벤토리 실행에 필요한 자격 증명 프로파일, 역할 ARN 템플릿,
워커 수, 호출 타임아웃을 하나의 설정 객체로 관리합니다.

값은 CLI 옵션에서 오며, 각 옵션은 환경 변수로 대체할 수 있습니다.

Usage:
    from core.config import InventoryConfig

    config = InventoryConfig(profile="org-admin", role_name="InventoryReadOnly")
    config.role_arn("123456789012")
    # "arn:aws:iam::123456789012:role/InventoryReadOnly"

    # 환경 변수에서 생성
    config = InventoryConfig.from_env()
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from core.exceptions import ConfigError

# 환경 변수 이름
ENV_PROFILE = "AWS_PROFILE"
ENV_ASSUME_PROFILE = "INVENTORY_ASSUME_PROFILE"
ENV_ORG_REGION = "AWS_REGION"
ENV_ROLE_NAME = "INVENTORY_ROLE_NAME"
ENV_ROLE_ARN_TEMPLATE = "INVENTORY_ROLE_ARN_TEMPLATE"

DEFAULT_ORG_REGION = "ap-southeast-1"
DEFAULT_ROLE_ARN_TEMPLATE = "arn:aws:iam::{account_id}:role/{role_name}"
DEFAULT_SESSION_NAME = "EC2ECSInventorySession"

DEFAULT_ACCOUNT_WORKERS = 4
DEFAULT_REGION_WORKERS = 8
MAX_WORKERS = 100


@dataclass
class InventoryConfig:
    """인벤토리 실행 설정

    Attributes:
        profile: Organizations 조회용 기본 자격 증명 프로파일 (필수)
        assume_profile: AssumeRole 호출용 프로파일 (None이면 profile 사용)
        org_region: Organizations/STS 호출 리전
        role_name: 멤버 계정의 역할 이름
        role_arn_template: 역할 ARN 템플릿 ({account_id}, {role_name} 치환)
        session_name: AssumeRole 세션 이름
        account_workers: 동시에 스캔할 계정 수 (1이면 순차)
        region_workers: 계정 내 동시에 스캔할 리전 수 (1이면 순차)
        connect_timeout: API 연결 타임아웃 (초)
        read_timeout: API 읽기 타임아웃 (초)
        max_attempts: botocore 최대 시도 횟수
    """

    profile: str
    assume_profile: str | None = None
    org_region: str = DEFAULT_ORG_REGION
    role_name: str | None = None
    role_arn_template: str = DEFAULT_ROLE_ARN_TEMPLATE
    session_name: str = DEFAULT_SESSION_NAME
    account_workers: int = DEFAULT_ACCOUNT_WORKERS
    region_workers: int = DEFAULT_REGION_WORKERS
    connect_timeout: int = 10
    read_timeout: int = 30
    max_attempts: int = 5

    def __post_init__(self) -> None:
        if not self.profile:
            raise ConfigError(ENV_PROFILE, "조직 조회용 프로파일이 설정되지 않았습니다")

        if not self.org_region:
            self.org_region = DEFAULT_ORG_REGION

        if "{account_id}" not in self.role_arn_template:
            raise ConfigError("role_arn_template", "템플릿에 {account_id} 자리표시자가 필요합니다")
        if "{role_name}" in self.role_arn_template and not self.role_name:
            raise ConfigError(ENV_ROLE_NAME, "역할 이름(role_name)이 설정되지 않았습니다")

        for name in ("account_workers", "region_workers"):
            value = getattr(self, name)
            if value < 1:
                raise ConfigError(name, f"1 이상이어야 합니다 (현재: {value})")
            if value > MAX_WORKERS:
                setattr(self, name, MAX_WORKERS)

        for name in ("connect_timeout", "read_timeout", "max_attempts"):
            if getattr(self, name) < 1:
                raise ConfigError(name, f"1 이상이어야 합니다 (현재: {getattr(self, name)})")

    @property
    def effective_assume_profile(self) -> str:
        """AssumeRole에 사용할 프로파일"""
        return self.assume_profile or self.profile

    def role_arn(self, account_id: str) -> str:
        """계정 ID로 역할 ARN 생성"""
        return self.role_arn_template.format(account_id=account_id, role_name=self.role_name or "")

    def client_options(self) -> dict[str, Any]:
        """core.parallel.get_client()에 전달할 타임아웃/재시도 옵션"""
        return {
            "connect_timeout": self.connect_timeout,
            "read_timeout": self.read_timeout,
            "max_attempts": self.max_attempts,
            "max_pool_connections": max(25, self.region_workers * 2),
        }

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> InventoryConfig:
        """환경 변수에서 설정 생성

        Args:
            environ: 환경 변수 맵 (None이면 os.environ)
            **overrides: 환경 변수보다 우선하는 값

        Raises:
            ConfigError: 필수 값 누락 또는 잘못된 값
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            "profile": env.get(ENV_PROFILE, ""),
            "assume_profile": env.get(ENV_ASSUME_PROFILE) or None,
            "org_region": env.get(ENV_ORG_REGION) or DEFAULT_ORG_REGION,
            "role_name": env.get(ENV_ROLE_NAME) or None,
            "role_arn_template": env.get(ENV_ROLE_ARN_TEMPLATE) or DEFAULT_ROLE_ARN_TEMPLATE,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
