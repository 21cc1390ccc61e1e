# core/auth/provider.py
"""
core/auth/provider.py - 기본 자격 증명과 계정 간 역할 전환

기본 자격 증명(프로파일)으로 세션을 만들고, 이를 사용해
각 멤버 계정의 역할을 AssumeRole 하여 계정 한정 임시 자격 증명을 얻습니다.

자격 증명은 credential_scope() 컨텍스트 안에서만 유효하며,
스캔이 중간에 실패하더라도 컨텍스트를 벗어날 때 폐기됩니다.

Usage:
    base = get_base_session("org-admin", "ap-southeast-1")
    verify_identity(base)

    provider = RoleCredentialProvider(base, config.role_arn)
    try:
        with provider.credential_scope("123456789012") as creds:
            session = creds.create_session()
            ...
    except RoleAssumptionError as e:
        logger.warning(e)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError, ProfileNotFound

from core.config import DEFAULT_SESSION_NAME
from core.exceptions import ConfigError, RoleAssumptionError, format_error_for_user
from core.parallel import get_client
from core.parallel.retry import get_error_code

from .types import Credentials

logger = logging.getLogger(__name__)


def get_base_session(profile: str | None, region: str | None = None) -> boto3.Session:
    """프로파일 기반 boto3 Session 생성

    Raises:
        ConfigError: 프로파일이 존재하지 않는 경우
    """
    try:
        return boto3.Session(profile_name=profile, region_name=region)
    except ProfileNotFound as e:
        raise ConfigError("profile", f"프로파일을 찾을 수 없습니다: {profile}", e) from e


def verify_identity(session: boto3.Session, **client_options: Any) -> dict[str, str]:
    """기본 자격 증명이 유효한지 sts:GetCallerIdentity로 확인

    Returns:
        {"Account": ..., "Arn": ..., "UserId": ...}

    Raises:
        ConfigError: 자격 증명이 없거나 유효하지 않은 경우
    """
    try:
        sts = get_client(session, "sts", region_name=session.region_name, **client_options)
        identity = sts.get_caller_identity()
    except NoCredentialsError as e:
        raise ConfigError("credentials", "기본 자격 증명을 찾을 수 없습니다", e) from e
    except (ClientError, BotoCoreError) as e:
        raise ConfigError("credentials", format_error_for_user(e), e) from e

    logger.info(f"기본 자격 증명 확인: {identity.get('Arn')}")
    return {k: identity.get(k, "") for k in ("Account", "Arn", "UserId")}


class RoleCredentialProvider:
    """계정별 역할 전환 Provider

    Attributes:
        session: AssumeRole 호출에 사용할 기본 세션
        role_arn_for: 계정 ID -> 역할 ARN 함수
        session_name: AssumeRole 세션 이름
        duration_seconds: 임시 자격 증명 유효 시간
    """

    def __init__(
        self,
        session: boto3.Session,
        role_arn_for: Callable[[str], str],
        session_name: str = DEFAULT_SESSION_NAME,
        duration_seconds: int = 3600,
        client_options: dict[str, Any] | None = None,
    ):
        self.session = session
        self.role_arn_for = role_arn_for
        self.session_name = session_name
        self.duration_seconds = duration_seconds
        self._client_options = client_options or {}

    def assume(self, account_id: str) -> Credentials:
        """대상 계정 역할로 전환하여 임시 자격 증명 반환

        Raises:
            RoleAssumptionError: 역할이 없거나 권한이 없는 등 전환 실패 시
        """
        role_arn = self.role_arn_for(account_id)
        logger.info(f"Attempting to assume role: {role_arn}")

        try:
            sts = get_client(self.session, "sts", region_name=self.session.region_name, **self._client_options)
            response = sts.assume_role(
                RoleArn=role_arn,
                RoleSessionName=self.session_name,
                DurationSeconds=self.duration_seconds,
            )
        except (ClientError, BotoCoreError) as e:
            raise RoleAssumptionError(account_id, role_arn, get_error_code(e), e) from e

        return Credentials.from_sts(account_id, response["Credentials"])

    @contextmanager
    def credential_scope(self, account_id: str) -> Iterator[Credentials]:
        """계정 한정 자격 증명 컨텍스트

        컨텍스트를 벗어나면 (예외 포함) 자격 증명을 무조건 폐기합니다.
        """
        credentials = self.assume(account_id)
        try:
            yield credentials
        finally:
            credentials.clear()
            logger.debug(f"[{account_id}] 임시 자격 증명 폐기")
