# core/auth/types.py
"""
core/auth/types.py - 인증 모듈의 핵심 타입 정의

포함 항목:
    - AccountStatus: Organizations 계정 상태
    - AccountInfo: AWS 계정 정보 데이터 클래스
    - Credentials: 계정 단위 임시 자격 증명 (스캔 종료 시 반드시 폐기)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)


class AccountStatus(Enum):
    """Organizations 계정 상태"""

    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    PENDING_CLOSURE = "PENDING_CLOSURE"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AccountInfo:
    """AWS 계정 정보를 나타내는 데이터 클래스

    Attributes:
        id: AWS 계정 ID (12자리)
        name: 계정 이름 (별칭)
        status: 계정 상태
        email: 계정 이메일 (옵션)
    """

    id: str
    name: str = ""
    status: AccountStatus = AccountStatus.ACTIVE
    email: str | None = None

    def __post_init__(self):
        """계정 ID가 12자리 숫자가 아니면 경고, 이름이 없으면 "account-{id}" """
        if not self.id or len(self.id) != 12 or not self.id.isdigit():
            logger.warning("유효하지 않은 AWS 계정 ID: '%s' (12자리 숫자여야 함)", self.id)
        if not self.name:
            object.__setattr__(self, "name", f"account-{self.id}")

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    @classmethod
    def from_organizations(cls, data: dict[str, Any]) -> AccountInfo:
        """organizations:ListAccounts 응답 항목에서 생성

        알 수 없는 상태값은 SUSPENDED로 간주하여 스캔 대상에서 제외됩니다.
        """
        try:
            status = AccountStatus(data.get("Status", ""))
        except ValueError:
            status = AccountStatus.SUSPENDED
        return cls(
            id=data["Id"],
            name=data.get("Name", ""),
            status=status,
            email=data.get("Email"),
        )


@dataclass
class Credentials:
    """AssumeRole로 얻은 임시 자격 증명

    하나의 계정 스캔에만 속하며, 다음 계정 처리 전에 clear()로 폐기됩니다.
    repr에는 비밀 값이 노출되지 않습니다.
    """

    account_id: str
    access_key_id: str = field(repr=False)
    secret_access_key: str = field(repr=False)
    session_token: str = field(repr=False)
    expiration: datetime | None = None
    _cleared: bool = field(default=False, repr=False)

    @classmethod
    def from_sts(cls, account_id: str, data: dict[str, Any]) -> Credentials:
        """sts:AssumeRole 응답의 Credentials 항목에서 생성"""
        return cls(
            account_id=account_id,
            access_key_id=data["AccessKeyId"],
            secret_access_key=data["SecretAccessKey"],
            session_token=data["SessionToken"],
            expiration=data.get("Expiration"),
        )

    @property
    def is_cleared(self) -> bool:
        return self._cleared

    def create_session(self, region: str | None = None) -> boto3.Session:
        """이 자격 증명에 한정된 boto3 Session 생성

        프로세스 환경 변수를 건드리지 않으므로 다른 계정과 섞이지 않습니다.
        """
        if self._cleared:
            raise RuntimeError(f"이미 폐기된 자격 증명입니다 [{self.account_id}]")

        import boto3

        return boto3.Session(
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            aws_session_token=self.session_token,
            region_name=region,
        )

    def clear(self) -> None:
        """비밀 값을 덮어써서 폐기"""
        self.access_key_id = ""
        self.secret_access_key = ""
        self.session_token = ""
        self.expiration = None
        self._cleared = True
