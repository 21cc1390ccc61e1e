# core/auth/organizations.py
"""
core/auth/organizations.py - 조직 계정 목록 조회

관리 계정 자격 증명으로 organizations:ListAccounts를 페이지 단위로 조회하고
ACTIVE 상태의 계정만 반환합니다.

활성 계정이 하나도 없거나 목록 조회 자체가 실패하면
설정/권한 문제로 보고 실행을 중단합니다.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import EmptyOrganizationError, OrganizationAccessError
from core.parallel import get_client

from .types import AccountInfo

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)


def list_accounts(session: boto3.Session, region: str | None = None, **client_options: Any) -> list[AccountInfo]:
    """조직의 모든 계정 조회 (상태 무관)

    Raises:
        OrganizationAccessError: 조회 실패 시
    """
    accounts: list[AccountInfo] = []
    try:
        org = get_client(session, "organizations", region_name=region or session.region_name, **client_options)
        paginator = org.get_paginator("list_accounts")
        for page in paginator.paginate():
            for item in page.get("Accounts", []):
                accounts.append(AccountInfo.from_organizations(item))
    except (ClientError, BotoCoreError) as e:
        raise OrganizationAccessError(session.profile_name, e) from e

    return accounts


def list_active_accounts(
    session: boto3.Session,
    region: str | None = None,
    **client_options: Any,
) -> list[AccountInfo]:
    """ACTIVE 상태 계정만 조회

    Returns:
        AccountInfo 리스트 (조회 순서 유지)

    Raises:
        OrganizationAccessError: 조회 실패 시
        EmptyOrganizationError: 활성 계정이 없을 때
    """
    accounts = list_accounts(session, region, **client_options)
    active = [a for a in accounts if a.is_active]

    if not active:
        raise EmptyOrganizationError(total_accounts=len(accounts))

    skipped = len(accounts) - len(active)
    if skipped:
        logger.info(f"비활성 계정 {skipped}개 제외")
    logger.info(f"활성 계정 {len(active)}개 발견")
    return active
