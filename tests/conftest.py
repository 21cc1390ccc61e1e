"""
tests/conftest.py - pytest 공통 픽스처

AWS API 모킹과 테스트 헬퍼를 제공합니다.

Usage:
    def test_something(moto_aws, mock_sts_client):
        # moto_aws: moto를 사용한 AWS 모킹
        # mock_sts_client: MagicMock STS 클라이언트
        pass
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import moto
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


# 테스트 중 실제 프로파일/설정이 섞이지 않도록 제거할 환경 변수
_ISOLATED_ENV = (
    "AWS_PROFILE",
    "AWS_REGION",
    "INVENTORY_ASSUME_PROFILE",
    "INVENTORY_ROLE_NAME",
    "INVENTORY_ROLE_ARN_TEMPLATE",
)


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """테스트 환경 설정"""
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-southeast-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")

    yield

    # 서비스별 rate limiter는 모듈 전역이므로 테스트 간 초기화
    from core.parallel import reset_rate_limiters

    reset_rate_limiters()


# =============================================================================
# AWS 모킹 픽스처
# =============================================================================


@pytest.fixture
def mock_sts_client():
    """STS 클라이언트 모킹"""
    mock_client = MagicMock()

    mock_client.get_caller_identity.return_value = {
        "UserId": "AIDATEST123",
        "Account": "111111111111",
        "Arn": "arn:aws:iam::111111111111:user/org-admin",
    }

    mock_client.assume_role.return_value = {
        "Credentials": {
            "AccessKeyId": "ASIATEST123",
            "SecretAccessKey": "test-secret",
            "SessionToken": "test-token",
            "Expiration": "2024-12-31T23:59:59Z",
        }
    }

    yield mock_client


def make_paginator(pages: List[Dict[str, Any]]) -> MagicMock:
    """paginate()가 주어진 페이지들을 반환하는 페이지네이터"""
    paginator = MagicMock()
    paginator.paginate.return_value = pages
    return paginator


def make_session(clients: Dict[str, Any], region_name: Optional[str] = "ap-southeast-1") -> MagicMock:
    """session.client(service, ...)가 서비스별 모킹 클라이언트를 반환하는 세션"""
    session = MagicMock()
    session.region_name = region_name
    session.profile_name = "test-profile"
    session.client.side_effect = lambda service_name, **kwargs: clients[service_name]
    return session


# =============================================================================
# 유틸리티 함수
# =============================================================================


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
    operation_name: str = "TestOperation",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            }
        },
        operation_name,
    )


# =============================================================================
# moto 통합
# =============================================================================


@pytest.fixture
def aws_credentials(monkeypatch):
    """moto 사용 시 AWS 자격 증명 설정"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-southeast-1")


@pytest.fixture
def moto_aws(aws_credentials):
    """moto를 사용한 AWS 모킹 (STS, Organizations, EC2)"""
    with moto.mock_aws():
        yield


@pytest.fixture
def moto_session(moto_aws):
    """moto 환경의 boto3 Session"""
    import boto3

    return boto3.Session(region_name="ap-southeast-1")


@pytest.fixture
def moto_organization(moto_session):
    """moto Organization (관리 계정 + 멤버 계정 2개)

    Returns:
        (session, [member_account_id, ...])
    """
    org = moto_session.client("organizations", region_name="ap-southeast-1")
    org.create_organization(FeatureSet="ALL")

    member_ids = []
    for name in ("workload-a", "workload-b"):
        resp = org.create_account(AccountName=name, Email=f"{name}@example.com")
        member_ids.append(resp["CreateAccountStatus"]["AccountId"])

    return moto_session, member_ids
