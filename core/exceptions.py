"""
core/exceptions.py - 통합 예외 계층 구조

인벤토리 실행 전체에서 사용되는 예외 클래스들을 정의합니다.
치명적인 설정 오류와 계정/호출 단위로 복구 가능한 오류를 구분합니다.

예외 계층 구조:
    InventoryError (베이스)
    ├── ConfigError (설정 관련, 치명적)
    │   ├── OrganizationAccessError (Organizations 조회 실패)
    │   └── EmptyOrganizationError (활성 계정 없음)
    └── RoleAssumptionError (역할 전환 실패, 계정 스킵)

개별 API 호출 실패는 예외로 올리지 않고
core.parallel.ErrorCollector에 커버리지 공백으로 기록합니다.

Usage:
    from core.exceptions import ConfigError, format_error_for_user

    try:
        identity = sts.get_caller_identity()
    except ClientError as e:
        raise ConfigError("credentials", format_error_for_user(e), e) from e
"""

from typing import Any, Dict, Optional

# =============================================================================
# 베이스 예외
# =============================================================================


class InventoryError(Exception):
    """vCPU 인벤토리 기본 예외 클래스

    모든 커스텀 예외의 베이스 클래스입니다.

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


# =============================================================================
# 설정 관련 예외 (치명적 - 계정 처리 전에 종료)
# =============================================================================


class ConfigError(InventoryError):
    """설정 관련 예외

    필수 자격 증명 누락, 잘못된 옵션 값 등 실행 자체가 불가능한 상황입니다.
    """

    def __init__(
        self,
        key: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"설정 오류 [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


class OrganizationAccessError(ConfigError):
    """Organizations 계정 목록 조회 실패"""

    def __init__(self, profile: Optional[str], cause: Optional[Exception] = None):
        super().__init__(
            "organizations",
            f"계정 목록을 조회할 수 없습니다 (profile={profile or 'default'})",
            cause,
        )
        self.profile = profile


class EmptyOrganizationError(ConfigError):
    """조직에 활성 계정이 하나도 없는 경우

    데이터 상황이 아니라 권한/설정 문제로 간주합니다.
    """

    def __init__(self, total_accounts: int = 0):
        super().__init__(
            "organizations",
            f"조직에 활성(ACTIVE) 계정이 없습니다 (전체 {total_accounts}개)",
        )
        self.total_accounts = total_accounts
        self.details["total_accounts"] = total_accounts


# =============================================================================
# 계정 단위 예외 (복구 가능 - 계정 스킵)
# =============================================================================


class RoleAssumptionError(InventoryError):
    """대상 계정의 역할 전환(AssumeRole) 실패

    호출자는 해당 계정을 접근 불가로 처리하고 다음 계정으로 진행해야 합니다.
    """

    def __init__(
        self,
        account_id: str,
        role_arn: str,
        reason: str,
        cause: Optional[Exception] = None,
    ):
        message = f"역할 전환 실패 [{account_id}] {role_arn}: {reason}"
        super().__init__(message, cause)
        self.account_id = account_id
        self.role_arn = role_arn
        self.reason = reason
        self.details.update({"account_id": account_id, "role_arn": role_arn})


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================

ACCESS_DENIED_CODES = {
    "AccessDenied",
    "AccessDeniedException",
    "UnauthorizedAccess",
    "UnauthorizedOperation",
    "AWSOrganizationsNotInUseException",
}

THROTTLING_CODES = {
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
    "TooManyRequestsException",
    "RateExceeded",
}

NOT_FOUND_CODES = {
    "ResourceNotFoundException",
    "NotFoundException",
    "NoSuchEntity",
    "ClusterNotFoundException",
}


def _aws_error(error: Exception) -> Dict[str, Any]:
    """ClientError 응답의 Error 항목 (응답이 없으면 빈 dict)

    botocore 타임아웃/연결 예외는 response 속성이 None입니다.
    """
    response = getattr(error, "response", None)
    if not isinstance(response, dict):
        return {}
    return response.get("Error") or {}


def _error_code(error: Exception) -> str:
    return _aws_error(error).get("Code", "")


def is_access_denied(error: Exception) -> bool:
    """액세스 거부 오류인지 확인"""
    return _error_code(error) in ACCESS_DENIED_CODES


def is_throttling(error: Exception) -> bool:
    """스로틀링 오류인지 확인"""
    return _error_code(error) in THROTTLING_CODES


def is_not_found(error: Exception) -> bool:
    """리소스를 찾을 수 없는 오류인지 확인"""
    return _error_code(error) in NOT_FOUND_CODES


def format_error_for_user(error: Exception) -> str:
    """사용자에게 표시할 에러 메시지 포맷팅

    Args:
        error: 예외

    Returns:
        사용자 친화적인 에러 메시지
    """
    if isinstance(error, InventoryError):
        return str(error)

    error_info = _aws_error(error)
    if error_info:
        code = error_info.get("Code", "UnknownError")
        message = error_info.get("Message", str(error))

        friendly_messages = {
            "AccessDenied": "권한이 없습니다. IAM 정책을 확인하세요.",
            "ExpiredToken": "인증 토큰이 만료되었습니다. 다시 로그인하세요.",
            "InvalidClientTokenId": "잘못된 자격 증명입니다.",
            "Throttling": "요청이 너무 많습니다. 잠시 후 다시 시도하세요.",
        }

        return friendly_messages.get(code, f"{code}: {message}")

    return str(error)
