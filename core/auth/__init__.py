# core/auth/__init__.py
"""
AWS 인증 모듈 (core/auth)

- 기본 자격 증명(프로파일) 세션 생성 및 검증
- Organizations 활성 계정 조회
- 계정별 AssumeRole 임시 자격 증명 (계정 스캔 종료 시 폐기)

사용 예시:
    from core.auth import get_base_session, list_active_accounts, RoleCredentialProvider

    org_session = get_base_session("org-admin", "ap-southeast-1")
    accounts = list_active_accounts(org_session)

    provider = RoleCredentialProvider(org_session, config.role_arn)
    with provider.credential_scope(accounts[0].id) as creds:
        session = creds.create_session()

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
    실제 사용 시점에만 하위 모듈이 로드되어 CLI 시작 시간을 최적화합니다.
"""

__all__ = [
    # Types
    "AccountInfo",
    "AccountStatus",
    "Credentials",
    # Provider
    "RoleCredentialProvider",
    "get_base_session",
    "verify_identity",
    # Organizations
    "list_accounts",
    "list_active_accounts",
]

_IMPORT_MAPPING = {
    "AccountInfo": (".types", "AccountInfo"),
    "AccountStatus": (".types", "AccountStatus"),
    "Credentials": (".types", "Credentials"),
    "RoleCredentialProvider": (".provider", "RoleCredentialProvider"),
    "get_base_session": (".provider", "get_base_session"),
    "verify_identity": (".provider", "verify_identity"),
    "list_accounts": (".organizations", "list_accounts"),
    "list_active_accounts": (".organizations", "list_active_accounts"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
