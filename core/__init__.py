# core/__init__.py
"""
core - AWS Organization vCPU 인벤토리

조직의 모든 활성 계정과 리전을 돌며 실행 중인 EC2 인스턴스와
ECS Fargate 태스크를 수집하고, 계정별/조직 전체 vCPU를 집계합니다.

아키텍처:
    core/
    ├── auth/           # 기본 자격 증명, 계정 조회, 역할 전환
    ├── region/         # 계정별 리전 조회
    ├── inventory/      # 수집, 집계, 오케스트레이션, 리포트
    ├── parallel/       # 병렬 처리 (executor, rate limiter, error collector)
    ├── config.py       # 중앙 설정 관리
    └── exceptions.py   # 통합 예외 계층

Usage:
    from core.config import InventoryConfig
    from core.inventory import OrganizationScanner, render_report

    config = InventoryConfig(profile="org-admin", role_name="InventoryReadOnly")
    result = OrganizationScanner(config).scan()
    print(render_report(result))

    # 예외 처리
    from core.exceptions import ConfigError
    try:
        OrganizationScanner(config).scan()
    except ConfigError as e:
        print(e)
"""

__version__ = "1.0.0"

__all__: list[str] = [
    "__version__",
    # 서브패키지
    "auth",
    "inventory",
    "parallel",
    "region",
    # 모듈
    "config",
    "exceptions",
]
