"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.
모든 옵션은 환경 변수로 대체할 수 있습니다.

명령어 구조:
    vcpu-inventory --profile org-admin --role-name InventoryReadOnly
    vcpu-inventory -v                # INFO 로그 (계정 진행 상황)
    vcpu-inventory -vv               # DEBUG 로그
    vcpu-inventory --version         # 버전 표시

Usage:
    # 명령줄에서 직접 실행
    $ vcpu-inventory --profile org-admin --role-name InventoryReadOnly

    # 환경 변수 사용
    $ AWS_PROFILE=org-admin INVENTORY_ROLE_NAME=InventoryReadOnly vcpu-inventory

    # 모듈로 실행
    $ python -m cli.app
"""

from __future__ import annotations

import click

from cli.ui import print_error, setup_logging
from core import __version__
from core.config import (
    DEFAULT_ACCOUNT_WORKERS,
    DEFAULT_ORG_REGION,
    DEFAULT_REGION_WORKERS,
    DEFAULT_ROLE_ARN_TEMPLATE,
    ENV_ASSUME_PROFILE,
    ENV_ORG_REGION,
    ENV_PROFILE,
    ENV_ROLE_ARN_TEMPLATE,
    ENV_ROLE_NAME,
    InventoryConfig,
)
from core.exceptions import ConfigError

VERSION = __version__


@click.command(name="vcpu-inventory", context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(VERSION, prog_name="vcpu-inventory")
@click.option("-p", "--profile", envvar=ENV_PROFILE, help="Organizations 조회용 프로파일 (필수)")
@click.option("--assume-profile", envvar=ENV_ASSUME_PROFILE, help="AssumeRole 호출용 프로파일 (기본: --profile)")
@click.option(
    "--org-region",
    envvar=ENV_ORG_REGION,
    default=DEFAULT_ORG_REGION,
    show_default=True,
    help="Organizations/STS 호출 리전",
)
@click.option("--role-name", envvar=ENV_ROLE_NAME, help="멤버 계정의 역할 이름")
@click.option(
    "--role-arn-template",
    envvar=ENV_ROLE_ARN_TEMPLATE,
    default=DEFAULT_ROLE_ARN_TEMPLATE,
    show_default=True,
    help="역할 ARN 템플릿 ({account_id}, {role_name} 치환)",
)
@click.option(
    "--account-workers",
    type=click.IntRange(min=1),
    default=DEFAULT_ACCOUNT_WORKERS,
    show_default=True,
    help="동시에 스캔할 계정 수 (1이면 순차)",
)
@click.option(
    "--region-workers",
    type=click.IntRange(min=1),
    default=DEFAULT_REGION_WORKERS,
    show_default=True,
    help="계정 내 동시에 스캔할 리전 수 (1이면 순차)",
)
@click.option("--timeout", type=click.IntRange(min=1), default=30, show_default=True, help="API 읽기 타임아웃 (초)")
@click.option("--max-attempts", type=click.IntRange(min=1), default=5, show_default=True, help="API 최대 시도 횟수")
@click.option("-q", "--quiet", is_flag=True, help="리포트만 출력")
@click.option("-v", "--verbose", count=True, help="로그 상세도 (-v: INFO, -vv: DEBUG)")
def cli(
    profile: str | None,
    assume_profile: str | None,
    org_region: str,
    role_name: str | None,
    role_arn_template: str,
    account_workers: int,
    region_workers: int,
    timeout: int,
    max_attempts: int,
    quiet: bool,
    verbose: int,
) -> None:
    """AWS Organization 전체의 EC2 / ECS Fargate vCPU 인벤토리"""
    setup_logging(verbose)

    try:
        config = InventoryConfig(
            profile=profile or "",
            assume_profile=assume_profile or None,
            org_region=org_region,
            role_name=role_name or None,
            role_arn_template=role_arn_template,
            account_workers=account_workers,
            region_workers=region_workers,
            read_timeout=timeout,
            max_attempts=max_attempts,
        )
    except ConfigError as e:
        print_error(str(e))
        raise SystemExit(1) from e

    from cli.runner import run_inventory

    raise SystemExit(run_inventory(config, quiet=quiet))


if __name__ == "__main__":
    cli()
