"""
cli/ui/console.py - Rich 콘솔 유틸리티

일관된 콘솔 출력을 위한 함수들

- console: 리포트 출력용 (stdout)
- err_console: 로그/상태 메시지용 (stderr)
"""

from __future__ import annotations

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

# botocore 노이즈 로그 제한
NOISY_LOGGERS = (
    "botocore.httpchecksum",
    "botocore.credentials",
    "botocore.loaders",
    "botocore.session",
    "botocore.hooks",
    "botocore.retryhandler",
    "urllib3.connectionpool",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)


def get_console(stderr: bool = False) -> Console:
    """Rich Console 인스턴스를 생성하고 반환합니다."""
    is_windows = platform.system().lower() == "windows"

    return Console(
        stderr=stderr,
        color_system="auto",
        highlight=True,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# 전역 콘솔 인스턴스
console = get_console()
err_console = get_console(stderr=True)


def verbosity_to_level(verbosity: int) -> int:
    """-v 횟수를 로그 레벨로 변환 (0: WARNING, 1: INFO, 2+: DEBUG)"""
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def setup_logging(verbosity: int = 0) -> logging.Logger:
    """루트 logger에 stderr Rich 핸들러를 설정합니다.

    기본 레벨은 WARNING이므로 계정 건너뜀/호출 실패 경고는 항상 표시됩니다.

    Args:
        verbosity: -v 옵션 횟수

    Returns:
        logging.Logger: 루트 logger
    """
    handler = RichHandler(console=err_console, rich_tracebacks=True, show_path=verbosity >= 2)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logging.basicConfig(level=verbosity_to_level(verbosity), handlers=[handler], force=True)

    # basicConfig가 레벨을 바꾸지 않도록 노이즈 logger는 다시 고정
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if verbosity < 3:
        logging.getLogger("botocore").setLevel(logging.WARNING)

    return logging.getLogger()


# =============================================================================
# 표준 출력 스타일 (이모지 없이 Rich 스타일만 사용)
# =============================================================================

# 상태 심볼
SYMBOL_SUCCESS = "✓"  # 완료
SYMBOL_ERROR = "✗"  # 에러
SYMBOL_WARNING = "!"  # 경고
SYMBOL_INFO = "•"  # 정보


def print_success(message: str) -> None:
    """성공 메시지 출력 (초록색 체크마크)"""
    err_console.print(f"[green]{SYMBOL_SUCCESS} {escape(message)}[/green]")


def print_error(message: str) -> None:
    """에러 메시지 출력 (빨간색 X)

    Args:
        message: 출력할 메시지
    """
    err_console.print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]")


def print_warning(message: str) -> None:
    """경고 메시지 출력 (노란색 경고)"""
    err_console.print(f"[yellow]{SYMBOL_WARNING} {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    err_console.print(f"[blue]{SYMBOL_INFO} {escape(message)}[/blue]")


def print_report(text: str) -> None:
    """리포트 텍스트를 stdout에 그대로 출력 (마크업/하이라이트 없음)"""
    console.print(text, markup=False, highlight=False)


def print_execution_summary(
    profile: str,
    org_region: str,
    accounts: int = 0,
    account_workers: int = 1,
    region_workers: int = 1,
) -> None:
    """실행 요약 박스 출력 (stderr)

    Args:
        profile: 조직 조회 프로파일 이름
        org_region: Organizations/STS 리전
        accounts: 활성 계정 수
        account_workers: 계정 워커 수
        region_workers: 리전 워커 수
    """
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan", width=12)
    table.add_column()
    table.add_row("프로필", escape(profile))
    table.add_row("리전", org_region)
    if accounts > 0:
        table.add_row("계정", f"{accounts}개")
    table.add_row("워커", f"계정 {account_workers} x 리전 {region_workers}")
    err_console.print(Panel(table, title="실행 요약", border_style="#FF9900"))


def print_error_tree(errors: list[tuple[str, list[str]]], title: str = "수집 누락 요약") -> None:
    """에러를 카테고리별 계층 트리로 출력 (stderr)

    Args:
        errors: (category, [detail_items]) 튜플 리스트
        title: 트리 루트 제목

    Example:
        print_error_tree([
            ("AccessDenied", ["123456789012/ap-northeast-2", "123456789012/us-east-1"]),
            ("ThrottlingException", ["210987654321/eu-west-1"]),
        ])
    """
    tree = Tree(f"[bold yellow]{title}[/bold yellow]")
    for category, items in errors:
        branch = tree.add(f"[red]{escape(category)}[/red] ({len(items)}건)")
        for item in items[:3]:
            branch.add(f"[dim]{escape(item)}[/dim]")
        if len(items) > 3:
            branch.add(f"[dim]... 외 {len(items) - 3}건[/dim]")
    err_console.print(tree)
