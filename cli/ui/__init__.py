# cli/ui - 콘솔 출력 (rich)
"""
콘솔 출력 모듈

리포트(stdout)와 로그/상태 메시지(stderr)를 분리해서 출력합니다.
"""

from .console import (
    SYMBOL_ERROR,
    SYMBOL_INFO,
    SYMBOL_SUCCESS,
    SYMBOL_WARNING,
    console,
    err_console,
    get_console,
    print_error,
    print_error_tree,
    print_execution_summary,
    print_info,
    print_report,
    print_success,
    print_warning,
    setup_logging,
    verbosity_to_level,
)

__all__ = [
    "SYMBOL_ERROR",
    "SYMBOL_INFO",
    "SYMBOL_SUCCESS",
    "SYMBOL_WARNING",
    "console",
    "err_console",
    "get_console",
    "print_error",
    "print_error_tree",
    "print_execution_summary",
    "print_info",
    "print_report",
    "print_success",
    "print_warning",
    "setup_logging",
    "verbosity_to_level",
]
