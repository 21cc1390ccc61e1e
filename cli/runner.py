"""
cli/runner.py - 인벤토리 실행기

대화형 프롬프트 없이 조직 인벤토리를 실행하고 종료 코드를 반환합니다.

종료 코드:
    0: 완료 (계정/리전 단위 실패가 있어도 0)
    1: 치명적 설정 오류 (계정 처리 전에 발생)
    130: 사용자 중단 (Ctrl-C)
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from cli.ui import (
    err_console,
    print_error,
    print_error_tree,
    print_execution_summary,
    print_report,
    print_success,
    print_warning,
)
from core.config import InventoryConfig
from core.exceptions import ConfigError
from core.inventory import InventoryResult, OrganizationScanner, render_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_INTERRUPTED = 130


class InventoryRunner:
    """조직 인벤토리 실행기

    CI/CD 파이프라인 및 스크립트 자동화에 적합합니다.
    """

    def __init__(
        self,
        config: InventoryConfig,
        scanner_factory: Callable[[InventoryConfig], OrganizationScanner] = OrganizationScanner,
        quiet: bool = False,
    ):
        self.config = config
        self.scanner_factory = scanner_factory
        self.quiet = quiet

    def run(self) -> int:
        """인벤토리 실행

        Returns:
            종료 코드 (0, 1, 130)
        """
        try:
            scanner = self.scanner_factory(self.config)

            # 1. 기본 자격 증명 확인 및 계정 조회
            accounts = scanner.prepare()
            if not self.quiet:
                print_execution_summary(
                    profile=self.config.profile,
                    org_region=self.config.org_region,
                    accounts=len(accounts),
                    account_workers=self.config.account_workers,
                    region_workers=self.config.region_workers,
                )

            # 2. 계정/리전 스캔
            with err_console.status("계정 스캔 중...", spinner="dots"):
                result = scanner.scan()

        except KeyboardInterrupt:
            print_warning("사용자에 의해 중단되었습니다")
            return EXIT_INTERRUPTED
        except ConfigError as e:
            print_error(str(e))
            return EXIT_CONFIG_ERROR
        except Exception as e:
            logger.debug("예상치 못한 오류", exc_info=True)
            print_error(f"오류: {e}")
            return EXIT_CONFIG_ERROR

        # 3. 리포트
        print_report(render_report(result))
        self._print_gaps(result)
        return EXIT_OK

    def _print_gaps(self, result: InventoryResult) -> None:
        if self.quiet:
            return

        skipped = result.skipped_accounts
        if not result.errors and not skipped:
            print_success(f"계정 {len(result.accounts)}개 스캔 완료 (누락 없음)")
            return

        grouped: dict[str, list[str]] = {}
        for summary in skipped:
            grouped.setdefault("AssumeRole", []).append(f"{summary.account_id}: {summary.reason}")
        for e in result.errors:
            grouped.setdefault(e.error_code, []).append(f"{e.account_id}/{e.region} {e.service}.{e.operation}")
        print_error_tree(sorted(grouped.items()))


def run_inventory(config: InventoryConfig, quiet: bool = False) -> int:
    """인벤토리 실행 편의 함수

    Returns:
        종료 코드
    """
    return InventoryRunner(config, quiet=quiet).run()
