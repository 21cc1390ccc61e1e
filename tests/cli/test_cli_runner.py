"""
tests/cli/test_cli_runner.py - cli/runner.py 테스트

스캐너를 MagicMock으로 대체하여 실행 흐름과 종료 코드를 검증합니다.
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from cli.runner import EXIT_CONFIG_ERROR, EXIT_INTERRUPTED, EXIT_OK, InventoryRunner
from core.auth.types import AccountInfo
from core.config import InventoryConfig
from core.exceptions import ConfigError, EmptyOrganizationError, OrganizationAccessError
from core.inventory import AccountSummary, InstanceRecord, InventoryResult, Tally
from core.parallel import CollectedError, ErrorSeverity
from core.parallel.types import ErrorCategory

ACCOUNT = AccountInfo(id="111111111111", name="management")


@pytest.fixture
def config():
    return InventoryConfig(profile="org-admin", role_name="InventoryReadOnly")


def _result(errors=(), skipped=False):
    summary = AccountSummary(account=ACCOUNT, skipped=skipped, reason="AccessDenied" if skipped else "")
    organization = Tally()
    if not skipped:
        summary.tally.add_instance(InstanceRecord("t3.micro", 1, 2))
        organization.merge(summary.tally)
    return InventoryResult(accounts=[summary], organization=organization, errors=list(errors))


def _scanner(result=None, prepare_error=None, scan_error=None):
    scanner = MagicMock()
    if prepare_error is not None:
        scanner.prepare.side_effect = prepare_error
    else:
        scanner.prepare.return_value = [ACCOUNT]
    if scan_error is not None:
        scanner.scan.side_effect = scan_error
    else:
        scanner.scan.return_value = result or _result()
    return scanner


class TestInventoryRunner:
    """InventoryRunner 테스트"""

    def test_success_prints_report(self, config, capsys):
        scanner = _scanner()

        code = InventoryRunner(config, scanner_factory=lambda c: scanner).run()

        assert code == EXIT_OK
        out = capsys.readouterr().out
        assert "Processing account: 111111111111" in out
        assert "t3.micro: 1" in out
        assert "TOTAL vCPUs: 2" in out
        assert "Inventory complete." in out

    def test_scanner_receives_config(self, config):
        factory = MagicMock(return_value=_scanner())

        InventoryRunner(config, scanner_factory=factory, quiet=True).run()

        factory.assert_called_once_with(config)

    @pytest.mark.parametrize(
        "error",
        [
            ConfigError("credentials", "기본 자격 증명을 찾을 수 없습니다"),
            OrganizationAccessError("org-admin"),
            EmptyOrganizationError(total_accounts=2),
        ],
    )
    def test_fatal_config_error_before_scan(self, config, error, capsys):
        scanner = _scanner(prepare_error=error)

        code = InventoryRunner(config, scanner_factory=lambda c: scanner).run()

        assert code == EXIT_CONFIG_ERROR
        scanner.scan.assert_not_called()
        assert "Processing account" not in capsys.readouterr().out

    def test_keyboard_interrupt(self, config):
        scanner = _scanner(scan_error=KeyboardInterrupt())

        code = InventoryRunner(config, scanner_factory=lambda c: scanner, quiet=True).run()

        assert code == EXIT_INTERRUPTED

    def test_unexpected_error(self, config, capsys):
        scanner = _scanner(scan_error=RuntimeError("boom"))

        code = InventoryRunner(config, scanner_factory=lambda c: scanner).run()

        assert code == EXIT_CONFIG_ERROR
        assert "boom" in capsys.readouterr().err

    def test_partial_failures_still_exit_ok(self, config, capsys):
        gap = CollectedError(
            timestamp=datetime(2024, 1, 1),
            account_id="111111111111",
            account_name="management",
            region="us-east-1",
            service="ecs",
            operation="list_clusters",
            error_code="AccessDeniedException",
            error_message="denied",
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.ACCESS_DENIED,
        )
        scanner = _scanner(result=_result(errors=[gap]))

        code = InventoryRunner(config, scanner_factory=lambda c: scanner).run()

        assert code == EXIT_OK
        captured = capsys.readouterr()
        assert "COVERAGE GAPS (1 failed calls)" in captured.out
        assert "AccessDeniedException" in captured.err

    def test_skipped_account_exit_ok(self, config, capsys):
        scanner = _scanner(result=_result(skipped=True))

        code = InventoryRunner(config, scanner_factory=lambda c: scanner).run()

        assert code == EXIT_OK
        captured = capsys.readouterr()
        assert "Skipped account 111111111111" in captured.out
        assert "AssumeRole" in captured.err

    def test_quiet_prints_only_report(self, config, capsys):
        scanner = _scanner()

        InventoryRunner(config, scanner_factory=lambda c: scanner, quiet=True).run()

        captured = capsys.readouterr()
        assert "Inventory complete." in captured.out
        assert "실행 요약" not in captured.err
        assert "스캔 완료" not in captured.err
