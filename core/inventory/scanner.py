"""
core/inventory/scanner.py - 조직 전체 인벤토리 오케스트레이션

흐름:
    기본 자격 증명 확인 -> 활성 계정 조회
    -> 계정별 (제한된 워커 풀): 역할 전환 -> 리전 조회
       -> 리전별 (제한된 워커 풀): EC2/ECS 수집 -> 계정 Tally에 반영
    -> 계정 Tally를 조직 Tally에 합산 (잠금)

계정 워커는 각자 자격 증명/세션/계정 Tally를 소유하고,
리전 워커는 계정 세션을 읽기 전용으로 공유합니다.
account_workers=1, region_workers=1이면 순차 실행과 동일합니다.

Usage:
    from core.config import InventoryConfig
    from core.inventory import OrganizationScanner

    config = InventoryConfig(profile="org-admin", role_name="InventoryReadOnly")
    result = OrganizationScanner(config).scan()
    print(result.organization.totals.total_vcpus)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from core.auth import RoleCredentialProvider, get_base_session, list_active_accounts, verify_identity
from core.exceptions import RoleAssumptionError
from core.parallel import ErrorCollector, RetryConfig, TaskSpec, parallel_run
from core.region import get_available_regions

from .aggregator import AccountSummary, InventoryResult, Tally
from .collector import collect_region

if TYPE_CHECKING:
    import boto3

    from core.auth import AccountInfo
    from core.config import InventoryConfig
    from core.parallel.types import ParallelExecutionResult

logger = logging.getLogger(__name__)

# 계정 작업은 내부에서 실패를 처리하므로 실행기 수준 재시도는 하지 않음
_NO_RETRY = RetryConfig(max_retries=0)


class OrganizationScanner:
    """조직 전체 EC2/ECS Fargate vCPU 인벤토리

    Args:
        config: 실행 설정
        session_factory: (profile, region) -> boto3.Session
        errors: 호출 실패 수집기 (None이면 새로 생성)
    """

    def __init__(
        self,
        config: InventoryConfig,
        session_factory: Callable[[str | None, str | None], boto3.Session] = get_base_session,
        errors: ErrorCollector | None = None,
    ):
        self.config = config
        self.session_factory = session_factory
        self.errors = errors or ErrorCollector("inventory")
        self._client_options = config.client_options()
        self._organization = Tally()
        self._provider: RoleCredentialProvider | None = None
        self._accounts: list[AccountInfo] | None = None

    def scan(self) -> InventoryResult:
        """전체 스캔 실행

        Raises:
            ConfigError: 기본 자격 증명 오류, 계정 조회 실패, 활성 계정 없음
                (계정 처리 전에 발생)
        """
        accounts = self._accounts if self._accounts is not None else self.prepare()

        tasks = [TaskSpec(identifier=a.id, region=self.config.org_region, payload=a) for a in accounts]
        result = parallel_run(
            self._scan_account_task,
            tasks,
            max_workers=self.config.account_workers,
            service="sts",
            retry_config=_NO_RETRY,
        )

        summaries = self._collect_summaries(accounts, result)
        if self.errors.has_errors:
            logger.info(f"수집 누락: {self.errors.get_summary()}")
        return InventoryResult(accounts=summaries, organization=self._organization, errors=self.errors.errors)

    def prepare(self) -> list[AccountInfo]:
        """기본 자격 증명 확인 후 활성 계정 조회

        scan() 전에 호출하면 계정 수를 미리 알 수 있습니다.
        """
        config = self.config

        org_session = self.session_factory(config.profile, config.org_region)
        verify_identity(org_session, **self._client_options)
        accounts = list_active_accounts(org_session, config.org_region, **self._client_options)

        if config.effective_assume_profile == config.profile:
            assume_session = org_session
        else:
            assume_session = self.session_factory(config.effective_assume_profile, config.org_region)
            verify_identity(assume_session, **self._client_options)

        self._provider = RoleCredentialProvider(
            assume_session,
            config.role_arn,
            session_name=config.session_name,
            client_options=self._client_options,
        )
        self._accounts = accounts
        return accounts

    def _scan_account_task(self, task: TaskSpec) -> AccountSummary:
        return self.scan_account(task.payload)

    def scan_account(self, account: AccountInfo) -> AccountSummary:
        """계정 하나를 스캔하고 조직 Tally에 합산

        역할 전환 실패 시 건너뛴 계정으로 반환합니다 (기여도 0).
        """
        if self._provider is None:
            raise RuntimeError("scan_account() requires prepare() first")

        summary = AccountSummary(account=account)
        logger.info(f"Processing account: {account.id} ({account.name})")

        try:
            with self._provider.credential_scope(account.id) as credentials:
                session = credentials.create_session(self.config.org_region)
                summary.regions = get_available_regions(
                    session,
                    account.id,
                    account.name,
                    errors=self.errors,
                    lookup_region=self.config.org_region,
                    **self._client_options,
                )
                self._scan_regions(session, account, summary)
        except RoleAssumptionError as e:
            logger.warning(
                f"Could not assume role in {account.id} ({e.role_arn}): {e.reason}, skipping..."
            )
            summary.skipped = True
            summary.reason = e.reason
            return summary

        self._organization.merge(summary.tally)
        totals = summary.tally.totals
        logger.info(f"[{account.id}] 완료: 리전 {len(summary.regions)}개, 총 vCPU {totals.total_vcpus}")
        return summary

    def _scan_regions(self, session: boto3.Session, account: AccountInfo, summary: AccountSummary) -> None:
        def scan_region(task: TaskSpec):
            return collect_region(session, account.id, account.name, task.region, self.errors, **self._client_options)

        tasks = [TaskSpec(identifier=account.id, region=r) for r in summary.regions]
        result = parallel_run(scan_region, tasks, max_workers=self.config.region_workers, service="ec2")

        for region_result in result.successful:
            summary.tally.add_region(region_result.data)
        if result.has_any_failure():
            logger.debug(f"[{account.id}] 리전 작업 실패\n{result.get_error_summary()}")
        for error in result.get_errors():
            self.errors.collect_task_error(error, account.name, service="ec2", operation="scan_region")

    def _collect_summaries(
        self,
        accounts: list[AccountInfo],
        result: ParallelExecutionResult[AccountSummary],
    ) -> list[AccountSummary]:
        """조직 계정 목록 순서로 정렬된 계정 결과"""
        by_id = {s.account_id: s for s in result.get_data()}

        summaries: list[AccountSummary] = []
        for account in accounts:
            summary = by_id.get(account.id)
            if summary is None:
                # 작업 자체가 예외로 끝난 계정
                error = next((e for e in result.get_errors() if e.identifier == account.id), None)
                reason = str(error) if error else "unknown"
                logger.warning(f"Account {account.id} scan failed, skipping: {reason}")
                summary = AccountSummary(account=account, skipped=True, reason=reason)
            summaries.append(summary)
        return summaries
