"""
core/inventory/aggregator.py - 계정/조직 단위 집계

Tally는 CountTable과 Totals를 잠금으로 보호합니다.
계정마다 하나, 조직 전체에 하나가 있으며,
리전 결과를 계정 Tally에 접고(add_region) 계정 Tally를 조직 Tally에 합칩니다(merge).
각 접기 연산은 잠금 안에서 한 번에 반영됩니다.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from .types import CountTable, InstanceRecord, RegionScanResult, Totals

if TYPE_CHECKING:
    from core.auth.types import AccountInfo
    from core.parallel import CollectedError


class Tally:
    """잠금으로 보호되는 CountTable + Totals"""

    def __init__(self):
        self._counts = CountTable()
        self._totals = Totals()
        self._lock = threading.Lock()

    def add_instance(self, record: InstanceRecord) -> None:
        with self._lock:
            self._add_instance(record)

    def _add_instance(self, record: InstanceRecord) -> None:
        self._counts.add(record.instance_type)
        self._totals.ec2_instances += 1
        self._totals.ec2_vcpus += record.vcpus

    def add_region(self, result: RegionScanResult) -> None:
        """리전 수집 결과를 반영"""
        fargate = result.running_fargate_tasks
        with self._lock:
            for record in result.instances:
                self._add_instance(record)
            self._totals.ecs_clusters += result.cluster_count
            self._totals.ecs_tasks += len(fargate)
            self._totals.ecs_cpu_units += sum(t.cpu_units for t in fargate)

    def merge(self, other: Tally) -> None:
        """다른 Tally(계정)를 이 Tally(조직)에 합산"""
        if other is self:
            raise ValueError("cannot merge a tally into itself")
        counts, totals = other.snapshot()
        with self._lock:
            self._counts.merge(counts)
            self._totals.add(totals)

    def snapshot(self) -> tuple[CountTable, Totals]:
        """현재 상태의 복사본"""
        with self._lock:
            return self._counts.copy(), replace(self._totals)

    @property
    def counts(self) -> CountTable:
        return self.snapshot()[0]

    @property
    def totals(self) -> Totals:
        return self.snapshot()[1]


@dataclass
class AccountSummary:
    """계정 단위 결과

    Attributes:
        account: 계정 정보
        tally: 계정 Tally (건너뛴 계정은 비어 있음)
        skipped: 역할 전환 실패로 건너뛰었는지
        reason: 건너뛴 이유
        regions: 스캔한 리전 목록
    """

    account: AccountInfo
    tally: Tally = field(default_factory=Tally)
    skipped: bool = False
    reason: str = ""
    regions: list[str] = field(default_factory=list)

    @property
    def account_id(self) -> str:
        return self.account.id


@dataclass
class InventoryResult:
    """조직 전체 인벤토리 결과

    Attributes:
        accounts: 계정 결과 (조직 계정 목록 순서)
        organization: 조직 Tally
        errors: 호출 단위 실패 (커버리지 공백)
    """

    accounts: list[AccountSummary] = field(default_factory=list)
    organization: Tally = field(default_factory=Tally)
    errors: list[CollectedError] = field(default_factory=list)

    @property
    def scanned_accounts(self) -> list[AccountSummary]:
        return [a for a in self.accounts if not a.skipped]

    @property
    def skipped_accounts(self) -> list[AccountSummary]:
        return [a for a in self.accounts if a.skipped]
