"""
core/inventory/types.py - 인벤토리 데이터 타입 정의

수집기(collector)가 만들고 집계기(aggregator)가 소비하는 레코드와
인스턴스 유형별 카운트 테이블, 합계 타입을 정의합니다.

- InstanceRecord: 실행 중인 EC2 인스턴스 1개 (유형, 코어 수, 코어당 스레드 수)
- FargateTaskRecord: ECS 태스크 1개 (launch type, 상태, 원본 CPU 값)
- RegionScanResult: (계정, 리전) 단위 수집 결과
- CountTable: 인스턴스 유형 -> 개수
- Totals: EC2/ECS 합계
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

# Fargate 관례: 1 vCPU = 1024 CPU units
CPU_UNITS_PER_VCPU = 1024

_CPU_UNITS_PATTERN = re.compile(r"^[0-9]+$")


def parse_cpu_units(raw: Any) -> int:
    """태스크의 원본 CPU 값을 CPU units 정수로 변환

    음이 아닌 정수(또는 숫자로만 이루어진 문자열)만 유효합니다.
    그 외 값(None, "1 vCPU", "-1", 0.5 등)은 0을 반환합니다.
    """
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw if raw >= 0 else 0
    if isinstance(raw, str) and _CPU_UNITS_PATTERN.match(raw):
        return int(raw)
    return 0


@dataclass(frozen=True)
class InstanceRecord:
    """실행 중인 EC2 인스턴스

    Attributes:
        instance_type: 인스턴스 유형 (예: "t3.micro")
        core_count: CPU 코어 수 (CpuOptions 없으면 0)
        threads_per_core: 코어당 스레드 수 (CpuOptions 없으면 0)
        instance_id: 인스턴스 ID (로그용)
    """

    instance_type: str
    core_count: int = 0
    threads_per_core: int = 0
    instance_id: str = ""

    @property
    def vcpus(self) -> int:
        return self.core_count * self.threads_per_core

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> InstanceRecord:
        """describe_instances 응답의 Instance 항목에서 생성"""
        cpu = data.get("CpuOptions") or {}
        record = cls(
            instance_type=data.get("InstanceType", ""),
            core_count=int(cpu.get("CoreCount") or 0),
            threads_per_core=int(cpu.get("ThreadsPerCore") or 0),
            instance_id=data.get("InstanceId", ""),
        )
        if not cpu:
            logger.info(f"CPU 정보 없음, 0 vCPU로 집계: {record.instance_id} ({record.instance_type})")
        return record


@dataclass(frozen=True)
class FargateTaskRecord:
    """ECS 태스크

    Attributes:
        task_arn: 태스크 ARN
        launch_type: "FARGATE" / "EC2" / "EXTERNAL"
        last_status: "RUNNING" / "PENDING" / "STOPPED" 등
        cpu: 응답의 원본 CPU 값 (문자열)
    """

    task_arn: str
    launch_type: str = ""
    last_status: str = ""
    cpu: Any = None

    @property
    def is_running_fargate(self) -> bool:
        return self.launch_type == "FARGATE" and self.last_status == "RUNNING"

    @property
    def cpu_units(self) -> int:
        """검증된 CPU units (유효하지 않으면 0)"""
        units = parse_cpu_units(self.cpu)
        if units == 0 and self.cpu not in (0, "0"):
            logger.debug(f"유효하지 않은 CPU 값, 0으로 집계: {self.task_arn} ({self.cpu!r})")
        return units

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> FargateTaskRecord:
        """describe_tasks 응답의 task 항목에서 생성"""
        return cls(
            task_arn=data.get("taskArn", ""),
            launch_type=data.get("launchType", ""),
            last_status=data.get("lastStatus", ""),
            cpu=data.get("cpu"),
        )


@dataclass
class RegionScanResult:
    """(계정, 리전) 단위 수집 결과

    Attributes:
        account_id: AWS 계정 ID
        region: AWS 리전
        instances: 실행 중인 EC2 인스턴스
        cluster_count: ECS 클러스터 수 (태스크 조회 실패 클러스터 포함)
        tasks: 조회된 ECS 태스크 (Fargate/RUNNING 필터 전)
    """

    account_id: str
    region: str
    instances: list[InstanceRecord] = field(default_factory=list)
    cluster_count: int = 0
    tasks: list[FargateTaskRecord] = field(default_factory=list)

    @property
    def running_fargate_tasks(self) -> list[FargateTaskRecord]:
        return [t for t in self.tasks if t.is_running_fargate]

    @property
    def is_empty(self) -> bool:
        return not self.instances and self.cluster_count == 0


class CountTable:
    """인스턴스 유형별 개수 테이블

    키는 추가만 되고 제거되지 않습니다.
    목록은 인스턴스 유형 사전순으로 정렬됩니다.
    스레드 안전하지 않으며, 잠금은 Tally가 담당합니다.
    """

    def __init__(self, counts: dict[str, int] | None = None):
        self._counts: dict[str, int] = dict(counts or {})

    def add(self, instance_type: str, count: int = 1) -> None:
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        self._counts[instance_type] = self._counts.get(instance_type, 0) + count

    def merge(self, other: CountTable) -> None:
        for instance_type, count in other.sorted_items():
            self.add(instance_type, count)

    def get(self, instance_type: str) -> int:
        return self._counts.get(instance_type, 0)

    def sorted_items(self) -> list[tuple[str, int]]:
        return sorted(self._counts.items())

    def total(self) -> int:
        return sum(self._counts.values())

    def to_dict(self) -> dict[str, int]:
        return dict(self.sorted_items())

    def copy(self) -> CountTable:
        return CountTable(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __bool__(self) -> bool:
        return bool(self._counts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CountTable):
            return NotImplemented
        return self._counts == other._counts

    def __repr__(self) -> str:
        return f"CountTable({self.to_dict()!r})"


@dataclass
class Totals:
    """EC2/ECS 합계

    ECS vCPU는 태스크별로 나누지 않고 CPU units 합계에서 계산합니다.
    (512 units 태스크 2개 = 1 vCPU)
    """

    ec2_instances: int = 0
    ec2_vcpus: int = 0
    ecs_clusters: int = 0
    ecs_tasks: int = 0
    ecs_cpu_units: int = 0

    @property
    def ecs_vcpus(self) -> int:
        return self.ecs_cpu_units // CPU_UNITS_PER_VCPU

    @property
    def total_vcpus(self) -> int:
        return self.ec2_vcpus + self.ecs_vcpus

    def add(self, other: Totals) -> None:
        self.ec2_instances += other.ec2_instances
        self.ec2_vcpus += other.ec2_vcpus
        self.ecs_clusters += other.ecs_clusters
        self.ecs_tasks += other.ecs_tasks
        self.ecs_cpu_units += other.ecs_cpu_units

    def to_dict(self) -> dict[str, int]:
        return {
            "ec2_instances": self.ec2_instances,
            "ec2_vcpus": self.ec2_vcpus,
            "ecs_clusters": self.ecs_clusters,
            "ecs_tasks": self.ecs_tasks,
            "ecs_cpu_units": self.ecs_cpu_units,
            "ecs_vcpus": self.ecs_vcpus,
            "total_vcpus": self.total_vcpus,
        }
