"""
core/inventory - 조직 전체 EC2/ECS Fargate vCPU 인벤토리

구성:
    - types: 수집 레코드, CountTable, Totals
    - collector: (계정, 리전) 단위 EC2/ECS 수집
    - aggregator: 계정/조직 Tally
    - scanner: 계정/리전 워커 풀 오케스트레이션
    - report: 텍스트 리포트

Example:
    from core.inventory import OrganizationScanner, render_report

    result = OrganizationScanner(config).scan()
    print(render_report(result))
"""

from .aggregator import AccountSummary, InventoryResult, Tally
from .collector import collect_ec2_instances, collect_ecs_tasks, collect_region
from .report import render_account, render_organization, render_report
from .scanner import OrganizationScanner
from .types import (
    CPU_UNITS_PER_VCPU,
    CountTable,
    FargateTaskRecord,
    InstanceRecord,
    RegionScanResult,
    Totals,
    parse_cpu_units,
)

__all__ = [
    # Types
    "CPU_UNITS_PER_VCPU",
    "CountTable",
    "FargateTaskRecord",
    "InstanceRecord",
    "RegionScanResult",
    "Totals",
    "parse_cpu_units",
    # Aggregation
    "AccountSummary",
    "InventoryResult",
    "Tally",
    # Collection
    "collect_ec2_instances",
    "collect_ecs_tasks",
    "collect_region",
    # Orchestration
    "OrganizationScanner",
    # Report
    "render_account",
    "render_organization",
    "render_report",
]
