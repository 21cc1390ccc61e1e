"""
core/inventory/report.py - 텍스트 리포트 렌더링

집계 결과를 사람이 읽는 텍스트로 변환하는 순수 함수 모음입니다.
인스턴스 유형은 사전순으로 출력됩니다.

섹션:
    - 계정별: EC2 유형별 개수/합계, ECS Fargate 요약, 계정 vCPU 합계
    - 조직 전체: EC2 요약, ECS Fargate 요약, 최종 vCPU 합계
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.parallel import CollectedError

    from .aggregator import AccountSummary, InventoryResult, Tally

RULE = "=" * 45
THIN_RULE = "-" * 45


def render_account(summary: AccountSummary) -> list[str]:
    """계정 하나의 리포트 라인"""
    account_id = summary.account_id
    lines = [RULE, f"Processing account: {account_id}", RULE]

    if summary.skipped:
        lines.append(f"  Skipped account {account_id}: could not assume role ({summary.reason})")
        return lines

    counts, totals = summary.tally.snapshot()

    lines.append(f"  EC2 instances in account {account_id}:")
    if not counts:
        lines.append("    No running EC2 instances found")
    else:
        lines.extend(f"    {instance_type}: {count}" for instance_type, count in counts.sorted_items())
        lines.append(f"    Total EC2 instances: {totals.ec2_instances}")
        lines.append(f"    Total EC2 vCPUs: {totals.ec2_vcpus}")

    lines.append(f"  ECS Fargate in account {account_id}:")
    if totals.ecs_clusters == 0:
        lines.append("    No ECS clusters found")
    else:
        lines.append(f"    ECS clusters: {totals.ecs_clusters}")
        lines.append(f"    Running Fargate tasks: {totals.ecs_tasks}")
        lines.append(f"    Fargate CPU units: {totals.ecs_cpu_units}")
        lines.append(f"    Fargate vCPUs (CPU units / 1024): {totals.ecs_vcpus}")

    lines.append(f"  Total vCPUs in account {account_id}: {totals.total_vcpus}")
    return lines


def render_organization(tally: Tally) -> list[str]:
    """조직 전체 요약 라인"""
    counts, totals = tally.snapshot()

    lines = [RULE, "ORGANIZATION-WIDE EC2 INSTANCE SUMMARY", RULE]
    if not counts:
        lines.append("No running EC2 instances found across the organization")
    else:
        lines.extend(f"{instance_type}: {count}" for instance_type, count in counts.sorted_items())
        lines.append(THIN_RULE)
        lines.append(f"TOTAL EC2 INSTANCES: {totals.ec2_instances}")
        lines.append(f"TOTAL EC2 vCPUs: {totals.ec2_vcpus}")

    lines.extend(["", RULE, "ORGANIZATION-WIDE ECS FARGATE SUMMARY", RULE])
    if totals.ecs_clusters == 0:
        lines.append("No ECS Fargate clusters found across the organization")
    else:
        lines.append(f"ECS clusters: {totals.ecs_clusters}")
        lines.append(f"Running Fargate tasks: {totals.ecs_tasks}")
        lines.append(f"Fargate CPU units: {totals.ecs_cpu_units}")
        lines.append(f"Fargate vCPUs: {totals.ecs_vcpus}")

    lines.extend(["", RULE, "ORGANIZATION-WIDE TOTAL vCPU SUMMARY", RULE])
    lines.append(f"EC2 vCPUs: {totals.ec2_vcpus}")
    lines.append(f"ECS Fargate vCPUs: {totals.ecs_vcpus}")
    lines.append(THIN_RULE)
    lines.append(f"TOTAL vCPUs: {totals.total_vcpus}")
    return lines


def render_coverage_gaps(errors: list[CollectedError]) -> list[str]:
    """수집하지 못한 호출 목록 (없으면 빈 리스트)"""
    if not errors:
        return []

    lines = [RULE, f"COVERAGE GAPS ({len(errors)} failed calls)", RULE]
    for e in sorted(errors, key=lambda e: (e.account_id, e.region, e.service, e.operation)):
        lines.append(f"{e.account_id}/{e.region} {e.service}.{e.operation}: {e.error_code} - {e.error_message}")
    return lines


def render_report(result: InventoryResult) -> str:
    """전체 리포트 텍스트"""
    lines: list[str] = []
    for summary in result.accounts:
        lines.extend(render_account(summary))
        lines.append("")

    lines.extend(render_organization(result.organization))

    gaps = render_coverage_gaps(result.errors)
    if gaps:
        lines.append("")
        lines.extend(gaps)

    lines.extend(["", "Inventory complete."])
    return "\n".join(lines)
