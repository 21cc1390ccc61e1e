"""
core/inventory/collector.py - (계정, 리전) 단위 리소스 수집

- EC2: 실행 중인(running) 인스턴스의 유형과 CPU 토폴로지
- ECS: 클러스터 수와 클러스터별 태스크 상세 (describe_tasks 100개씩 배치)

개별 API 호출 실패는 "해당 호출의 데이터 없음"으로 처리하고
ErrorCollector에 기록한 뒤 나머지 호출을 계속 진행합니다.
태스크 조회가 실패한 클러스터도 클러스터 수에는 포함됩니다.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from core.parallel import ErrorCollector, get_client, try_or_default

from .types import FargateTaskRecord, InstanceRecord, RegionScanResult

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)

# describe_tasks 1회 최대 태스크 수
DESCRIBE_TASKS_BATCH_SIZE = 100

RUNNING_FILTER = [{"Name": "instance-state-name", "Values": ["running"]}]


def _describe_running_instances(ec2) -> list[InstanceRecord]:
    records: list[InstanceRecord] = []
    paginator = ec2.get_paginator("describe_instances")
    for page in paginator.paginate(Filters=RUNNING_FILTER):
        for reservation in page.get("Reservations", []):
            for inst in reservation.get("Instances", []):
                records.append(InstanceRecord.from_response(inst))
    return records


def collect_ec2_instances(
    session: boto3.Session,
    account_id: str,
    account_name: str,
    region: str,
    errors: ErrorCollector | None = None,
    **client_options: Any,
) -> list[InstanceRecord]:
    """실행 중인 EC2 인스턴스 수집

    Returns:
        InstanceRecord 목록 (조회 실패 시 빈 목록)
    """
    ec2 = get_client(session, "ec2", region_name=region, **client_options)
    return try_or_default(
        lambda: _describe_running_instances(ec2),
        default=[],
        collector=errors,
        account_id=account_id,
        account_name=account_name,
        region=region,
        service="ec2",
        operation="describe_instances",
    )


def _list_cluster_arns(ecs) -> list[str]:
    arns: list[str] = []
    paginator = ecs.get_paginator("list_clusters")
    for page in paginator.paginate():
        arns.extend(page.get("clusterArns", []))
    return arns


def _list_task_arns(ecs, cluster_arn: str) -> list[str]:
    arns: list[str] = []
    paginator = ecs.get_paginator("list_tasks")
    for page in paginator.paginate(cluster=cluster_arn):
        arns.extend(page.get("taskArns", []))
    return arns


def _describe_tasks(ecs, cluster_arn: str, task_arns: list[str]) -> list[FargateTaskRecord]:
    resp = ecs.describe_tasks(cluster=cluster_arn, tasks=task_arns)
    return [FargateTaskRecord.from_response(t) for t in resp.get("tasks", [])]


def collect_ecs_tasks(
    session: boto3.Session,
    account_id: str,
    account_name: str,
    region: str,
    errors: ErrorCollector | None = None,
    **client_options: Any,
) -> tuple[int, list[FargateTaskRecord]]:
    """ECS 클러스터 수와 태스크 상세 수집

    Fargate/RUNNING 필터는 집계 단계에서 적용합니다.

    Returns:
        (클러스터 수, FargateTaskRecord 목록)
    """
    ecs = get_client(session, "ecs", region_name=region, **client_options)
    context = {
        "collector": errors,
        "account_id": account_id,
        "account_name": account_name,
        "region": region,
        "service": "ecs",
    }

    cluster_arns = try_or_default(lambda: _list_cluster_arns(ecs), default=[], operation="list_clusters", **context)

    tasks: list[FargateTaskRecord] = []
    for cluster_arn in cluster_arns:
        task_arns = try_or_default(
            lambda arn=cluster_arn: _list_task_arns(ecs, arn),
            default=[],
            operation="list_tasks",
            resource_id=cluster_arn,
            **context,
        )

        for i in range(0, len(task_arns), DESCRIBE_TASKS_BATCH_SIZE):
            batch_arns = task_arns[i : i + DESCRIBE_TASKS_BATCH_SIZE]
            tasks.extend(
                try_or_default(
                    lambda arn=cluster_arn, batch=batch_arns: _describe_tasks(ecs, arn, batch),
                    default=[],
                    operation="describe_tasks",
                    resource_id=cluster_arn,
                    **context,
                )
            )

    return len(cluster_arns), tasks


def collect_region(
    session: boto3.Session,
    account_id: str,
    account_name: str,
    region: str,
    errors: ErrorCollector | None = None,
    **client_options: Any,
) -> RegionScanResult:
    """(계정, 리전) 하나의 EC2/ECS 수집

    예외를 던지지 않으며, 실패한 호출은 빈 데이터로 채워집니다.
    """
    instances = collect_ec2_instances(session, account_id, account_name, region, errors, **client_options)
    cluster_count, tasks = collect_ecs_tasks(session, account_id, account_name, region, errors, **client_options)

    result = RegionScanResult(
        account_id=account_id,
        region=region,
        instances=instances,
        cluster_count=cluster_count,
        tasks=tasks,
    )
    if not result.is_empty:
        logger.info(
            f"[{account_id}/{region}] EC2 {len(instances)}개, "
            f"ECS 클러스터 {cluster_count}개, Fargate 태스크 {len(result.running_fargate_tasks)}개"
        )
    return result
