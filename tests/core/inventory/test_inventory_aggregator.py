"""
tests/core/inventory/test_inventory_aggregator.py - Tally 집계 테스트
"""

import random
import threading

import pytest

from core.auth.types import AccountInfo
from core.inventory.aggregator import AccountSummary, InventoryResult, Tally
from core.inventory.types import FargateTaskRecord, InstanceRecord, RegionScanResult, Totals


def _region(account_id, region, instances=(), clusters=0, tasks=()):
    return RegionScanResult(
        account_id=account_id,
        region=region,
        instances=list(instances),
        cluster_count=clusters,
        tasks=list(tasks),
    )


def _fargate(cpu, status="RUNNING", launch_type="FARGATE"):
    return FargateTaskRecord(task_arn=f"arn:{random.random()}", launch_type=launch_type, last_status=status, cpu=cpu)


class TestTally:
    """Tally 테스트"""

    def test_add_instance(self):
        tally = Tally()
        for instance_type in ["t2.micro", "t2.micro", "t2.nano"]:
            tally.add_instance(InstanceRecord(instance_type, 1, 1))

        counts, totals = tally.snapshot()

        assert counts.to_dict() == {"t2.micro": 2, "t2.nano": 1}
        assert totals.ec2_instances == 3
        assert totals.ec2_vcpus == 3

    def test_add_region(self):
        tally = Tally()
        tally.add_region(
            _region(
                "111111111111",
                "us-east-1",
                instances=[InstanceRecord("m5.large", 1, 2)],
                clusters=2,
                tasks=[_fargate("512"), _fargate("512"), _fargate("4096", status="STOPPED"), _fargate("256", launch_type="EC2")],
            )
        )

        totals = tally.totals

        assert totals.ec2_vcpus == 2
        assert totals.ecs_clusters == 2
        assert totals.ecs_tasks == 2
        assert totals.ecs_cpu_units == 1024
        assert totals.ecs_vcpus == 1
        assert totals.total_vcpus == 3

    def test_invalid_cpu_counts_task_but_not_units(self):
        tally = Tally()
        tally.add_region(_region("111111111111", "us-east-1", clusters=1, tasks=[_fargate("bad"), _fargate(None)]))

        assert tally.totals.ecs_tasks == 2
        assert tally.totals.ecs_cpu_units == 0

    def test_cluster_without_tasks_counts(self):
        tally = Tally()
        tally.add_region(_region("111111111111", "us-east-1", clusters=3))

        assert tally.totals.ecs_clusters == 3
        assert tally.totals.ecs_tasks == 0

    def test_merge(self):
        a, b, org = Tally(), Tally(), Tally()
        a.add_region(_region("1", "r", instances=[InstanceRecord("t3.micro", 1, 2)], clusters=1, tasks=[_fargate("512")]))
        b.add_region(_region("2", "r", instances=[InstanceRecord("t3.micro", 1, 2)], clusters=1, tasks=[_fargate("512")]))

        org.merge(a)
        org.merge(b)

        counts, totals = org.snapshot()
        assert counts.to_dict() == {"t3.micro": 2}
        assert totals == Totals(ec2_instances=2, ec2_vcpus=4, ecs_clusters=2, ecs_tasks=2, ecs_cpu_units=1024)
        # 계정별로는 0 vCPU씩이지만 조직 합계에서는 1 vCPU
        assert a.totals.ecs_vcpus == 0
        assert totals.ecs_vcpus == 1

    def test_merge_into_self_rejected(self):
        tally = Tally()

        with pytest.raises(ValueError):
            tally.merge(tally)

    def test_snapshot_is_copy(self):
        tally = Tally()
        tally.add_instance(InstanceRecord("t2.micro", 1, 1))

        counts, totals = tally.snapshot()
        counts.add("t2.micro")
        totals.ec2_instances = 99

        assert tally.counts.get("t2.micro") == 1
        assert tally.totals.ec2_instances == 1


class TestOrganizationInvariant:
    """조직 합계 == 계정 합계의 합"""

    def test_org_equals_sum_of_accounts(self):
        rng = random.Random(42)
        types = ["t3.micro", "m5.large", "c5.xlarge", "r5.2xlarge"]
        accounts = []
        for i in range(6):
            tally = Tally()
            for r in range(4):
                tally.add_region(
                    _region(
                        str(i),
                        f"region-{r}",
                        instances=[
                            InstanceRecord(rng.choice(types), rng.randint(0, 8), rng.choice([1, 2]))
                            for _ in range(rng.randint(0, 5))
                        ],
                        clusters=rng.randint(0, 3),
                        tasks=[_fargate(str(rng.choice([256, 512, 1024, 2048]))) for _ in range(rng.randint(0, 4))],
                    )
                )
            accounts.append(tally)

        org = Tally()
        threads = [threading.Thread(target=org.merge, args=(t,)) for t in accounts]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        expected = Totals()
        expected_counts = {}
        for tally in accounts:
            counts, totals = tally.snapshot()
            expected.add(totals)
            for k, v in counts.sorted_items():
                expected_counts[k] = expected_counts.get(k, 0) + v

        assert org.totals == expected
        assert org.counts.to_dict() == dict(sorted(expected_counts.items()))

    def test_concurrent_add_region(self):
        """여러 리전 워커가 동시에 반영해도 누락 없음"""
        tally = Tally()
        result = _region("1", "r", instances=[InstanceRecord("t3.micro", 1, 2)], clusters=1, tasks=[_fargate("256")])

        threads = [threading.Thread(target=tally.add_region, args=(result,)) for _ in range(50)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        totals = tally.totals
        assert totals.ec2_instances == 50
        assert totals.ec2_vcpus == 100
        assert totals.ecs_clusters == 50
        assert totals.ecs_cpu_units == 50 * 256


class TestSummaries:
    def test_account_summary_defaults(self):
        summary = AccountSummary(account=AccountInfo(id="111111111111"))

        assert summary.account_id == "111111111111"
        assert summary.skipped is False
        assert summary.tally.totals == Totals()

    def test_inventory_result_partition(self):
        ok = AccountSummary(account=AccountInfo(id="111111111111"))
        skipped = AccountSummary(account=AccountInfo(id="222222222222"), skipped=True, reason="AccessDenied")

        result = InventoryResult(accounts=[ok, skipped])

        assert result.scanned_accounts == [ok]
        assert result.skipped_accounts == [skipped]
