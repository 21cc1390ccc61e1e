"""
core/region/availability.py - 계정별 리전 목록 조회

EC2.describe_regions()를 사용하여 계정에서 활성화된 리전을 확인합니다.
옵트인하지 않은 리전은 응답에 포함되지 않으므로 별도 필터링은 하지 않습니다.

조회 실패는 계정 전체를 중단시키지 않습니다.
해당 계정은 빈 리전 목록으로 처리되고, 실패는 ErrorCollector에 기록됩니다.

Usage:
    from core.region.availability import get_available_regions

    regions = get_available_regions(session, "123456789012", errors=errors)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.parallel import ErrorCollector, get_client, try_or_default

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)

# describe_regions 호출에 사용할 리전 (글로벌하게 응답)
DEFAULT_LOOKUP_REGION = "us-east-1"


@dataclass
class RegionInfo:
    """리전 정보

    Attributes:
        region_name: 리전 코드 (예: "ap-northeast-2")
        endpoint: 리전 엔드포인트
        opt_in_status: 옵트인 상태 ("opt-in-not-required", "opted-in")
    """

    region_name: str
    endpoint: str = ""
    opt_in_status: str = "opt-in-not-required"

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> RegionInfo:
        return cls(
            region_name=data.get("RegionName", ""),
            endpoint=data.get("Endpoint", ""),
            opt_in_status=data.get("OptInStatus", "opt-in-not-required"),
        )


def describe_regions(
    session: boto3.Session,
    lookup_region: str = DEFAULT_LOOKUP_REGION,
    **client_options: Any,
) -> list[RegionInfo]:
    """계정에서 활성화된 리전 정보 조회

    Raises:
        ClientError, BotoCoreError: 호출 실패 시 (호출자가 처리)
    """
    ec2 = get_client(session, "ec2", region_name=lookup_region, **client_options)
    response = ec2.describe_regions()
    return [RegionInfo.from_response(r) for r in response.get("Regions", []) if r.get("RegionName")]


def get_available_regions(
    session: boto3.Session,
    account_id: str,
    account_name: str = "",
    errors: ErrorCollector | None = None,
    lookup_region: str = DEFAULT_LOOKUP_REGION,
    **client_options: Any,
) -> list[str]:
    """계정에서 스캔할 리전 코드 목록

    Args:
        session: 계정 한정 boto3 Session
        account_id: AWS 계정 ID (에러 기록용)
        account_name: 계정 이름 (에러 기록용)
        errors: 실패를 기록할 ErrorCollector
        lookup_region: describe_regions를 호출할 리전

    Returns:
        리전 코드 리스트 (조회 실패 시 빈 리스트)
    """
    regions = try_or_default(
        lambda: describe_regions(session, lookup_region, **client_options),
        default=[],
        collector=errors,
        account_id=account_id,
        account_name=account_name,
        region=lookup_region,
        service="ec2",
        operation="describe_regions",
    )

    names = [r.region_name for r in regions]
    logger.debug(f"[{account_id}] 리전 {len(names)}개: {', '.join(names)}")
    return names
