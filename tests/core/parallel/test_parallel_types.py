"""
tests/core/parallel/test_parallel_types.py - core/parallel/types.py 테스트
"""

from core.parallel.types import ErrorCategory, ParallelExecutionResult, TaskError, TaskResult


def _error(identifier="111111111111", region="ap-southeast-1", category=ErrorCategory.ACCESS_DENIED, code="AccessDenied"):
    return TaskError(identifier=identifier, region=region, category=category, error_code=code, message="denied")


class TestTaskError:
    """TaskError 테스트"""

    def test_str(self):
        """문자열 표현"""
        assert str(_error()) == "[111111111111/ap-southeast-1] AccessDenied: denied"

    def test_retryable_categories(self):
        """재시도 가능 카테고리"""
        assert _error(category=ErrorCategory.THROTTLING).is_retryable() is True
        assert _error(category=ErrorCategory.NETWORK).is_retryable() is True
        assert _error(category=ErrorCategory.TIMEOUT).is_retryable() is True
        assert _error(category=ErrorCategory.ACCESS_DENIED).is_retryable() is False

    def test_to_dict(self):
        """딕셔너리 변환"""
        data = _error().to_dict()

        assert data["category"] == "access_denied"
        assert data["error_code"] == "AccessDenied"
        assert data["retries"] == 0
        assert "timestamp" in data


class TestTaskResult:
    """TaskResult 테스트"""

    def test_str_success(self):
        result = TaskResult(identifier="111111111111", region="us-east-1", success=True, duration_ms=100.4)
        assert str(result) == "[111111111111/us-east-1] OK (100ms)"

    def test_str_failure(self):
        result = TaskResult(identifier="111111111111", region="us-east-1", success=False, error=_error())
        assert "FAIL" in str(result)


class TestParallelExecutionResult:
    """ParallelExecutionResult 테스트"""

    def _result(self):
        return ParallelExecutionResult(
            results=(
                TaskResult("a", "r1", True, data=[1, 2], duration_ms=10),
                TaskResult("b", "r1", True, data=None, duration_ms=5),
                TaskResult("c", "r2", True, data=3, duration_ms=5),
                TaskResult("d", "r2", False, error=_error("d", "r2"), duration_ms=1),
                TaskResult(
                    "e",
                    "r3",
                    False,
                    error=_error("e", "r3", ErrorCategory.THROTTLING, "Throttling"),
                    duration_ms=1,
                ),
            )
        )

    def test_counts(self):
        """성공/실패 개수"""
        result = self._result()

        assert result.total_count == 5
        assert result.success_count == 3
        assert result.error_count == 2

    def test_get_data_excludes_none(self):
        """None 데이터는 제외"""
        assert self._result().get_data() == [[1, 2], 3]

    def test_errors_by_category(self):
        """카테고리별 그룹핑"""
        grouped = self._result().get_errors_by_category()

        assert len(grouped[ErrorCategory.ACCESS_DENIED]) == 1
        assert len(grouped[ErrorCategory.THROTTLING]) == 1

    def test_error_summary(self):
        """에러 요약 문자열"""
        summary = self._result().get_error_summary()

        assert summary.startswith("총 2개 작업 실패")
        assert "[access_denied]" in summary
        assert "d/r2" in summary

    def test_empty(self):
        """빈 결과"""
        result = ParallelExecutionResult()

        assert result.total_count == 0
        assert result.has_any_failure() is False
        assert result.get_error_summary() == "실패한 작업 없음"

    def test_failures_only(self):
        """모두 실패"""
        result = ParallelExecutionResult(results=(TaskResult("a", "r", False, error=_error()),))

        assert result.success_count == 0
        assert result.has_any_failure() is True
        assert result.get_data() == []
