"""
tests/core/test_core_config.py - InventoryConfig 테스트
"""

import pytest

from core.config import (
    DEFAULT_ACCOUNT_WORKERS,
    DEFAULT_ORG_REGION,
    DEFAULT_REGION_WORKERS,
    DEFAULT_SESSION_NAME,
    MAX_WORKERS,
    InventoryConfig,
)
from core.exceptions import ConfigError


class TestInventoryConfig:
    """InventoryConfig 기본값 및 검증"""

    def test_defaults(self):
        config = InventoryConfig(profile="org-admin", role_name="InventoryReadOnly")

        assert config.org_region == DEFAULT_ORG_REGION == "ap-southeast-1"
        assert config.session_name == DEFAULT_SESSION_NAME == "EC2ECSInventorySession"
        assert config.account_workers == DEFAULT_ACCOUNT_WORKERS
        assert config.region_workers == DEFAULT_REGION_WORKERS
        assert config.effective_assume_profile == "org-admin"

    def test_profile_required(self):
        with pytest.raises(ConfigError) as exc_info:
            InventoryConfig(profile="", role_name="R")

        assert exc_info.value.config_key == "AWS_PROFILE"

    def test_role_name_required_by_default_template(self):
        with pytest.raises(ConfigError):
            InventoryConfig(profile="org-admin")

    def test_template_without_role_name(self):
        """템플릿에 {role_name}이 없으면 역할 이름 불필요"""
        config = InventoryConfig(profile="org-admin", role_arn_template="arn:aws:iam::{account_id}:role/Fixed")

        assert config.role_arn("111111111111") == "arn:aws:iam::111111111111:role/Fixed"

    def test_template_requires_account_id(self):
        with pytest.raises(ConfigError):
            InventoryConfig(profile="org-admin", role_name="R", role_arn_template="arn:aws:iam::1:role/{role_name}")

    def test_role_arn(self):
        config = InventoryConfig(profile="org-admin", role_name="InventoryReadOnly")

        assert config.role_arn("123456789012") == "arn:aws:iam::123456789012:role/InventoryReadOnly"

    @pytest.mark.parametrize("field_name", ["account_workers", "region_workers"])
    def test_workers_lower_bound(self, field_name):
        with pytest.raises(ConfigError):
            InventoryConfig(profile="org-admin", role_name="R", **{field_name: 0})

    def test_workers_clamped(self):
        config = InventoryConfig(profile="org-admin", role_name="R", account_workers=500, region_workers=101)

        assert config.account_workers == MAX_WORKERS
        assert config.region_workers == MAX_WORKERS

    @pytest.mark.parametrize("field_name", ["connect_timeout", "read_timeout", "max_attempts"])
    def test_timeouts_positive(self, field_name):
        with pytest.raises(ConfigError):
            InventoryConfig(profile="org-admin", role_name="R", **{field_name: 0})

    def test_assume_profile(self):
        config = InventoryConfig(profile="org-admin", assume_profile="master-admin", role_name="R")

        assert config.effective_assume_profile == "master-admin"

    def test_client_options(self):
        config = InventoryConfig(profile="org-admin", role_name="R", region_workers=20, read_timeout=12)

        options = config.client_options()

        assert options["read_timeout"] == 12
        assert options["max_attempts"] == 5
        assert options["max_pool_connections"] == 40


class TestFromEnv:
    """환경 변수에서 생성"""

    def test_from_environ_mapping(self):
        env = {
            "AWS_PROFILE": "org-admin",
            "INVENTORY_ASSUME_PROFILE": "master-admin",
            "AWS_REGION": "us-east-1",
            "INVENTORY_ROLE_NAME": "InventoryReadOnly",
        }

        config = InventoryConfig.from_env(env)

        assert config.profile == "org-admin"
        assert config.assume_profile == "master-admin"
        assert config.org_region == "us-east-1"
        assert config.role_arn("111111111111").endswith(":role/InventoryReadOnly")

    def test_overrides_win(self):
        env = {"AWS_PROFILE": "org-admin", "INVENTORY_ROLE_NAME": "R"}

        config = InventoryConfig.from_env(env, account_workers=1, region_workers=None)

        assert config.account_workers == 1
        assert config.region_workers == DEFAULT_REGION_WORKERS

    def test_missing_profile(self):
        with pytest.raises(ConfigError):
            InventoryConfig.from_env({"INVENTORY_ROLE_NAME": "R"})

    def test_os_environ(self, monkeypatch):
        monkeypatch.setenv("AWS_PROFILE", "env-profile")
        monkeypatch.setenv("INVENTORY_ROLE_ARN_TEMPLATE", "arn:aws:iam::{account_id}:role/Env")

        config = InventoryConfig.from_env()

        assert config.profile == "env-profile"
        assert config.role_arn("111111111111") == "arn:aws:iam::111111111111:role/Env"
