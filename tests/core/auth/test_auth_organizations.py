"""
tests/core/auth/test_auth_organizations.py - 조직 계정 조회 테스트
"""

from unittest.mock import MagicMock

import pytest
from conftest import create_mock_client_error, make_paginator, make_session

from core.auth.organizations import list_accounts, list_active_accounts
from core.exceptions import ConfigError, EmptyOrganizationError, OrganizationAccessError


def _org_client(pages):
    client = MagicMock()
    client.get_paginator.return_value = make_paginator(pages)
    return client


class TestListActiveAccounts:
    """list_active_accounts 테스트"""

    def test_filters_active_and_keeps_order(self):
        client = _org_client(
            [
                {
                    "Accounts": [
                        {"Id": "333333333333", "Name": "c", "Status": "ACTIVE"},
                        {"Id": "111111111111", "Name": "a", "Status": "SUSPENDED"},
                    ]
                },
                {"Accounts": [{"Id": "222222222222", "Name": "b", "Status": "ACTIVE"}]},
            ]
        )

        accounts = list_active_accounts(make_session({"organizations": client}), "ap-southeast-1")

        assert [a.id for a in accounts] == ["333333333333", "222222222222"]
        client.get_paginator.assert_called_once_with("list_accounts")

    def test_no_active_accounts(self):
        """활성 계정이 없으면 EmptyOrganizationError"""
        client = _org_client([{"Accounts": [{"Id": "111111111111", "Status": "SUSPENDED"}]}])

        with pytest.raises(EmptyOrganizationError) as exc_info:
            list_active_accounts(make_session({"organizations": client}))

        assert exc_info.value.total_accounts == 1

    def test_empty_organization(self):
        client = _org_client([{"Accounts": []}])

        with pytest.raises(ConfigError):
            list_active_accounts(make_session({"organizations": client}))

    def test_access_denied_is_fatal(self):
        """조회 실패는 OrganizationAccessError"""
        client = MagicMock()
        client.get_paginator.return_value.paginate.side_effect = create_mock_client_error(
            "AWSOrganizationsNotInUseException"
        )

        with pytest.raises(OrganizationAccessError) as exc_info:
            list_accounts(make_session({"organizations": client}))

        assert exc_info.value.profile == "test-profile"

    def test_with_moto(self, moto_organization):
        session, member_ids = moto_organization

        accounts = list_active_accounts(session, "ap-southeast-1")
        ids = {a.id for a in accounts}

        assert set(member_ids) <= ids
        assert all(a.is_active for a in accounts)

    def test_moto_without_organization(self, moto_session):
        """조직이 없으면 치명적 설정 오류"""
        with pytest.raises(ConfigError):
            list_active_accounts(moto_session, "ap-southeast-1")
