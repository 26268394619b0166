from splitledger.state import BALANCES_TAB, BILLS_TAB, UserStateManager


def test_last_group_and_tab_are_remembered():
    users = UserStateManager()
    assert users.get_current_group(1) is None
    assert users.get_tab(1) == BALANCES_TAB

    users.set_current_group(1, 7)
    users.set_tab(1, BILLS_TAB)
    assert users.get_current_group(1) == 7
    assert users.get_tab(1) == BILLS_TAB
    assert users.get_current_group(2) is None


def test_clear_view_keeps_wallet_link():
    users = UserStateManager()
    users.link_address(1, "0xa11ce")
    users.set_current_group(1, 7)
    users.set_tab(1, BILLS_TAB)

    users.clear_view(1)
    assert users.get_current_group(1) is None
    assert users.get_tab(1) == BALANCES_TAB
    assert users.get_address(1) == "0xa11ce"

    users.clear_user(1)
    assert users.get_address(1) is None
    assert users.linked_users() == {}
