"""Состояние пользователей бота: привязанные адреса и открытая группа."""

from __future__ import annotations

from typing import Optional

BALANCES_TAB = "balances"
BILLS_TAB = "bills"
MEMBERS_TAB = "members"

TABS = (BALANCES_TAB, BILLS_TAB, MEMBERS_TAB)


class UserStateManager:
    def __init__(self) -> None:
        self._addresses: dict[int, str] = {}
        self._current_group: dict[int, int] = {}
        self._active_tab: dict[int, str] = {}

    def link_address(self, user_id: int, address: str) -> None:
        self._addresses[user_id] = address

    def get_address(self, user_id: int) -> Optional[str]:
        return self._addresses.get(user_id)

    def linked_users(self) -> dict[int, str]:
        return dict(self._addresses)

    def set_current_group(self, user_id: int, group_id: int) -> None:
        self._current_group[user_id] = group_id

    def get_current_group(self, user_id: int) -> Optional[int]:
        return self._current_group.get(user_id)

    def set_tab(self, user_id: int, tab: str) -> None:
        self._active_tab[user_id] = tab

    def get_tab(self, user_id: int) -> str:
        return self._active_tab.get(user_id, BALANCES_TAB)

    def clear_view(self, user_id: int) -> None:
        self._current_group.pop(user_id, None)
        self._active_tab.pop(user_id, None)

    def clear_user(self, user_id: int) -> None:
        self.clear_view(user_id)
        self._addresses.pop(user_id, None)


state = UserStateManager()
