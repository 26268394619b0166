from __future__ import annotations

from typing import Sequence

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from splitledger.services.balances import GroupOverview
from splitledger.state import BALANCES_TAB, BILLS_TAB, MEMBERS_TAB
from splitledger.utils.parse import short_address

TAB_LABELS = {
    BALANCES_TAB: "Балансы",
    BILLS_TAB: "Счета",
    MEMBERS_TAB: "Участники",
}


def _tabs_row(group_id: int, active_tab: str) -> list[InlineKeyboardButton]:
    return [
        InlineKeyboardButton(
            text=f"· {label}" if tab == active_tab else label,
            callback_data=f"tab:{group_id}:{tab}",
        )
        for tab, label in TAB_LABELS.items()
    ]


def groups_keyboard(overviews: Sequence[GroupOverview]) -> InlineKeyboardMarkup:
    rows = [
        [InlineKeyboardButton(text=f"Группа #{overview.group_id}", callback_data=f"tab:{overview.group_id}:{BALANCES_TAB}")]
        for overview in overviews
    ]
    return InlineKeyboardMarkup(inline_keyboard=rows)


def group_keyboard(overview: GroupOverview, active_tab: str) -> InlineKeyboardMarkup:
    rows: list[list[InlineKeyboardButton]] = [_tabs_row(overview.group_id, active_tab)]

    if active_tab == BALANCES_TAB:
        for creditor in overview.user_owes:
            if creditor not in overview.members:
                continue
            rows.append(
                [
                    InlineKeyboardButton(
                        text=f"Погасить долг {short_address(creditor)}",
                        callback_data=f"settle:{overview.group_id}:{overview.members.index(creditor)}",
                    )
                ]
            )
    elif active_tab == BILLS_TAB:
        for bill in overview.bills:
            rows.append(
                [
                    InlineKeyboardButton(
                        text=f"#{bill.bill_id} {bill.memo}"[:40],
                        callback_data=f"bill:{overview.group_id}:{bill.bill_id}",
                    )
                ]
            )

    rows.append([InlineKeyboardButton(text="« К группам", callback_data="groups")])
    return InlineKeyboardMarkup(inline_keyboard=rows)
