from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, InlineKeyboardButton, InlineKeyboardMarkup, Message

from splitledger.keyboards import group_keyboard, groups_keyboard
from splitledger.ledger.client import LedgerError, get_global_ledger
from splitledger.logging import get_logger
from splitledger.services.balances import (
    GroupOverview,
    bill_status,
    find_bill,
    find_group,
    reconcile_groups,
    summarize_groups,
)
from splitledger.services.errors import SplitLedgerError
from splitledger.services.summary import (
    format_bill_list,
    format_bill_status,
    format_dashboard,
    format_group_balances,
    format_group_card,
    format_members,
)
from splitledger.state import BALANCES_TAB, BILLS_TAB, MEMBERS_TAB, TABS, state

groups_router = Router()

log = get_logger(__name__)

LINK_HINT = "Сначала привяжите адрес кошелька: /link &lt;адрес&gt;"


async def load_overviews(address: str) -> list[GroupOverview]:
    # Каждый раз берём свежий срез из леджера и пересчитываем всё с нуля.
    groups = await get_global_ledger().get_groups(address)
    return reconcile_groups(groups, address)


def render_group(overview: GroupOverview, viewer: str, tab: str) -> str:
    if tab == BILLS_TAB:
        return format_bill_list(overview.bills, viewer)
    if tab == MEMBERS_TAB:
        return format_members(overview, viewer)
    return format_group_balances(overview, viewer)


def render_dashboard(overviews: list[GroupOverview]) -> str:
    if not overviews:
        return "У вас пока нет групп. Создайте первую: /creategroup &lt;адрес1&gt; &lt;адрес2&gt; ..."
    cards = [format_group_card(overview) for overview in overviews]
    return "\n\n".join([format_dashboard(summarize_groups(overviews)), *cards])


@groups_router.message(Command("groups"))
async def cmd_groups(message: Message) -> None:
    user = message.from_user
    if not user:
        return
    address = state.get_address(user.id)
    if not address:
        await message.answer(LINK_HINT)
        return

    try:
        overviews = await load_overviews(address)
    except (LedgerError, SplitLedgerError) as exc:
        await message.answer(str(exc))
        return

    log.info("groups.view", user_id=user.id, groups=len(overviews))
    await message.answer(render_dashboard(overviews), reply_markup=groups_keyboard(overviews))


@groups_router.message(Command("group"))
async def cmd_group(message: Message) -> None:
    user = message.from_user
    if not user or not message.text:
        return
    address = state.get_address(user.id)
    if not address:
        await message.answer(LINK_HINT)
        return

    parts = message.text.split()
    if len(parts) == 1:
        # Без номера открываем последнюю группу на той же вкладке.
        group_id = state.get_current_group(user.id)
        tab = state.get_tab(user.id)
        if group_id is None:
            await message.answer("Использование: /group &lt;group_id&gt;")
            return
    elif len(parts) == 2 and parts[1].isdigit():
        group_id = int(parts[1])
        tab = BALANCES_TAB
    else:
        await message.answer("Использование: /group &lt;group_id&gt;")
        return

    try:
        overview = find_group(await load_overviews(address), group_id)
    except (LedgerError, SplitLedgerError) as exc:
        await message.answer(str(exc))
        return

    state.set_current_group(user.id, group_id)
    state.set_tab(user.id, tab)
    await message.answer(
        render_group(overview, address, tab),
        reply_markup=group_keyboard(overview, tab),
    )


@groups_router.callback_query(F.data == "groups")
async def cb_groups(callback: CallbackQuery) -> None:
    user = callback.from_user
    address = state.get_address(user.id)
    if not address:
        await callback.answer("Адрес не привязан", show_alert=True)
        return

    try:
        overviews = await load_overviews(address)
    except (LedgerError, SplitLedgerError) as exc:
        await callback.answer(str(exc), show_alert=True)
        return

    await callback.message.edit_text(render_dashboard(overviews), reply_markup=groups_keyboard(overviews))
    await callback.answer()


@groups_router.callback_query(F.data.startswith("tab:"))
async def cb_tab(callback: CallbackQuery) -> None:
    user = callback.from_user
    address = state.get_address(user.id)
    if not address:
        await callback.answer("Адрес не привязан", show_alert=True)
        return

    _, raw_group_id, tab = callback.data.split(":", 2)
    if tab not in TABS:
        tab = BALANCES_TAB

    try:
        overview = find_group(await load_overviews(address), int(raw_group_id))
    except (LedgerError, SplitLedgerError) as exc:
        await callback.answer(str(exc), show_alert=True)
        return

    state.set_current_group(user.id, overview.group_id)
    state.set_tab(user.id, tab)
    await callback.message.edit_text(
        render_group(overview, address, tab),
        reply_markup=group_keyboard(overview, tab),
    )
    await callback.answer()


@groups_router.callback_query(F.data.startswith("bill:"))
async def cb_bill(callback: CallbackQuery) -> None:
    user = callback.from_user
    address = state.get_address(user.id)
    if not address:
        await callback.answer("Адрес не привязан", show_alert=True)
        return

    _, raw_group_id, raw_bill_id = callback.data.split(":", 2)
    try:
        overview = find_group(await load_overviews(address), int(raw_group_id))
        bill = find_bill(overview, int(raw_bill_id))
    except (LedgerError, SplitLedgerError) as exc:
        await callback.answer(str(exc), show_alert=True)
        return

    status = bill_status(bill, overview.members, address)
    keyboard = InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text="« К счетам", callback_data=f"tab:{overview.group_id}:{BILLS_TAB}")]
        ]
    )
    await callback.message.edit_text(format_bill_status(bill, status, address), reply_markup=keyboard)
    await callback.answer()
