from __future__ import annotations

import json
from html import escape

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from splitledger.config import get_settings
from splitledger.handlers.groups import LINK_HINT, load_overviews
from splitledger.ledger.client import LedgerError
from splitledger.ledger.payloads import (
    EntryFunctionPayload,
    add_expense_payload,
    create_group_payload,
    settle_debt_payload,
)
from splitledger.logging import get_logger
from splitledger.services.balances import GroupOverview, find_group
from splitledger.services.errors import SplitLedgerError
from splitledger.services.settlement import plan_settlement
from splitledger.services.split import split_amount
from splitledger.services.summary import format_allocation_preview, format_settle_plan
from splitledger.services.weights import MemberWeight, SplitMode, compute_allocation, split_equally
from splitledger.state import state
from splitledger.utils.parse import normalize_address, parse_amount, parse_weight_tokens

expenses_router = Router()

log = get_logger(__name__)

ADD_EXPENSE_USAGE = (
    "Использование: /addexpense &lt;group_id&gt; | &lt;сумма&gt; | &lt;описание&gt; "
    "[| shares|percent | адрес=значение ...]\n"
    "Без весов сумма делится поровну между всеми участниками группы."
)


def render_payload(payload: EntryFunctionPayload) -> str:
    body = json.dumps(payload.as_dict(), ensure_ascii=False, indent=2)
    return f"Подпишите транзакцию в кошельке:\n<pre>{escape(body)}</pre>"


def build_member_weights(
    members: list[str],
    mode: SplitMode,
    raw_weights: str,
) -> list[MemberWeight]:
    if not raw_weights.strip():
        return split_equally([MemberWeight(address=member) for member in members], mode)

    weights = dict(parse_weight_tokens(raw_weights.split()))
    unknown = [address for address in weights if address not in members]
    if unknown:
        raise ValueError(f"Не участники группы: {', '.join(unknown)}")
    return [
        MemberWeight(address=member, selected=member in weights, value=weights.get(member, 0))
        for member in members
    ]


@expenses_router.message(Command("addexpense"))
async def cmd_addexpense(message: Message) -> None:
    user = message.from_user
    if not user or not message.text:
        return
    address = state.get_address(user.id)
    if not address:
        await message.answer(LINK_HINT)
        return

    parts = [part.strip() for part in message.text.replace("/addexpense", "", 1).split("|")]
    if len(parts) < 3:
        await message.answer(ADD_EXPENSE_USAGE)
        return

    try:
        group_id = int(parts[0])
    except ValueError:
        await message.answer("Некорректный group_id")
        return

    mode_text = parts[3].lower() if len(parts) > 3 and parts[3] else SplitMode.SHARES.value
    try:
        mode = SplitMode(mode_text)
    except ValueError:
        await message.answer("Режим разбивки: shares или percent")
        return

    settings = get_settings()
    try:
        total_amount = parse_amount(parts[1])
        overview = find_group(await load_overviews(address), group_id)
        members = build_member_weights(list(overview.members), mode, parts[4] if len(parts) > 4 else "")
        allocation = compute_allocation(members, mode)
        payload = add_expense_payload(settings.module_id, group_id, total_amount, parts[2], allocation)
        shares = split_amount(total_amount, allocation.shares_bp)
    except LedgerError as exc:
        await message.answer(str(exc))
        return
    except ValueError as exc:
        # Сюда же попадают NoValidWeights, InvalidSplitSum и InvalidAmount.
        await message.answer(escape(str(exc)))
        return

    log.info("expense.payload", user_id=user.id, group_id=group_id, total_amount=total_amount)
    await message.answer(f"{format_allocation_preview(allocation, shares)}\n\n{render_payload(payload)}")


@expenses_router.message(Command("creategroup"))
async def cmd_creategroup(message: Message) -> None:
    if not message.text:
        return
    members = message.text.split()[1:]
    try:
        payload = create_group_payload(get_settings().module_id, members)
    except SplitLedgerError as exc:
        await message.answer(str(exc))
        return
    await message.answer(render_payload(payload))


def render_settlement(overview: GroupOverview, address: str, creditor: str, bill_ids: list[int] | None) -> str:
    plan = plan_settlement(overview, address, creditor, bill_ids)
    payload = settle_debt_payload(get_settings().module_id, plan)
    return f"{format_settle_plan(plan)}\n\n{render_payload(payload)}"


@expenses_router.message(Command("settle"))
async def cmd_settle(message: Message) -> None:
    user = message.from_user
    if not user or not message.text:
        return
    address = state.get_address(user.id)
    if not address:
        await message.answer(LINK_HINT)
        return

    parts = message.text.split()
    if len(parts) < 3:
        await message.answer("Использование: /settle &lt;group_id&gt; &lt;адрес кредитора&gt; [bill_id ...]")
        return

    try:
        group_id = int(parts[1])
        bill_ids = [int(part) for part in parts[3:]] or None
    except ValueError:
        await message.answer("group_id и bill_id должны быть числами")
        return

    try:
        overview = find_group(await load_overviews(address), group_id)
        text = render_settlement(overview, address, normalize_address(parts[2]), bill_ids)
    except (LedgerError, SplitLedgerError) as exc:
        await message.answer(str(exc))
        return
    await message.answer(text)


@expenses_router.callback_query(F.data.startswith("settle:"))
async def cb_settle(callback: CallbackQuery) -> None:
    user = callback.from_user
    address = state.get_address(user.id)
    if not address:
        await callback.answer("Адрес не привязан", show_alert=True)
        return

    _, raw_group_id, raw_member_idx = callback.data.split(":", 2)
    try:
        group_id = int(raw_group_id)
        overview = find_group(await load_overviews(address), group_id)
        creditor = overview.members[int(raw_member_idx)]
        text = render_settlement(overview, address, creditor, None)
    except (LedgerError, SplitLedgerError) as exc:
        await callback.answer(str(exc), show_alert=True)
        return
    except (ValueError, IndexError):
        await callback.answer("Устаревшая кнопка, откройте группу заново", show_alert=True)
        return

    await callback.message.answer(text)
    await callback.answer()
