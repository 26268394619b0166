from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from splitledger.logging import get_logger
from splitledger.state import state
from splitledger.utils.parse import is_valid_address, normalize_address, short_address

basic_router = Router()

log = get_logger(__name__)

HELP_TEXT = (
    "<b>📖 Справка по командам</b>\n\n"
    "<b>Кошелёк:</b>\n"
    "/link &lt;адрес&gt; - привязать адрес кошелька\n"
    "/unlink - отвязать адрес\n\n"
    "<b>Группы:</b>\n"
    "/groups - все группы и общий баланс\n"
    "/group [group_id] - балансы, счета и участники группы (без номера откроется последняя)\n"
    "/creategroup &lt;адрес1&gt; &lt;адрес2&gt; ... - создать группу\n\n"
    "<b>Расходы:</b>\n"
    "/addexpense &lt;group_id&gt; | &lt;сумма&gt; | &lt;описание&gt; [| shares|percent | адрес=значение ...]\n"
    "/settle &lt;group_id&gt; &lt;адрес кредитора&gt; [bill_id ...] - погасить долг\n\n"
    "Бот готовит транзакции, подписываете их вы в своём кошельке."
)


@basic_router.message(CommandStart())
async def cmd_start(message: Message) -> None:
    user = message.from_user
    if not user:
        return

    state.clear_view(user.id)
    address = state.get_address(user.id)
    linked = (
        f"Привязан адрес {short_address(address)}."
        if address
        else "Привяжите адрес кошелька командой /link &lt;адрес&gt;."
    )
    await message.answer(
        f"👋 Привет, {user.first_name}!\n\n"
        "Я <b>SplitLedger</b> — покажу, кто кому сколько должен по общим счетам.\n\n"
        f"{linked}\n\n{HELP_TEXT}"
    )


@basic_router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await message.answer(HELP_TEXT)


@basic_router.message(Command("link"))
async def cmd_link(message: Message) -> None:
    user = message.from_user
    if not user or not message.text:
        return

    parts = message.text.split()
    if len(parts) != 2 or not is_valid_address(parts[1]):
        await message.answer("Использование: /link 0x&lt;адрес кошелька&gt;")
        return

    address = normalize_address(parts[1])
    state.link_address(user.id, address)
    log.info("wallet.linked", user_id=user.id, address=address)
    await message.answer(f"Адрес {short_address(address)} привязан. Смотрите балансы: /groups")


@basic_router.message(Command("unlink"))
async def cmd_unlink(message: Message) -> None:
    user = message.from_user
    if not user:
        return
    state.clear_user(user.id)
    await message.answer("Адрес отвязан.")
