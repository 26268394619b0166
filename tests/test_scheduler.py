import pytest
from aiogram.exceptions import TelegramForbiddenError
from aiogram.methods import SendMessage

from splitledger.ledger.client import LedgerError
from splitledger.ledger.models import Bill, Group
from splitledger.scheduler import _reminder_job
from splitledger.state import UserStateManager

BOB = "0xb0b"
ALICE = "0xa11ce"
CAROL = "0xca401"
DAVE = "0xda4e"


def group_for(debtor: str) -> Group:
    return Group(
        group_id=1,
        admin=BOB,
        members=(BOB, debtor),
        bills=(
            Bill(
                bill_id=1,
                payer=BOB,
                total_amount=100_000_000,
                memo=b"Taxi",
                debtors=(debtor,),
                shares_bp=(10_000,),
                debtors_paid=(0,),
            ),
        ),
    )


class StubLedger:
    def __init__(self, broken: set[str] | None = None) -> None:
        self.broken = broken or set()

    async def get_groups(self, member: str) -> list[Group]:
        if member in self.broken:
            raise LedgerError("Не удалось получить данные из леджера")
        return [group_for(member)]


class StubBot:
    def __init__(self, blocked: set[int] | None = None) -> None:
        self.blocked = blocked or set()
        self.sent: list[tuple[int, str]] = []

    async def send_message(self, chat_id: int, text: str) -> None:
        if chat_id in self.blocked:
            raise TelegramForbiddenError(
                method=SendMessage(chat_id=chat_id, text=text),
                message="Forbidden: bot was blocked by the user",
            )
        self.sent.append((chat_id, text))


def make_users() -> UserStateManager:
    users = UserStateManager()
    users.link_address(1, ALICE)
    users.link_address(2, CAROL)
    users.link_address(3, DAVE)
    return users


@pytest.mark.asyncio
async def test_reminder_reaches_everyone_who_owes():
    bot = StubBot()
    await _reminder_job(bot, StubLedger(), make_users())
    assert [chat_id for chat_id, _ in bot.sent] == [1, 2, 3]
    assert "1.0000 APT" in bot.sent[0][1]


@pytest.mark.asyncio
async def test_blocked_user_does_not_stop_other_reminders():
    bot = StubBot(blocked={1})
    await _reminder_job(bot, StubLedger(), make_users())
    assert [chat_id for chat_id, _ in bot.sent] == [2, 3]


@pytest.mark.asyncio
async def test_ledger_failure_for_one_viewer_is_skipped():
    bot = StubBot()
    await _reminder_job(bot, StubLedger(broken={CAROL}), make_users())
    assert [chat_id for chat_id, _ in bot.sent] == [1, 3]


@pytest.mark.asyncio
async def test_no_reminder_without_debt():
    users = UserStateManager()
    users.link_address(7, BOB)
    bot = StubBot()
    await _reminder_job(bot, StubLedger(), users)
    assert bot.sent == []
