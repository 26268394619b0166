from __future__ import annotations

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from splitledger.config import get_settings
from splitledger.ledger.client import LedgerClient, LedgerError
from splitledger.logging import get_logger
from splitledger.services.balances import reconcile_groups, summarize_groups
from splitledger.services.errors import SplitLedgerError
from splitledger.services.summary import amount_label
from splitledger.state import UserStateManager


async def setup_scheduler(bot: Bot, ledger: LedgerClient, users: UserStateManager) -> AsyncIOScheduler:
    settings = get_settings()

    scheduler = AsyncIOScheduler(timezone=settings.tz)
    scheduler.add_job(
        _reminder_job,
        IntervalTrigger(hours=settings.reminder_interval_hours),
        kwargs={"bot": bot, "ledger": ledger, "users": users},
    )
    scheduler.start()
    return scheduler


async def _reminder_job(bot: Bot, ledger: LedgerClient, users: UserStateManager) -> None:
    log = get_logger(__name__)

    for tg_id, address in users.linked_users().items():
        try:
            overviews = reconcile_groups(await ledger.get_groups(address), address)
        except (LedgerError, SplitLedgerError) as exc:
            log.warning("reminder.failed", tg_id=tg_id, stage="fetch", error=str(exc))
            continue

        totals = summarize_groups(overviews)
        if totals.owed_by_you <= 0:
            continue

        try:
            await bot.send_message(
                tg_id,
                f"Напоминание: вы должны {amount_label(totals.owed_by_you)}. Подробности: /groups",
            )
        except TelegramAPIError as exc:
            log.warning("reminder.failed", tg_id=tg_id, stage="send", error=str(exc))
            continue
        log.info("reminder.sent", tg_id=tg_id, owed_by_you=totals.owed_by_you)
