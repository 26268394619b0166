from __future__ import annotations

import asyncio

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from splitledger.config import get_settings
from splitledger.handlers import basic_router, expenses_router, groups_router
from splitledger.ledger.client import LedgerClient, set_global_ledger
from splitledger.logging import configure_logging, get_logger
from splitledger.scheduler import setup_scheduler
from splitledger.state import state


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    bot = Bot(token=settings.bot_token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    dp = Dispatcher()
    ledger = LedgerClient(settings.ledger_node_url, settings.module_id, timeout=settings.ledger_timeout)
    await ledger.connect()

    dp.include_router(basic_router)
    dp.include_router(groups_router)
    dp.include_router(expenses_router)

    set_global_ledger(ledger)

    scheduler = await setup_scheduler(bot, ledger, state)

    log = get_logger(__name__)
    log.info("bot.start")
    try:
        await dp.start_polling(bot)
    finally:
        scheduler.shutdown(wait=False)
        await ledger.close()
        await bot.session.close()
        log.info("bot.stop")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
