from __future__ import annotations

from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from splitledger.ledger.models import Group
from splitledger.ledger.schemas import GroupView
from splitledger.logging import get_logger, ledger_logger

_groups_adapter = TypeAdapter(list[GroupView])


class LedgerError(RuntimeError):
    """Леджер недоступен или вернул что-то неожиданное. Повтор запускает пользователь."""


class LedgerClient:
    def __init__(
        self,
        node_url: str,
        module_id: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._node_url = node_url.rstrip("/")
        self.module_id = module_id
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._log = get_logger(__name__)

    async def connect(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._node_url,
                timeout=self._timeout,
                transport=self._transport,
            )
            self._log.info("ledger.client.created", node_url=self._node_url)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            self._log.info("ledger.client.closed")

    async def view(self, function: str, *arguments: Any) -> list[Any]:
        await self._ensure_client()
        assert self._client
        payload = {
            "function": f"{self.module_id}::{function}",
            "type_arguments": [],
            "arguments": list(arguments),
        }
        ledger_logger.info("ledger.view", function=payload["function"], args=payload["arguments"])
        try:
            response = await self._client.post("/v1/view", json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as exc:
            ledger_logger.warning("ledger.view.failed", function=payload["function"], error=str(exc))
            raise LedgerError("Не удалось получить данные из леджера") from exc
        except ValueError as exc:
            raise LedgerError("Леджер вернул некорректный ответ") from exc

        if not isinstance(body, list):
            raise LedgerError("Леджер вернул некорректный ответ")
        return body

    async def get_groups(self, member: str) -> list[Group]:
        """Все группы участника вместе со счетами: один запрос, один согласованный срез."""
        result = await self.view("get_groups", member)
        if not result:
            return []
        try:
            views = _groups_adapter.validate_python(result[0])
        except ValidationError as exc:
            ledger_logger.warning("ledger.view.invalid", error=str(exc))
            raise LedgerError("Леджер вернул некорректные данные групп") from exc
        return [view.to_model() for view in views]

    async def _ensure_client(self) -> None:
        if self._client is None:
            await self.connect()


_global_ledger: LedgerClient | None = None


def set_global_ledger(ledger: LedgerClient) -> None:
    global _global_ledger
    _global_ledger = ledger


def get_global_ledger() -> LedgerClient:
    if _global_ledger is None:
        raise RuntimeError("Клиент леджера не инициализирован")
    return _global_ledger
