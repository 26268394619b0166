from splitledger.handlers.basic import basic_router
from splitledger.handlers.expenses import expenses_router
from splitledger.handlers.groups import groups_router

__all__ = ["basic_router", "expenses_router", "groups_router"]
