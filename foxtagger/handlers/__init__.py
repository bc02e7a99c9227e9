"""
Host entry points for FoxTagger.

Cron jobs, frontend RPC calls and the transaction insight hook.
"""

from foxtagger.handlers.cronjob import CronjobDispatcher, UnsupportedJobError
from foxtagger.handlers.rpc import InvalidParamsError, MethodNotFoundError, RpcDispatcher
from foxtagger.handlers.transaction import get_details, on_transaction

__all__ = [
    "CronjobDispatcher",
    "UnsupportedJobError",
    "InvalidParamsError",
    "MethodNotFoundError",
    "RpcDispatcher",
    "get_details",
    "on_transaction",
]
