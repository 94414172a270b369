"""Background propagation of customer fields onto their orders.

Orders keep copies of their customer's ``route_id`` and ``sales_executive``.
When an admin changes either field on a customer, the update is written to
the customer synchronously and then copied onto the customer's orders by a
task submitted here.

Contract:

* the HTTP request that triggered the change returns before the task runs,
  so for a short window list queries filtered by executive or route may
  still see the old values on that customer's orders;
* every task is attempted at most once and is never retried;
* failures are logged and never reach the caller of the original update.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from functools import lru_cache
from typing import Any, Callable

from ..config import settings
from ..persistence import orders as order_store

logger = logging.getLogger(__name__)


class PropagationDispatcher:
    """Fire-and-forget task runner backed by a thread pool."""

    def __init__(self, max_workers: int | None = None) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or settings.propagation_workers,
            thread_name_prefix="propagation",
        )
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def dispatch(self, name: str, func: Callable[..., Any], *args: Any) -> Future:
        future = self._executor.submit(func, *args)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(lambda done: self._on_done(name, done))
        return future

    def _on_done(self, name: str, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
        exc = future.exception()
        if exc is not None:
            logger.error(f"Propagation task '{name}' failed: {exc}")
        else:
            logger.info(f"Propagation task '{name}' completed: {future.result()}")

    def drain(self, timeout: float | None = None) -> None:
        """Block until every task dispatched so far has finished."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def shutdown(self, wait_for_tasks: bool = True) -> None:
        self._executor.shutdown(wait=wait_for_tasks)


@lru_cache()
def get_dispatcher() -> PropagationDispatcher:
    return PropagationDispatcher()


def propagate_sales_executive(client: Any, dispatcher: PropagationDispatcher, customer_id: str, username: str) -> Future:
    return dispatcher.dispatch(
        f"orders.sales_executive <- customer {customer_id}",
        order_store.set_customer_field_on_orders,
        client,
        customer_id,
        "sales_executive",
        username,
    )


def propagate_route(client: Any, dispatcher: PropagationDispatcher, customer_id: str, route_id: str) -> Future:
    return dispatcher.dispatch(
        f"orders.route_id <- customer {customer_id}",
        order_store.set_customer_field_on_orders,
        client,
        customer_id,
        "route_id",
        route_id,
    )
