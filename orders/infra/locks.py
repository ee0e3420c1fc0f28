"""
Per-order locks using PostgreSQL advisory locks.
"""
from contextlib import contextmanager

from django.db import connection


@contextmanager
def order_lock(order_id: str):
    """
    Acquire transaction-scoped advisory lock on an order.

    Must be entered inside transaction.atomic(); the lock is released when
    the transaction ends. On backends without advisory locks this is a
    no-op and the repository version check is the only guard.

    Usage:
        with transaction.atomic(), order_lock(order_id):
            # load, mutate, save
            pass
    """
    if connection.vendor == "postgresql":
        with connection.cursor() as cursor:
            cursor.execute(
                "SELECT pg_advisory_xact_lock(hashtext(%s)::bigint)",
                [str(order_id)],
            )
    yield
