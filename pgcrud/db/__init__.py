"""
pgcrud.db
=========

Optional pool lifecycle helpers. Executors accept any pool or connection;
this package only offers a shared one opened from settings.
"""
from pgcrud.db.pool import init_pool, get_pool, close_pool, get_pool_stats

__all__ = ["init_pool", "get_pool", "close_pool", "get_pool_stats"]
