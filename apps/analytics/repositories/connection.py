# apps/analytics/repositories/connection.py
from django.db import connections
from contextlib import contextmanager


@contextmanager
def optimized_analytics_cursor(alias='default'):
    connection = connections[alias]
    with connection.cursor() as cursor:
        if connection.vendor == 'mysql':
            # Room for in-memory GROUP BY on large partitions
            cursor.execute("SET SESSION tmp_table_size = 268435456")  # 256MB
            cursor.execute("SET SESSION max_heap_table_size = 268435456")
        yield cursor
