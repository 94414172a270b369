"""Supabase client for the order desk backend."""

import logging
from functools import lru_cache
from supabase import create_client, Client
from ..config import settings


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logging.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
        return client
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None


# Tables used by the order desk:
#
#   routes     (id, name, is_active, created_at)
#   users      (id, username, display_name, role)
#   customers  (id, name, route_id, sales_executive, standard_unit_price,
#               premium_unit_price, phone, created_at, updated_at)
#   orders     (id, date, customer_id, route_id, sales_executive, vehicle,
#               standard_qty, premium_qty, created_by, created_by_username,
#               created_at, updated_at)
#
# Select with filters
# result = client.table('orders') \
#     .select('*') \
#     .eq('sales_executive', 'ravi') \
#     .gte('date', '2025-01-05T00:00:00.000') \
#     .lte('date', '2025-01-05T23:59:59.999') \
#     .execute()
