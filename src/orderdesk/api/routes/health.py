"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...db.supabase import get_supabase_client

router = APIRouter(tags=["health"])

CHECKED_TABLES = ("routes", "users", "customers", "orders")


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check the database connection and count the rows of each table."""
    supabase = get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set ORDERDESK_SUPABASE_URL and ORDERDESK_SUPABASE_KEY environment variables.",
        }

    try:
        counts = {}
        for table in CHECKED_TABLES:
            response = supabase.table(table).select("id", count="exact").limit(1).execute()
            counts[table] = response.count or 0
        return {
            "configured": True,
            "connected": True,
            "tables": counts,
            "message": f"Database connected. Found {counts['orders']} orders and {counts['customers']} customers.",
        }
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
