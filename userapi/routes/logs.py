from __future__ import annotations

from sqlite3 import Connection

from fastapi import APIRouter, Depends, Query

from ..db import get_db
from ..logs import search_logs

router = APIRouter()


@router.get("/api/logs/search")
def api_logs_search(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=200),
    action: str | None = None,
    query: str | None = None,
    user_id: int | None = None,
    result: str | None = Query(None, pattern=r"^(OK|ERROR)$"),
    conn: Connection = Depends(get_db),
):
    total, items = search_logs(conn, query, action, user_id, result, page, size)
    return {"total": total, "items": items}
