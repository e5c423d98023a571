from __future__ import annotations

from fastapi import Request

from people.core.database import DatabaseManager


async def get_db(request: Request) -> DatabaseManager:
    return request.app.state.database
