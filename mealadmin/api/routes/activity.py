from typing import Optional

from fastapi import APIRouter, Query, Request

router = APIRouter()


@router.get("/api/activity")
def recent_activity(
    request: Request,
    since: Optional[int] = Query(default=None, description="Return events with id greater than this value"),
):
    """
    Return recent console activity (creates, updates, deletes, store errors).

    Client polling strategy:
        1. First call without 'since' to load the current backlog.
        2. Store 'next_cursor' from the response.
        3. Subsequent polls: /api/activity?since=<next_cursor>
    """
    return request.app.state.activity.get_events(since)
