"""
Action API Endpoints.

The spreadsheet endpoint speaks one URL with action dispatch:
- GET  /?action=<read action>
- POST /  with body {"action": ..., "data": ...}

`/exec` is accepted as well so clients configured with an Apps Script style
URL work unchanged.
"""

import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from api.models import ActionRequest
from domain.actions import Action
from services.sheet_service import SheetBackend

logger = logging.getLogger(__name__)

router = APIRouter()


def get_backend(request: Request) -> SheetBackend:
    return request.app.state.backend


def _dispatch(backend: SheetBackend, action_name: Optional[str], data: Optional[dict]) -> JSONResponse:
    action = Action.parse(action_name)
    if action is None:
        return JSONResponse({"error": "Invalid action"})

    try:
        result = backend.execute(action, data)
    except Exception as e:
        logger.exception(f"Action {action.value} failed")
        return JSONResponse({"error": f"Failed to {action.value}: {e}"}, status_code=500)

    return JSONResponse(result)


@router.get("/", summary="Read action")
@router.get("/exec", include_in_schema=False)
def read_action(request: Request, action: Optional[str] = None):
    """
    Answer a read action (`getProducts`, `getCustomers`, `getSales`).

    Write actions need a POST body and are rejected with 400.
    """
    parsed = Action.parse(action)
    if parsed is not None and not parsed.is_read:
        return JSONResponse(
            {"error": f"Action {parsed.value} requires a POST body"},
            status_code=400,
        )
    return _dispatch(get_backend(request), action, None)


@router.post("/", summary="Write action")
@router.post("/exec", include_in_schema=False)
async def write_action(request: Request, action: Optional[str] = None):
    """
    Answer any action sent as a JSON body.

    The body is read as JSON whatever its Content-Type, since browser
    clients often post `text/plain` to avoid a CORS preflight.

    **Example request:**
    ```json
    {"action": "updateCustomer", "data": {"id": "1", "name": "Rahul", "phone": "9876543210"}}
    ```
    """
    raw = await request.body()
    try:
        body: Any = json.loads(raw) if raw else {}
        payload = ActionRequest.model_validate(body)
    except (ValueError, ValidationError) as e:
        return JSONResponse({"error": f"Invalid request body: {e}"}, status_code=400)

    return _dispatch(get_backend(request), payload.action or action, payload.payload())
