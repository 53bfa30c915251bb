"""Wake route: authenticate and push a wake command to a device."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from wakelink.api.deps import get_dispatcher
from wakelink.models import WakeOutcome, WakeRequest
from wakelink.wake.dispatcher import WakeDispatcher

router = APIRouter(tags=["wake"])

# outcome -> (HTTP status, message)
OUTCOME_RESPONSES: dict[WakeOutcome, tuple[int, str]] = {
    WakeOutcome.DISPATCHED: (status.HTTP_200_OK, "Wake command sent"),
    WakeOutcome.UNAUTHORIZED: (status.HTTP_401_UNAUTHORIZED, "Incorrect password"),
    WakeOutcome.DEVICE_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Device not found"),
    WakeOutcome.DEVICE_OFFLINE: (status.HTTP_404_NOT_FOUND, "Device offline"),
    WakeOutcome.DELIVERY_FAILED: (
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to send wake command",
    ),
}


class WakeResponse(BaseModel):
    outcome: WakeOutcome
    detail: str


@router.post("/wake", response_model=WakeResponse)
async def wake_device(
    body: WakeRequest,
    dispatcher: WakeDispatcher = Depends(get_dispatcher),
) -> JSONResponse:
    outcome = await dispatcher.dispatch(body)
    status_code, detail = OUTCOME_RESPONSES[outcome]
    return JSONResponse(
        status_code=status_code,
        content=WakeResponse(outcome=outcome, detail=detail).model_dump(mode="json"),
    )
