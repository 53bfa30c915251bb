"""Device routes: register (upsert) and list."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import AliasChoices, BaseModel, Field, field_validator

from wakelink.api.deps import get_catalog
from wakelink.devices.catalog import DeviceCatalog
from wakelink.errors import PersistError
from wakelink.models import DeviceRecord, is_valid_mac

router = APIRouter(tags=["devices"])


# ---------- Request/Response models ----------


class RegisterRequest(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "esp_id"))
    mac_address: str
    description: str = ""
    password: str

    @field_validator("mac_address")
    @classmethod
    def check_mac(cls, value: str) -> str:
        if not is_valid_mac(value):
            raise ValueError("mac_address must look like AA:BB:CC:DD:EE:FF")
        return value


class DeviceSummary(BaseModel):
    id: str
    mac_address: str
    description: str
    password: str


# ---------- Routes ----------


@router.post("/register", response_model=str)
async def register_device(
    body: RegisterRequest,
    catalog: DeviceCatalog = Depends(get_catalog),
) -> str:
    """Register a device, replacing any record with the same ID."""
    record = DeviceRecord(
        id=body.id,
        mac_address=body.mac_address,
        description=body.description,
        password=body.password,
    )
    try:
        await catalog.upsert(record)
    except PersistError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
    return "Device registered successfully"


@router.get("/devices", response_model=list[DeviceSummary])
async def list_devices(catalog: DeviceCatalog = Depends(get_catalog)) -> list[DeviceSummary]:
    """Return every registered device, passwords included."""
    records = await catalog.list_all()
    return [DeviceSummary(**record.model_dump()) for record in records]
