"""Tests for the domain models."""

import pytest
from pydantic import ValidationError

from wakelink.models import DeviceRecord, WakeOutcome, WakeRequest, is_valid_mac


class TestDeviceRecord:

    def test_accepts_legacy_esp_id(self) -> None:
        record = DeviceRecord.model_validate({
            "esp_id": "esp-1",
            "mac_address": "AA:BB:CC:DD:EE:FF",
            "description": "Desk",
            "password": "pw",
        })
        assert record.id == "esp-1"

    def test_dump_uses_id_key(self, make_record) -> None:
        data = make_record().model_dump()
        assert set(data) == {"id", "mac_address", "description", "password"}

    def test_record_is_frozen(self, make_record) -> None:
        record = make_record()
        with pytest.raises(ValidationError):
            record.password = "changed"

    def test_description_defaults_to_empty(self) -> None:
        record = DeviceRecord(id="A", mac_address="AA:BB:CC:DD:EE:FF", password="x")
        assert record.description == ""


class TestWakeRequest:

    def test_accepts_legacy_esp_id(self) -> None:
        request = WakeRequest.model_validate({"esp_id": "A", "password": "foo"})
        assert request.id == "A"

    def test_password_required(self) -> None:
        with pytest.raises(ValidationError):
            WakeRequest.model_validate({"id": "A"})


class TestMacValidation:

    @pytest.mark.parametrize("mac", [
        "AA:BB:CC:DD:EE:FF",
        "aa-bb-cc-dd-ee-ff",
        "0123456789ab",
    ])
    def test_valid(self, mac: str) -> None:
        assert is_valid_mac(mac)

    @pytest.mark.parametrize("mac", [
        "",
        "AA:BB:CC:DD:EE",
        "AA:BB-CC:DD:EE:FF",
        "GG:BB:CC:DD:EE:FF",
        "AA:BB:CC:DD:EE:FF:00",
        "AA:BB:CC:DD:EE:FF\n",
    ])
    def test_invalid(self, mac: str) -> None:
        assert not is_valid_mac(mac)


def test_outcome_values_are_stable() -> None:
    assert WakeOutcome.DEVICE_OFFLINE.value == "device_offline"
    assert WakeOutcome.DISPATCHED.value == "dispatched"
