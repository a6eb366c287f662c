"""Tests for QR label payloads."""

from datetime import UTC, datetime

from lighttower_api.lib.store import LightTower
from lighttower_api.services.qr_service import qr_code_url, qr_payload

QR_SERVICE = "https://api.qrserver.com/v1/create-qr-code/"


class TestQrCodeUrl:
    def test_encodes_tower_code_and_size(self) -> None:
        url = qr_code_url("LT-001", 150, QR_SERVICE)
        assert url == "https://api.qrserver.com/v1/create-qr-code/?size=150x150&data=LT-001"

    def test_appends_to_existing_query(self) -> None:
        url = qr_code_url("LT-002", 200, "https://qr.example.com/render?format=png")
        assert url == "https://qr.example.com/render?format=png&size=200x200&data=LT-002"

    def test_payload(self) -> None:
        tower = LightTower(
            id=1,
            tower_id="LT-001",
            location="Parklands Road",
            constituency="Westlands",
            ward="Parklands/Highridge",
            created_at=datetime.now(UTC),
        )
        payload = qr_payload(tower, 150, QR_SERVICE)
        assert payload["towerId"] == "LT-001"
        assert payload["data"] == "LT-001"
        assert payload["imageUrl"].endswith("data=LT-001")
