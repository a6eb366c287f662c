"""QR code payloads for tower labels.

Rendering is delegated to an external QR image service; this module only
builds the URL carrying the tower code.
"""

from urllib.parse import urlencode

from lighttower_api.lib.store import LightTower


def qr_code_url(tower_id: str, size: int, service_url: str) -> str:
    """Build the image URL of a QR code encoding a tower code.

    Args:
        tower_id: The tower code to encode (e.g. ``"LT-001"``).
        size: Edge length of the square image in pixels.
        service_url: Base URL of the QR rendering service.

    Returns:
        The full image URL.
    """
    query = urlencode({"size": f"{size}x{size}", "data": tower_id})
    separator = "&" if "?" in service_url else "?"
    return f"{service_url}{separator}{query}"


def qr_payload(tower: LightTower, size: int, service_url: str) -> dict[str, str]:
    """Return ``{"towerId", "data", "imageUrl"}`` for a tower's QR label."""
    return {
        "towerId": tower.tower_id,
        "data": tower.tower_id,
        "imageUrl": qr_code_url(tower.tower_id, size, service_url),
    }
