"""Device fingerprinting and identity registration."""

from aerobase.device.fingerprint import generate_fingerprint, get_hardware_info
from aerobase.device.manager import DeviceManager

__all__ = [
    "DeviceManager",
    "generate_fingerprint",
    "get_hardware_info",
]
