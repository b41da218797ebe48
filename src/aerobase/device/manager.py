"""Device identity registration.

Typical usage:
    from aerobase.device import DeviceManager

    manager = DeviceManager(store)
    device = manager.get_or_create_fingerprint()
"""

import logging
import threading
import time
import uuid
from collections.abc import Callable

from aerobase.device.fingerprint import generate_fingerprint, get_hardware_info
from aerobase.models.device import Device
from aerobase.store.gateway import DeviceStore

logger = logging.getLogger(__name__)


class DeviceManager:
    """Looks up or registers the device this process runs on.

    Attributes:
        store: Device storage
    """

    def __init__(
        self,
        store: DeviceStore,
        fingerprint_fn: Callable[[], str] = generate_fingerprint,
        hardware_info_fn: Callable[[], str] = get_hardware_info,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self._fingerprint_fn = fingerprint_fn
        self._hardware_info_fn = hardware_info_fn
        self._clock = clock
        self._lock = threading.Lock()

    def get_or_create_fingerprint(self) -> Device:
        """Get the device record for this machine, registering it if new.

        An existing record has its last-seen time refreshed.

        Returns:
            Device record

        Raises:
            StoreError: If the store cannot be read or written
        """
        fingerprint = self._fingerprint_fn()
        now = int(self._clock())

        with self._lock:
            existing = self.store.find_device_by_fingerprint(fingerprint)
            if existing is not None:
                self.store.touch_device(existing.id, now)
                logger.debug("Device %s seen again", existing.id)
                return Device(
                    id=existing.id,
                    fingerprint=existing.fingerprint,
                    hardware_info=existing.hardware_info,
                    created_at=existing.created_at,
                    last_seen=now,
                )

            device = Device(
                id=str(uuid.uuid4()),
                fingerprint=fingerprint,
                hardware_info=self._hardware_info_fn(),
                created_at=now,
                last_seen=now,
            )
            self.store.insert_device(device)

        logger.info("Registered new device %s", device.id)
        return device

    def get_device(self, device_id: str) -> Device | None:
        return self.store.get_device(device_id)

    def list_devices(self) -> list[Device]:
        return self.store.list_devices()
