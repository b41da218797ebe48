"""Machine fingerprinting.

The fingerprint is a SHA-256 digest of the operating system's machine id
when one is available, otherwise of a set of stable platform facts. It
identifies an installation, not a user.

Typical usage:
    from aerobase.device.fingerprint import generate_fingerprint

    fingerprint = generate_fingerprint()
"""

import hashlib
import json
import logging
import os
import platform
from pathlib import Path

logger = logging.getLogger(__name__)

MACHINE_ID_PATHS = (
    Path("/etc/machine-id"),
    Path("/var/lib/dbus/machine-id"),
)


def read_machine_id(paths: tuple[Path, ...] = MACHINE_ID_PATHS) -> str | None:
    """Read the first non-empty machine id file.

    Args:
        paths: Candidate files, in order

    Returns:
        Machine id string, or None if no file is readable
    """
    for path in paths:
        try:
            value = path.read_text(encoding="utf-8").strip()
        except OSError:
            continue
        if value:
            return value
    return None


def generate_fingerprint(machine_id_paths: tuple[Path, ...] = MACHINE_ID_PATHS) -> str:
    """Generate a stable fingerprint for this machine.

    Args:
        machine_id_paths: Candidate machine id files

    Returns:
        64-character lowercase hex digest

    Examples:
        >>> len(generate_fingerprint())
        64
    """
    hasher = hashlib.sha256()

    machine_id = read_machine_id(machine_id_paths)
    if machine_id:
        hasher.update(machine_id.encode("utf-8"))
    else:
        logger.debug("No machine id available, fingerprinting platform facts")
        for part in (
            platform.system(),
            platform.release(),
            platform.version(),
            platform.node(),
            platform.processor(),
            str(os.cpu_count() or 0),
        ):
            hasher.update(part.encode("utf-8"))

    return hasher.hexdigest()


def get_hardware_info() -> str:
    """Describe the host as a JSON document.

    Returns:
        JSON object string
    """
    info = {
        "system_name": platform.system(),
        "os_version": platform.version(),
        "kernel_version": platform.release(),
        "host_name": platform.node(),
        "cpu_count": os.cpu_count(),
        "processor": platform.processor() or None,
        "architecture": platform.machine(),
        "python_version": platform.python_version(),
    }
    return json.dumps(info, sort_keys=True)
