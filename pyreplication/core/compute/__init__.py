"""
Shared compute infrastructure for pyreplication.

Submodules:
    device: Hardware detection and device selection
    timing: Execution timing utilities
    tolerances: Quadrature and root-finding tolerances
"""

from pyreplication.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)
from pyreplication.core.compute.timing import Timer

__all__ = [
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
    "Timer",
]
