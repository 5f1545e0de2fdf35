"""Roggler Transport Components.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roggler_core.transport.backend import Transport, TransportConfig
from roggler_core.transport.memory import MemoryTransport
from roggler_core.transport.http import HttpTransport

__all__ = ["Transport", "TransportConfig", "MemoryTransport", "HttpTransport"]
