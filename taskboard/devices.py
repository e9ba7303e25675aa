"""In-process device sources.

Platform bridges (BLE adapter, NFC reader) push into these objects; the
dashboard only ever sees the async scan stream and the NFC signals.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

from PySide6.QtCore import QObject, Signal

from .logger import get_logger

_logger = get_logger("devices")


@dataclass(frozen=True)
class ScanResult:
    name: str | None
    address: str = ""
    rssi: int | None = None


@dataclass(frozen=True)
class TagInfo:
    identifier: bytes = b""
    serial_number: str = ""
    records: tuple[str, ...] = field(default_factory=tuple)

    @property
    def identifier_hex(self) -> str:
        return self.identifier.hex(":").upper()


class ScanFeed:
    """Fan-out Bluetooth scan stream.

    Each ``scan()`` call opens its own queue and yields every result published
    after it started, until the consumer stops iterating.
    """

    def __init__(self) -> None:
        self._queues: set[asyncio.Queue[ScanResult]] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._queues)

    def publish(self, result: ScanResult) -> None:
        for q in list(self._queues):
            q.put_nowait(result)

    def publish_threadsafe(self, loop: asyncio.AbstractEventLoop, result: ScanResult) -> None:
        loop.call_soon_threadsafe(self.publish, result)

    async def scan(self) -> AsyncIterator[ScanResult]:
        q: asyncio.Queue[ScanResult] = asyncio.Queue()
        self._queues.add(q)
        _logger.debug("scan subscriber added (%d)", len(self._queues))
        try:
            while True:
                yield await q.get()
        finally:
            self._queues.discard(q)
            _logger.debug("scan subscriber removed (%d)", len(self._queues))


class NfcAdapter(QObject):
    """NFC event surface.

    The reader bridge emits the signals; ``start_listening`` is the only call
    the dashboard makes into it.
    """

    messageReceived = Signal(object)
    messagePublished = Signal(object)
    tagDiscovered = Signal(object, bool)
    tagListeningStatusChanged = Signal(bool)
    nfcStatusChanged = Signal(bool)

    def __init__(self, parent: QObject | None = None, *, available: bool = True) -> None:
        super().__init__(parent)
        self._available = bool(available)
        self._listening = False

    @property
    def is_available(self) -> bool:
        return self._available

    @property
    def is_listening(self) -> bool:
        return self._listening

    def start_listening(self) -> None:
        if not self._available:
            _logger.info("nfc unavailable; not listening")
            return
        if self._listening:
            return
        self._listening = True
        self.tagListeningStatusChanged.emit(True)

    def stop_listening(self) -> None:
        if not self._listening:
            return
        self._listening = False
        self.tagListeningStatusChanged.emit(False)
