from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Any

from PySide6.QtCore import QObject, Slot

from taskboard.devices import NfcAdapter, TagInfo
from taskboard.logger import get_logger

if TYPE_CHECKING:
    from taskboard.app.state.dashboard_state import DashboardState
    from taskboard.ops.collaborators import Alerts, BluetoothScanner

_logger = get_logger("device_events")

NFC_ALERT_TITLE = "NFC"
NFC_ALERT_CANCEL = "CANCEL"


def scan_result_name(result: Any) -> str | None:
    """Project a scan result (or a bare name) onto its device name."""
    if isinstance(result, str):
        name = result
    else:
        name = getattr(result, "name", None)
        if name is None:
            device = getattr(result, "device", None)
            name = getattr(device, "name", None)
    if not name:
        return None
    return str(name)


class DeviceEventSink(QObject):
    """Folds Bluetooth scan hits and NFC tag reads into the dashboard state.

    ``subscribe`` and ``unsubscribe`` are paired: subscribing again first
    drops the previous handlers and scan task, so repeated activations never
    stack duplicate handlers.
    """

    def __init__(
        self,
        state: DashboardState,
        alerts: Alerts | None = None,
        bluetooth: BluetoothScanner | None = None,
        nfc: NfcAdapter | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._state = state
        self._alerts = alerts
        self._bluetooth = bluetooth
        self._nfc = nfc
        self._scan_task: asyncio.Task | None = None
        self._nfc_connected = False

    @property
    def is_subscribed(self) -> bool:
        return self._nfc_connected or self._scan_task is not None

    @property
    def scan_task(self) -> asyncio.Task | None:
        return self._scan_task

    def subscribe(self, *, nfc: bool = True, bluetooth: bool = True) -> None:
        """Wire NFC signals, start listening, and start consuming BLE scans.

        Must be called from inside the running event loop when a scanner is
        configured.
        """
        self.unsubscribe()

        if nfc and self._nfc is not None:
            self._nfc.messageReceived.connect(self._on_message_received)
            self._nfc.messagePublished.connect(self._on_message_published)
            self._nfc.tagDiscovered.connect(self._on_tag_discovered)
            self._nfc.tagListeningStatusChanged.connect(self._on_tag_listening_status_changed)
            self._nfc.nfcStatusChanged.connect(self._on_nfc_status_changed)
            self._nfc_connected = True
            self._nfc.start_listening()

        if bluetooth and self._bluetooth is not None:
            self._scan_task = asyncio.get_running_loop().create_task(self._consume_scan())

        _logger.debug("device events subscribed (nfc=%s, ble=%s)", self._nfc_connected, self._scan_task is not None)

    def unsubscribe(self) -> None:
        if self._nfc_connected and self._nfc is not None:
            self._nfc.messageReceived.disconnect(self._on_message_received)
            self._nfc.messagePublished.disconnect(self._on_message_published)
            self._nfc.tagDiscovered.disconnect(self._on_tag_discovered)
            self._nfc.tagListeningStatusChanged.disconnect(self._on_tag_listening_status_changed)
            self._nfc.nfcStatusChanged.disconnect(self._on_nfc_status_changed)
        self._nfc_connected = False

        task, self._scan_task = self._scan_task, None
        if task is not None and not task.done():
            task.cancel()

    async def aclose(self) -> None:
        """Unsubscribe and wait for the scan task to wind down."""
        task = self._scan_task
        self.unsubscribe()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    # ---- bluetooth ----
    async def _consume_scan(self) -> None:
        scanner = self._bluetooth
        if scanner is None:
            return
        try:
            async for result in scanner.scan():
                self.on_scan_result(result)
        except Exception as e:
            _logger.warning("bluetooth scan stopped: %s", e)

    def on_scan_result(self, result: Any) -> None:
        name = scan_result_name(result)
        if name is None:
            return
        if self._state._record_device_seen(name):
            _logger.debug("device seen: %s", name)

    # ---- nfc ----
    @Slot(object)
    def _on_message_received(self, tag: object) -> None:
        serial = tag.serial_number if isinstance(tag, TagInfo) else str(getattr(tag, "serial_number", tag))
        _logger.debug("nfc message received: %s", serial)
        self._alert(serial)

    @Slot(object, bool)
    def _on_tag_discovered(self, tag: object, format_: bool) -> None:
        ident = tag.identifier_hex if isinstance(tag, TagInfo) else str(getattr(tag, "identifier", tag))
        _logger.debug("nfc tag discovered: %s (format=%s)", ident, format_)
        self._alert(ident)

    @Slot(object)
    def _on_message_published(self, tag: object) -> None:
        pass

    @Slot(bool)
    def _on_tag_listening_status_changed(self, listening: bool) -> None:
        pass

    @Slot(bool)
    def _on_nfc_status_changed(self, enabled: bool) -> None:
        pass

    def _alert(self, message: str) -> None:
        if self._alerts is None:
            return
        self._alerts.display_alert(NFC_ALERT_TITLE, message, NFC_ALERT_CANCEL)
