# Overview: Keystroke-timing classifier that separates USB barcode scanner bursts from human typing.

"""
HID barcode scanners "type" a code much faster than a person can (well under
50 ms between characters) and finish with Enter. BarcodeScanner watches the
key stream and:

- treats the second character arriving within SCANNER_SPEED_MS of the
  previous one as the start of a scan, asking the front-end to retract the
  characters that already reached the focused field;
- suppresses keys while a scan is in progress;
- on Enter emits the buffered code when it is at least MIN_BARCODE_LENGTH
  long;
- drops a burst that has been quiet for more than RESET_AFTER_MS.

Timestamps are milliseconds from any monotonic clock. The class holds no
timer; call expire(now_ms) from the event loop if idle bursts must be
dropped before the next key arrives.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

SCANNER_SPEED_MS = 50
RESET_AFTER_MS = 300
MIN_BARCODE_LENGTH = 4

ENTER = "Enter"


@dataclass(frozen=True)
class KeyResult:
    """
    suppress: the key must not reach the focused field
    retract: number of characters to remove from the focused field
    code: the scanned barcode, set only on the terminating Enter
    """
    suppress: bool = False
    retract: int = 0
    code: Optional[str] = None


PASS_THROUGH = KeyResult()


class BarcodeScanner:
    def __init__(
        self,
        on_scan: Optional[Callable[[str], None]] = None,
        on_buffer: Optional[Callable[[str], None]] = None,
        *,
        speed_ms: int = SCANNER_SPEED_MS,
        reset_after_ms: int = RESET_AFTER_MS,
        min_length: int = MIN_BARCODE_LENGTH,
    ):
        self.on_scan = on_scan
        self.on_buffer = on_buffer
        self.speed_ms = speed_ms
        self.reset_after_ms = reset_after_ms
        self.min_length = min_length

        self.buffer = ""
        self.last_time: Optional[float] = None
        self.scanning = False

    def reset(self) -> None:
        had_buffer = bool(self.buffer)
        self.buffer = ""
        self.last_time = None
        self.scanning = False
        if had_buffer and self.on_buffer:
            self.on_buffer("")

    def expire(self, now_ms: float) -> bool:
        """Drop the buffer if it has been idle too long. Returns True if it did."""
        if self.last_time is not None and now_ms - self.last_time > self.reset_after_ms:
            self.reset()
            return True
        return False

    def press(self, key: str, now_ms: float) -> KeyResult:
        self.expire(now_ms)

        if key == ENTER:
            if self.scanning and len(self.buffer) >= self.min_length:
                code = self.buffer
                self.reset()
                if self.on_scan:
                    self.on_scan(code)
                return KeyResult(suppress=True, code=code)
            self.buffer = ""
            self.last_time = None
            self.scanning = False
            return PASS_THROUGH

        # Ignore non-printable keys (Shift, Tab, arrows, ...)
        if len(key) != 1:
            return PASS_THROUGH

        gap = now_ms - self.last_time if self.last_time is not None else None

        if gap is not None and gap <= self.speed_ms:
            retract = 0
            if not self.scanning and self.buffer:
                # second fast key confirms a scanner; earlier keys already leaked into the field
                self.scanning = True
                retract = len(self.buffer)
            self.buffer += key
            self.last_time = now_ms
            if self.on_buffer:
                self.on_buffer(self.buffer)
            return KeyResult(suppress=self.scanning, retract=retract)

        # human typing speed: start over from this key
        self.buffer = key
        self.last_time = now_ms
        self.scanning = False
        return PASS_THROUGH
