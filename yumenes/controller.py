"""Standard joypad with an 8-bit serial shift register."""

from __future__ import annotations

from enum import IntFlag
from typing import Callable, Optional


class Button(IntFlag):
    """Joypad buttons with their bit in the shift register; A is read first."""

    A = 0x80
    B = 0x40
    SELECT = 0x20
    START = 0x10
    UP = 0x08
    DOWN = 0x04
    LEFT = 0x02
    RIGHT = 0x01


class Controller:
    """Latches button states on strobe release and shifts them out one per read.

    ``is_pressed`` reports whether a button is held; ``exit_requested``
    reports whether the user asked to leave the emulator.
    """

    def __init__(
        self,
        is_pressed: Optional[Callable[[Button], bool]] = None,
        exit_requested: Optional[Callable[[], bool]] = None,
    ) -> None:
        self.is_pressed = is_pressed or (lambda button: False)
        self.exit_requested = exit_requested or (lambda: False)
        self.strobe = False
        self.buttons_state = 0x00

    def handle_state_write(self, data: int) -> bool:
        """Handle a write to the strobe port; return False when exit is requested."""
        if self.exit_requested():
            return False

        self.strobe = bool(data & 0b1)

        if not self.strobe:
            for button in Button:
                if self.is_pressed(button):
                    self.buttons_state |= button.value

        return True

    def handle_state_read(self) -> int:
        """Return the next button bit (0 or 1)."""
        state = (self.buttons_state & 0x80) >> 7
        if not self.strobe:
            self.buttons_state = (self.buttons_state << 1) & 0xFF
        return state