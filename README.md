# yumenes

The background half of a NES picture processing unit (PPU), with its
registers, the system palette and the standard joypad port. Plain Python, no
dependencies.

## Modules

- `yumenes.registers`
  - `ControllerRegister`, `MaskRegister`, `StatusRegister`, `FineX` and
    `LoopyRegister`: registers that keep one integer `word` and show its bits
    as named fields (for example `mask.show_background` or
    `address.coarse_x`). Writing a field changes only its bits, and values are
    masked to the field's width. `StatusRegister` starts at `0xA0` and the
    others start at 0. `LoopyRegister` is 16 bits wide, with `coarse_x`,
    `coarse_y`, `nametable` and `fine_y`.
  - `PPUState`: a dataclass that holds the registers (`controller`, `mask`,
    `status`, `scroll`, `address`, `fine_x`, ...), the `current_cycle` and
    `current_scanline` counters and the `force_nmi_in_cpu` flag.
    `read_from_bus(address)` passes the read to `bus_reader` if one was given.
    Otherwise it reads a flat 16 KiB `memory` bytearray, with the address taken
    modulo `0x4000`.
- `yumenes.palette`: `COLORS`, the 64 RGB triples of the NES palette.
  `color_for(index)` returns one of them and raises `IndexError` for an index
  outside 0..63.
- `yumenes.renderer`
  - `RenderingMode`: pre-render, visible, post-render and vblank scanlines.
  - `Renderer(ppu_state)`: call `prepare_next_pixel()` once per PPU dot.
    - It picks the scanline mode.
    - It clears the status register at dot 1 of the pre-render line.
    - It does the nametable, attribute and pattern fetches into 16-bit shift
      registers.
    - It increments coarse X and Y with wrapping.
    - It copies the horizontal scroll at dot 257 and the vertical scroll during
      dots 280–304 of the pre-render line.
    - At dot 1 of scanline 241 it sets the vblank flag and, if
      `controller.generate_nmi` is set, raises `force_nmi_in_cpu`.
    - While `mask.show_background` is set, it colours a pixel of the 256×240
      `frame` from palette memory at `0x3F00`. Scroll increments, scroll copies
      and shifting are also skipped while that bit is clear.
    - `pixel(x, y)` returns the colour at a screen position. Pixels that have
      not been drawn yet are white. A position off the screen raises
      `IndexError`.
- `yumenes.controller`
  - `Button`: an `IntFlag` of the eight buttons. `Button.A` (`0x80`) is
    shifted out first and `Button.RIGHT` (`0x01`) last.
  - `Controller(is_pressed=None, exit_requested=None)`: takes callbacks that
    report whether a button is held and whether the user asked to quit.
    - `handle_state_write(data)` returns `False` when exit is requested.
      Otherwise it sets the strobe from bit 0 of `data`. When the strobe is
      low, it ORs the held buttons into the shift register.
    - `handle_state_read()` returns the top bit (0 or 1). When the strobe is
      low, it then shifts the register left.

## Example

```python
from yumenes.registers import PPUState
from yumenes.renderer import Renderer

state = PPUState()
state.mask.show_background = 1
renderer = Renderer(state)

for scanline in range(262):
    for cycle in range(341):
        state.current_scanline, state.current_cycle = scanline, cycle
        renderer.prepare_next_pixel()

print(renderer.pixel(0, 0))
```

The caller advances `current_cycle` and `current_scanline`; the renderer does
not move them itself.

## What it does not do

This package is not a complete emulator:

- It has no CPU, no cartridge or mapper loading and no PPU bus with mirroring.
  You provide memory through `PPUState.memory` or `bus_reader`.
- It does not handle CPU writes and reads of the PPU registers.
- It does not render sprites.
- It has no window, sound or keyboard handling.
- It has no command-line program.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```