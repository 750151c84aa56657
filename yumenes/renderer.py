"""Background rendering pipeline: scanline timing, tile fetches and pixel output."""

from __future__ import annotations

from enum import Enum, auto

from yumenes.palette import Color, color_for
from yumenes.registers import PPUState

SCREEN_WIDTH = 256
SCREEN_HEIGHT = 240
VISIBLE_PIXELS = SCREEN_WIDTH * SCREEN_HEIGHT
BLANK_COLOR: Color = (0xFF, 0xFF, 0xFF)

_FETCH_SUBCYCLE = 8

_CLEAR_STATUS_CYCLE = 1
_GARBAGE_NAMETABLE_FETCH_CYCLE = 339
_HORIZONTAL_SCROLL_COPY_CYCLE = 257
_NEXT_TILE_FETCHES_END = 337
_NEXT_TILE_FETCHES_START = 320
_POST_RENDER_SCANLINE = 240
_PRE_RENDER_SCANLINE = 261
_SET_VBLANK_CYCLE = 1
_VBLANK_SCANLINE = 241
_VERTICAL_COPY_END = 305
_VERTICAL_COPY_START = 279

_FINE_Y_MAX = 0x07
_COARSE_Y_ATTRIBUTE_BOUND = 0x1D
_COARSE_BOUND = 0x1F
_LSB_SHIFT = 0x0F
_MSB_SHIFT = 0x0E

_SECOND_PATTERN_TABLE = 0x1000
_SECOND_PLANE_OFFSET = 0x0008
_TILE_SIZE = 0x0010

_ATTRIBUTE_TABLE_START = 0x23C0
_NAMETABLES_START = 0x2000
_PALETTES_START = 0x3F00

_NO_FINE_Y_MASK = 0x0FFF
_MULTIPLEXER_POINTER = 0x8000
_UPPER_BYTE_MASK = 0xFF00


class RenderingMode(Enum):
    """The kind of scanline currently being processed."""

    PRE_RENDER_SCANLINE = auto()
    VISIBLE_SCANLINE = auto()
    POST_RENDER_SCANLINE = auto()
    VBLANK_SCANLINE = auto()


class Renderer:
    """Produces one background pixel per PPU dot into a 256x240 frame."""

    def __init__(self, ppu: PPUState) -> None:
        self.ppu = ppu
        self.frame: list[Color] = [BLANK_COLOR] * VISIBLE_PIXELS
        self.rendering_mode = RenderingMode.PRE_RENDER_SCANLINE

        self.fetched_nametable_tile_byte = 0x00
        self.fetched_attribute_table_byte = 0x00
        self.fetched_tile_first_plane_byte = 0x00
        self.fetched_tile_second_plane_byte = 0x00

        self.tile_data_first_shift_reg = 0x0000
        self.tile_data_second_shift_reg = 0x0000
        self.data_multiplexer = 0x0000

    def prepare_next_pixel(self) -> None:
        """Process the PPU's current dot: timing events, fetches and output."""
        self._choose_rendering_mode()
        self._dispatch_rendering_mode()
        self._process_pixel_rendering()

    def pixel(self, x: int, y: int) -> Color:
        """Return the colour last drawn at screen position (x, y)."""
        if not (0 <= x < SCREEN_WIDTH and 0 <= y < SCREEN_HEIGHT):
            raise IndexError(f"pixel out of screen: ({x}, {y})")
        return self.frame[y * SCREEN_WIDTH + x]

    # Scanline handling

    def _choose_rendering_mode(self) -> None:
        scanline = self.ppu.current_scanline
        if 0 <= scanline < _POST_RENDER_SCANLINE:
            self.rendering_mode = RenderingMode.VISIBLE_SCANLINE
        elif scanline == _POST_RENDER_SCANLINE:
            self.rendering_mode = RenderingMode.POST_RENDER_SCANLINE
        elif _POST_RENDER_SCANLINE < scanline < _PRE_RENDER_SCANLINE:
            self.rendering_mode = RenderingMode.VBLANK_SCANLINE
        elif scanline == _PRE_RENDER_SCANLINE:
            self.rendering_mode = RenderingMode.PRE_RENDER_SCANLINE

    def _dispatch_rendering_mode(self) -> None:
        mode = self.rendering_mode
        if mode is RenderingMode.PRE_RENDER_SCANLINE:
            self._render_pre_render_scanline()
        elif mode is RenderingMode.VISIBLE_SCANLINE:
            self._render_visible_scanline()
        elif mode is RenderingMode.VBLANK_SCANLINE:
            self._render_vblank_scanline()

    def _render_pre_render_scanline(self) -> None:
        cycle = self.ppu.current_cycle
        if cycle == _CLEAR_STATUS_CYCLE:
            self.ppu.status.word = 0x00

        self._render_visible_scanline()

        if _VERTICAL_COPY_START < cycle < _VERTICAL_COPY_END:
            self._copy_vertical_scroll_to_address()

    def _render_visible_scanline(self) -> None:
        cycle = self.ppu.current_cycle
        in_visible_fetches = 0 < cycle < _HORIZONTAL_SCROLL_COPY_CYCLE
        in_next_tile_fetches = _NEXT_TILE_FETCHES_START < cycle < _NEXT_TILE_FETCHES_END

        if in_visible_fetches or in_next_tile_fetches:
            self._process_rendering_fetches()

        if cycle == SCREEN_WIDTH:
            self._coarse_y_increment_with_wrapping()

        if cycle == _HORIZONTAL_SCROLL_COPY_CYCLE:
            self._copy_horizontal_scroll_to_address()

        if cycle in (_NEXT_TILE_FETCHES_END, _GARBAGE_NAMETABLE_FETCH_CYCLE):
            self.fetched_nametable_tile_byte = self._fetch_nametable_tile_byte_with_shifters_load()

    def _render_vblank_scanline(self) -> None:
        ppu = self.ppu
        if ppu.current_scanline == _VBLANK_SCANLINE and ppu.current_cycle == _SET_VBLANK_CYCLE:
            ppu.status.vblank_start = 1
            if ppu.controller.generate_nmi:
                ppu.force_nmi_in_cpu = True

    def _process_pixel_rendering(self) -> None:
        ppu = self.ppu
        if ppu.mask.show_background == 0:
            return

        x = ppu.current_cycle - 1
        y = ppu.current_scanline
        if not (0 <= x < SCREEN_WIDTH and 0 <= y < SCREEN_HEIGHT):
            return

        fine_x = ppu.fine_x.position
        self.data_multiplexer = _MULTIPLEXER_POINTER >> fine_x

        color_lsb = ((self.tile_data_first_shift_reg & self.data_multiplexer)
                     >> (_LSB_SHIFT - fine_x)) & 0xFF
        color_msb = ((self.tile_data_second_shift_reg & self.data_multiplexer)
                     >> (_MSB_SHIFT - fine_x)) & 0xFF
        pixel_color = (color_msb | color_lsb) & 0xFF

        address = (_PALETTES_START + (self.fetched_attribute_table_byte << 2) + pixel_color) & 0xFFFF
        self.frame[y * SCREEN_WIDTH + x] = color_for(ppu.read_from_bus(address))

    # Tile and attribute fetches

    def _process_rendering_fetches(self) -> None:
        dot = self.ppu.current_cycle % _FETCH_SUBCYCLE

        self._move_shift_registers()

        if dot == 0:
            self._coarse_x_increment_with_wrapping()
        elif dot == 1:
            self.fetched_nametable_tile_byte = self._fetch_nametable_tile_byte_with_shifters_load()
        elif dot == 3:
            self.fetched_attribute_table_byte = self._fetch_attribute_table_byte()
        elif dot == 5:
            self.fetched_tile_first_plane_byte = self._fetch_tile_plane_byte()
        elif dot == 7:
            self.fetched_tile_second_plane_byte = self._fetch_tile_plane_byte(_SECOND_PLANE_OFFSET)

    def _fetch_nametable_tile_byte_with_shifters_load(self) -> int:
        address = _NAMETABLES_START | (self.ppu.address.word & _NO_FINE_Y_MASK)
        self._load_next_tile_data_to_shift_registers()
        return self.ppu.read_from_bus(address)

    def _fetch_attribute_table_byte(self) -> int:
        v = self.ppu.address
        address = (_ATTRIBUTE_TABLE_START
                   | (v.nametable << 10)
                   | ((v.coarse_y >> 2) << 3)
                   | (v.coarse_x >> 2)) & 0xFFFF
        shift = self._calculate_attribute_shift()
        return (self.ppu.read_from_bus(address) >> shift) & 0b11

    def _calculate_attribute_shift(self) -> int:
        v = self.ppu.address
        return ((v.coarse_y & 0b10) << 1) | (v.coarse_x & 0b10)

    def _fetch_tile_plane_byte(self, plane_offset: int = 0x00) -> int:
        ppu = self.ppu
        address = (ppu.controller.bg_table * _SECOND_PATTERN_TABLE
                   + self.fetched_nametable_tile_byte * _TILE_SIZE
                   + ppu.address.fine_y
                   + plane_offset) & 0xFFFF
        return ppu.read_from_bus(address)

    # Scroll register helpers

    def _coarse_x_increment_with_wrapping(self) -> None:
        if self.ppu.mask.show_background == 0:
            return
        v = self.ppu.address
        if v.coarse_x == _COARSE_BOUND:
            v.coarse_x = 0
            v.nametable ^= 0b01
        else:
            v.coarse_x += 1

    def _coarse_y_increment_with_wrapping(self) -> None:
        if self.ppu.mask.show_background == 0:
            return
        v = self.ppu.address
        if v.fine_y < _FINE_Y_MAX:
            v.fine_y += 1
            return
        v.fine_y = 0
        if v.coarse_y == _COARSE_Y_ATTRIBUTE_BOUND:
            v.coarse_y = 0
            v.nametable ^= 0b10
        elif v.coarse_y == _COARSE_BOUND:
            v.coarse_y = 0
        else:
            v.coarse_y += 1

    def _copy_horizontal_scroll_to_address(self) -> None:
        if self.ppu.mask.show_background == 0:
            return
        t, v = self.ppu.scroll, self.ppu.address
        horizontal_bit = t.nametable & 0b01
        v.coarse_x = t.coarse_x
        v.nametable = (t.nametable & 0b10) | horizontal_bit

    def _copy_vertical_scroll_to_address(self) -> None:
        if self.ppu.mask.show_background == 0:
            return
        t, v = self.ppu.scroll, self.ppu.address
        vertical_bit = t.nametable & 0b10
        v.coarse_y = t.coarse_y
        v.nametable = (t.nametable & 0b01) | vertical_bit
        v.fine_y = t.fine_y

    def _load_next_tile_data_to_shift_registers(self) -> None:
        self.tile_data_first_shift_reg = (
            (self.tile_data_first_shift_reg & _UPPER_BYTE_MASK) | self.fetched_tile_first_plane_byte
        )
        self.tile_data_second_shift_reg = (
            (self.tile_data_second_shift_reg & _UPPER_BYTE_MASK) | self.fetched_tile_second_plane_byte
        )

    def _move_shift_registers(self) -> None:
        if self.ppu.mask.show_background == 0:
            return
        self.tile_data_first_shift_reg = (self.tile_data_first_shift_reg << 1) & 0xFFFF
        self.tile_data_second_shift_reg = (self.tile_data_second_shift_reg << 1) & 0xFFFF