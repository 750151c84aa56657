"""PPU register bit layouts and the state shared by the rendering pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

PPU_ADDRESS_SPACE = 0x4000


class _Field:
    """A bit field of a register, stored inside the register's word."""

    def __init__(self, shift: int, width: int) -> None:
        self.shift = shift
        self.mask = (1 << width) - 1
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Optional["_Register"], objtype: Optional[type] = None):
        if obj is None:
            return self
        return (obj.word >> self.shift) & self.mask

    def __set__(self, obj: "_Register", value: int) -> None:
        cleared = obj.word & ~(self.mask << self.shift)
        obj.word = cleared | ((int(value) & self.mask) << self.shift)


class _Register:
    """A fixed-width register whose bits are exposed as named fields."""

    __slots__ = ("_word",)
    WIDTH = 8
    DEFAULT = 0x00

    def __init__(self, word: Optional[int] = None) -> None:
        self._word = 0
        self.word = self.DEFAULT if word is None else word

    @property
    def word(self) -> int:
        return self._word

    @word.setter
    def word(self, value: int) -> None:
        self._word = int(value) & ((1 << self.WIDTH) - 1)

    @classmethod
    def fields(cls) -> tuple[str, ...]:
        """Names of the register's bit fields, lowest bits first."""
        found = {
            name: attr
            for klass in reversed(cls.__mro__)
            for name, attr in vars(klass).items()
            if isinstance(attr, _Field)
        }
        return tuple(sorted(found, key=lambda name: found[name].shift))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._word == other._word

    def __hash__(self) -> int:
        return hash((type(self), self._word))

    def __repr__(self) -> str:
        digits = self.WIDTH // 4
        return f"{type(self).__name__}(0x{self._word:0{digits}X})"


class ControllerRegister(_Register):
    """PPUCTRL ($2000)."""

    __slots__ = ()
    nametable = _Field(0, 2)
    vram_increment = _Field(2, 1)
    sprite_table = _Field(3, 1)
    bg_table = _Field(4, 1)
    sprite_size = _Field(5, 1)
    master_slave = _Field(6, 1)
    generate_nmi = _Field(7, 1)


class MaskRegister(_Register):
    """PPUMASK ($2001)."""

    __slots__ = ()
    greyscale = _Field(0, 1)
    show_background_left = _Field(1, 1)
    show_sprites_left = _Field(2, 1)
    show_background = _Field(3, 1)
    show_sprites = _Field(4, 1)
    emphasize_red = _Field(5, 1)
    emphasize_green = _Field(6, 1)
    emphasize_blue = _Field(7, 1)


class StatusRegister(_Register):
    """PPUSTATUS ($2002); powers up as 0xA0."""

    __slots__ = ()
    DEFAULT = 0xA0
    sprite_overflow = _Field(5, 1)
    sprite_zero_hit = _Field(6, 1)
    vblank_start = _Field(7, 1)


class LoopyRegister(_Register):
    """A 15-bit scroll/VRAM address register (the "t" and "v" registers)."""

    __slots__ = ()
    WIDTH = 16
    coarse_x = _Field(0, 5)
    coarse_y = _Field(5, 5)
    nametable = _Field(10, 2)
    fine_y = _Field(12, 3)


class FineX(_Register):
    """The 3-bit fine horizontal scroll."""

    __slots__ = ()
    position = _Field(0, 3)


@dataclass
class PPUState:
    """Registers, timing counters and bus access used while rendering.

    Reads go to ``bus_reader`` when one is given, otherwise to a flat
    16 KiB ``memory`` addressed modulo the PPU address space.
    """

    controller: ControllerRegister = field(default_factory=ControllerRegister)
    mask: MaskRegister = field(default_factory=MaskRegister)
    status: StatusRegister = field(default_factory=StatusRegister)
    oam_address: int = 0x00
    oam_data: int = 0x00
    scroll: LoopyRegister = field(default_factory=LoopyRegister)
    address: LoopyRegister = field(default_factory=LoopyRegister)
    data: int = 0x00
    oam_dma: int = 0x00
    fine_x: FineX = field(default_factory=FineX)
    second_address_write_latch: bool = False
    data_read_buffer: int = 0x00
    current_cycle: int = 0
    current_scanline: int = 0
    force_nmi_in_cpu: bool = False
    bus_reader: Optional[Callable[[int], int]] = None
    memory: bytearray = field(default_factory=lambda: bytearray(PPU_ADDRESS_SPACE))

    def read_from_bus(self, address: int) -> int:
        """Read one byte from the PPU bus."""
        address &= 0xFFFF
        if self.bus_reader is not None:
            return self.bus_reader(address) & 0xFF
        return self.memory[address % PPU_ADDRESS_SPACE]