"""NES PPU registers, background renderer, system palette and joypad port."""

__version__ = "0.1.0"
__all__ = ["registers", "palette", "renderer", "controller"]