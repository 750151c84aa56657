import pytest

from yumenes.registers import (
    ControllerRegister,
    FineX,
    LoopyRegister,
    MaskRegister,
    PPUState,
    StatusRegister,
)


def test_status_powers_up_with_a0():
    status = StatusRegister()
    assert status.word == 0xA0
    assert status.vblank_start == 1
    assert status.sprite_zero_hit == 0


def test_controller_and_mask_default_to_zero():
    assert ControllerRegister().word == 0x00
    assert MaskRegister().word == 0x00


@pytest.mark.parametrize(
    "cls", [ControllerRegister, MaskRegister, StatusRegister, LoopyRegister, FineX]
)
def test_field_round_trip_and_isolation(cls):
    reg = cls(0)
    for name in cls.fields():
        others_before = {n: getattr(reg, n) for n in cls.fields() if n != name}
        setattr(reg, name, 1)
        assert getattr(reg, name) == 1
        others_after = {n: getattr(reg, n) for n in cls.fields() if n != name}
        assert others_after == others_before


@pytest.mark.parametrize(
    "cls", [ControllerRegister, MaskRegister, StatusRegister, LoopyRegister, FineX]
)
def test_word_round_trip_through_fields(cls):
    original = cls(0xBEEF)
    copy = cls(0)
    for name in cls.fields():
        setattr(copy, name, getattr(original, name))
    for name in cls.fields():
        assert getattr(copy, name) == getattr(original, name)


def test_loopy_fields_compose_word():
    loopy = LoopyRegister()
    loopy.coarse_x = 0x1F
    loopy.coarse_y = 0x1D
    loopy.nametable = 2
    loopy.fine_y = 7
    assert loopy.coarse_x == 0x1F
    assert loopy.coarse_y == 0x1D
    assert loopy.nametable == 2
    assert loopy.fine_y == 7
    rebuilt = LoopyRegister(loopy.word)
    assert rebuilt == loopy


def test_field_assignment_wraps_to_width():
    loopy = LoopyRegister()
    loopy.coarse_x = 0x1F
    loopy.coarse_x = loopy.coarse_x + 1
    assert loopy.coarse_x == 0
    assert loopy.coarse_y == 0


def test_nametable_toggle_with_xor():
    loopy = LoopyRegister()
    loopy.nametable ^= 0b01
    assert loopy.nametable == 1
    loopy.nametable ^= 0b10
    assert loopy.nametable == 3
    loopy.nametable ^= 0b01
    assert loopy.nametable == 2


def test_word_is_masked_to_register_width():
    fine = FineX(0x1FF)
    assert fine.word == 0xFF
    assert fine.position == 7


def test_controller_bg_table_and_nmi_bits():
    ctrl = ControllerRegister(0x90)
    assert ctrl.generate_nmi == 1
    assert ctrl.bg_table == 1
    assert ctrl.sprite_table == 0


def test_state_reads_from_internal_memory():
    state = PPUState()
    state.memory[0x3F00] = 0x21
    assert state.read_from_bus(0x3F00) == 0x21


def test_state_memory_wraps_address_space():
    state = PPUState()
    state.memory[0x0123] = 0x42
    assert state.read_from_bus(0x4123) == state.read_from_bus(0x0123)


def test_state_uses_custom_reader():
    seen = []

    def reader(address):
        seen.append(address)
        return 0x1AB

    state = PPUState(bus_reader=reader)
    assert state.read_from_bus(0x23C0) == 0xAB
    assert seen == [0x23C0]


def test_state_defaults():
    state = PPUState()
    assert state.status.word == 0xA0
    assert state.force_nmi_in_cpu is False
    assert state.current_cycle == 0 and state.current_scanline == 0