from yumenes.controller import Button, Controller


def _controller(*held, exit_requested=False):
    return Controller(
        is_pressed=lambda button: button in held,
        exit_requested=lambda: exit_requested,
    )


def _read_all(controller, count=8):
    return [controller.handle_state_read() for _ in range(count)]


def test_nothing_pressed_reads_zero():
    controller = _controller()
    assert controller.handle_state_write(0) is True
    assert _read_all(controller) == [0] * 8


def test_buttons_shift_out_in_order():
    order = list(Button)
    for position, button in enumerate(order):
        controller = _controller(button)
        controller.handle_state_write(0)
        bits = _read_all(controller)
        assert bits.index(1) == position
        assert sum(bits) == 1


def test_a_is_read_first():
    controller = _controller(Button.A, Button.RIGHT)
    controller.handle_state_write(0)
    bits = _read_all(controller)
    assert bits[0] == 1
    assert bits[-1] == 1
    assert sum(bits) == 2


def test_reads_past_eight_return_zero():
    controller = _controller(*Button)
    controller.handle_state_write(0)
    assert _read_all(controller) == [1] * 8
    assert _read_all(controller, 3) == [0, 0, 0]


def test_strobe_high_does_not_latch_or_shift():
    controller = _controller(Button.A)
    controller.handle_state_write(1)
    assert controller.buttons_state == 0
    assert _read_all(controller, 3) == [0, 0, 0]


def test_strobe_high_repeats_first_bit():
    controller = _controller(Button.A)
    controller.handle_state_write(0)
    controller.handle_state_write(1)
    assert _read_all(controller, 4) == [1, 1, 1, 1]
    assert controller.buttons_state == Button.A.value


def test_exit_request_stops_write():
    controller = _controller(Button.A, exit_requested=True)
    assert controller.handle_state_write(0) is False
    assert controller.buttons_state == 0
    assert controller.strobe is False


def test_latch_accumulates_across_writes():
    held = {Button.B}
    controller = Controller(is_pressed=lambda button: button in held)
    controller.handle_state_write(0)
    held.clear()
    held.add(Button.START)
    controller.handle_state_write(0)
    assert controller.buttons_state == (Button.B | Button.START).value