# tests/unit/test_rolling.py
from ctph.engine.rolling import ROLLING_WINDOW, RollingState, roll


def test_fresh_state_is_all_zero():
    st = RollingState()
    assert (st.h1, st.h2, st.h3, st.n) == (0, 0, 0, 0)
    assert st.window == bytearray(ROLLING_WINDOW)


def test_first_two_bytes_by_hand():
    st = RollingState()
    # h2 = 7, h1 = 1, h3 = 1
    assert roll(st, 1) == 9
    # h2 = 7 - 1 + 14 = 20, h1 = 3, h3 = (1 << 5) ^ 2 = 34
    assert roll(st, 2) == 57
    assert st.n == 2


def test_h1_only_covers_the_window():
    st = RollingState()
    for _ in range(50):
        roll(st, 1)
    assert st.h1 == ROLLING_WINDOW
    assert st.window == bytearray([1] * ROLLING_WINDOW)


def test_values_stay_within_32_bits():
    st = RollingState()
    for i in range(10_000):
        h = roll(st, (i * 37) & 0xFF)
        assert 0 <= h <= 0xFFFFFFFF
        assert 0 <= st.h1 <= 0xFFFFFFFF
        assert 0 <= st.h2 <= 0xFFFFFFFF
        assert 0 <= st.h3 <= 0xFFFFFFFF


def test_same_window_same_hash_component():
    # h1/h2 only depend on the last 7 bytes
    a, b = RollingState(), RollingState()
    for c in b"prefix-one" + b"WINDOW7":
        roll(a, c)
    for c in b"another longer prefix" + b"WINDOW7":
        roll(b, c)
    assert (a.h1, a.h2) == (b.h1, b.h2)
