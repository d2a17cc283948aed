import math
import random

import pytest

from rm_common.one_euro_filter import OneEuroFilter

FREQUENCY = 120.0
MINCUTOFF = 2.543785
BETA = 0.000001
DCUTOFF = 1.0


def _filter():
    return OneEuroFilter(FREQUENCY, MINCUTOFF, BETA, DCUTOFF)


def test_output_before_input_is_zero():
    assert _filter().output() == 0.0


def test_first_input_passes_through():
    f = _filter()
    f.input(3.75)
    assert f.output() == 3.75


def test_constant_signal_stays_constant():
    f = _filter()
    for _ in range(50):
        f.input(2.0)
        assert f.output() == pytest.approx(2.0)


def test_noisy_sine_stays_within_input_range():
    rng = random.Random(1234)
    f = _filter()
    seen = []
    t = 0.0
    for _ in range(600):
        t += 1.0 / FREQUENCY
        noisy = 10.0 * math.sin(t) + 10.0 * ((rng.random() - 0.5) / 5.0)
        seen.append(noisy)
        f.input(noisy)
        assert min(seen) - 1e-9 <= f.output() <= max(seen) + 1e-9


def test_filter_smooths_noise():
    rng = random.Random(99)
    f = _filter()
    raw_error = filtered_error = 0.0
    t = 0.0
    for _ in range(1200):
        t += 1.0 / FREQUENCY
        signal = 10.0 * math.sin(t)
        noisy = signal + 10.0 * ((rng.random() - 0.5) / 5.0)
        f.input(noisy)
        raw_error += (noisy - signal) ** 2
        filtered_error += (f.output() - signal) ** 2
    assert filtered_error < raw_error


def test_step_response_moves_towards_new_value():
    f = _filter()
    f.input(0.0)
    f.input(1.0)
    first = f.output()
    assert 0.0 < first < 1.0
    f.input(1.0)
    assert first < f.output() <= 1.0


def test_clear_restarts_filter():
    f = _filter()
    for value in (1.0, 5.0, -2.0):
        f.input(value)
    f.clear()
    f.input(-8.5)
    assert f.output() == -8.5