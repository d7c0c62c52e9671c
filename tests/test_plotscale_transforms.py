from __future__ import annotations

import math
import unittest

import numpy as np

from plotscale.transforms import (
    LinearTransform,
    LogTransform,
    linear_ticks,
    log_base,
    nice_linear,
    pow_base,
    round_half_up,
    tick_step,
)


class LinearTicksTests(unittest.TestCase):
    def test_unit_interval_uses_fifth_steps(self) -> None:
        self.assertEqual(linear_ticks(0, 1, 5), [0.0, 0.2, 0.4, 0.6, 0.8, 1.0])

    def test_reversed_interval_descends(self) -> None:
        self.assertEqual(linear_ticks(1, 0, 5), [1.0, 0.8, 0.6, 0.4, 0.2, 0.0])

    def test_integer_steps(self) -> None:
        self.assertEqual(linear_ticks(0, 100, 10), [float(v) for v in range(0, 101, 10)])

    def test_degenerate_and_empty_requests(self) -> None:
        self.assertEqual(linear_ticks(3, 3, 5), [3.0])
        self.assertEqual(linear_ticks(0, 1, 0), [])
        self.assertEqual(linear_ticks(0, math.inf, 5), [])

    def test_ticks_stay_inside_interval(self) -> None:
        ticks = linear_ticks(0.37, 8.91, 7)
        self.assertTrue(all(0.37 <= t <= 8.91 for t in ticks))
        steps = np.diff(np.asarray(ticks))
        self.assertTrue(np.allclose(steps, steps[0]))

    def test_spacing_outside_float_range_yields_no_ticks(self) -> None:
        self.assertEqual(linear_ticks(-1e308, 1e308, 10), [])
        self.assertEqual(linear_ticks(0, 1e-310, 10), [])
        self.assertEqual(linear_ticks(0, 5e-324, 10), [])
        self.assertEqual(tick_step(-1e308, 1e308, 10), 0.0)

    def test_tick_step_is_signed(self) -> None:
        self.assertAlmostEqual(tick_step(0, 1, 5), 0.2)
        self.assertAlmostEqual(tick_step(1, 0, 5), -0.2)


class NiceLinearTests(unittest.TestCase):
    def test_rounds_outward(self) -> None:
        self.assertEqual(nice_linear((0.5, 9.7), 10), (0.0, 10.0))

    def test_reversed_domain_stays_reversed(self) -> None:
        self.assertEqual(nice_linear((9.7, 0.5), 10), (10.0, 0.0))

    def test_never_narrows(self) -> None:
        lo, hi = nice_linear((-3.3, 41.2), 5)
        self.assertLessEqual(lo, -3.3)
        self.assertGreaterEqual(hi, 41.2)

    def test_degenerate_domain_unchanged(self) -> None:
        self.assertEqual(nice_linear((2.0, 2.0)), (2.0, 2.0))

    def test_domain_without_representable_step_unchanged(self) -> None:
        self.assertEqual(nice_linear((-1e308, 1e308)), (-1e308, 1e308))
        self.assertEqual(nice_linear((0.0, 1e-310)), (0.0, 1e-310))


class LogHelpersTests(unittest.TestCase):
    def test_exact_powers(self) -> None:
        self.assertEqual(log_base(1000, 10), 3.0)
        self.assertEqual(log_base(8, 2), 3.0)
        self.assertEqual(log_base(125, 5), 3.0)
        self.assertEqual(pow_base(-2, 10), 0.01)
        self.assertEqual(pow_base(3, 2), 8.0)

    def test_non_positive_values(self) -> None:
        self.assertEqual(log_base(0, 10), -math.inf)
        self.assertTrue(math.isnan(log_base(-1, 10)))

    def test_round_half_up_ties_toward_positive_infinity(self) -> None:
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(-2.5), -2)
        self.assertEqual(round_half_up(-2.6), -3)


class LinearTransformTests(unittest.TestCase):
    def test_scale_and_invert(self) -> None:
        t = LinearTransform(domain=(0, 10), output_range=(100, 200))
        self.assertEqual(t.scale(5), 150.0)
        self.assertEqual(t.invert(150), 5.0)

    def test_degenerate_domain_maps_to_range_midpoint(self) -> None:
        t = LinearTransform(domain=(3, 3), output_range=(0, 10))
        self.assertEqual(t.scale(3), 5.0)

    def test_array_mapping(self) -> None:
        t = LinearTransform(domain=(0, 10), output_range=(0, 100))
        np.testing.assert_allclose(t.scale_array([0, 2.5, 10]), [0.0, 25.0, 100.0])
        np.testing.assert_allclose(t.invert_array([0, 25, 100]), [0.0, 2.5, 10.0])


class LogTransformTests(unittest.TestCase):
    def test_scale_is_linear_in_log_space(self) -> None:
        t = LogTransform(domain=(1, 1000), output_range=(0, 300))
        self.assertAlmostEqual(t.scale(1), 0.0)
        self.assertAlmostEqual(t.scale(10), 100.0)
        self.assertAlmostEqual(t.scale(1000), 300.0)
        self.assertAlmostEqual(t.invert(200), 100.0)

    def test_non_positive_values_do_not_raise(self) -> None:
        t = LogTransform(domain=(1, 100), output_range=(0, 1))
        self.assertEqual(t.scale(0), -math.inf)
        self.assertTrue(math.isnan(t.scale(-1)))
        out = t.scale_array([-1.0, 0.0, 10.0])
        self.assertTrue(math.isnan(out[0]))
        self.assertEqual(out[1], -math.inf)
        self.assertAlmostEqual(float(out[2]), 0.5)

    def test_ticks_within_one_decade(self) -> None:
        t = LogTransform(domain=(1, 10))
        self.assertEqual(t.ticks(4), [float(v) for v in range(1, 11)])

    def test_ticks_below_one_are_exact(self) -> None:
        t = LogTransform(domain=(0.1, 1))
        self.assertEqual(t.ticks(4), [0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0])

    def test_ticks_for_reversed_domain_descend(self) -> None:
        t = LogTransform(domain=(10, 1))
        self.assertEqual(t.ticks(4), [float(v) for v in range(10, 0, -1)])

    def test_wide_domain_uses_power_ticks(self) -> None:
        t = LogTransform(domain=(1, 1e12))
        ticks = t.ticks(4)
        self.assertEqual(ticks[0], 1.0)
        self.assertEqual(ticks[-1], 1e12)
        self.assertLess(len(ticks), 13)

    def test_copy_is_independent(self) -> None:
        t = LogTransform(domain=(1, 100), output_range=(0, 10), base=2)
        c = t.copy()
        c.set_domain((10, 1000))
        self.assertEqual(t.domain(), (1.0, 100.0))
        self.assertEqual(c.range(), (0.0, 10.0))
        self.assertEqual(c.base, 2.0)

    def test_nice_rounds_to_powers(self) -> None:
        self.assertEqual(LogTransform(domain=(2, 300)).nice(), (1.0, 1000.0))
        self.assertEqual(LogTransform(domain=(300, 2)).nice(), (1000.0, 1.0))
        self.assertEqual(LogTransform(domain=(3, 20), base=2).nice(), (2.0, 32.0))

    def test_nice_never_narrows(self) -> None:
        for domain in ((1.0, 1000.0000000001), (0.9999999999999, 10.0), (3.0, 7.0), (1000.0000000001, 1.0)):
            with self.subTest(domain=domain):
                nice = LogTransform(domain=domain).nice()
                self.assertLessEqual(min(nice), min(domain))
                self.assertGreaterEqual(max(nice), max(domain))
        self.assertEqual(LogTransform(domain=(1.0, 1000.0000000001)).nice(), (1.0, 10000.0))
        self.assertEqual(LogTransform(domain=(0.9999999999999, 10.0)).nice(), (0.1, 10.0))

    def test_nice_keeps_bounds_whose_power_overflows(self) -> None:
        self.assertEqual(LogTransform(domain=(1.0, 1.5e308)).nice(), (1.0, 1.5e308))

    def test_backward_saturates(self) -> None:
        self.assertEqual(LogTransform().backward(1000.0), math.inf)
        self.assertEqual(pow_base(2000, 2), math.inf)


if __name__ == "__main__":
    unittest.main()
