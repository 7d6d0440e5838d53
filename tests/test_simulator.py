"""
Unit tests for simulator.py

Tests the kinematic model used when no StarBook answers.
"""

import unittest

from starbook.api.core.constants import DEFAULT_ROUND
from starbook.api.core.types import Declination, RightAscension
from starbook.api.telescope.simulator import MountSimulator


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestMountSimulator(unittest.TestCase):
    """Test suite for MountSimulator"""

    def setUp(self):
        """Set up test fixtures before each test"""
        self.clock = FakeClock()
        self.sim = MountSimulator(round=DEFAULT_ROUND, clock=self.clock)
        self.origin_ra = RightAscension(0, 0.0)
        self.origin_dec = Declination(0, 0.0)

    # ========== Step Tests ==========

    def test_ra_step_is_bounded(self):
        """Test RA moves at most one hour per step"""
        ra, dec, goto = self.sim.step(self.origin_ra, self.origin_dec, RightAscension(2, 0.0), self.origin_dec)
        self.assertAlmostEqual(ra.decimal, 1.0)
        self.assertAlmostEqual(dec.decimal, 0.0)
        self.assertTrue(goto)

    def test_reaches_target(self):
        """Test two steps reach a target two hours away"""
        target_ra = RightAscension(2, 0.0)
        ra, dec, _ = self.sim.step(self.origin_ra, self.origin_dec, target_ra, self.origin_dec)
        ra, dec, goto = self.sim.step(ra, dec, target_ra, self.origin_dec)
        self.assertAlmostEqual(ra.decimal, 2.0)
        self.assertFalse(goto)

    def test_dec_step_is_bounded(self):
        """Test DEC moves at most four degrees per step"""
        _, dec, goto = self.sim.step(self.origin_ra, self.origin_dec, self.origin_ra, Declination(-10, 0.0, True))
        self.assertAlmostEqual(dec.decimal, -4.0)
        self.assertTrue(dec.negative)
        self.assertTrue(goto)

    def test_small_move_finishes_in_one_step(self):
        """Test a target within one step is reached immediately"""
        target_dec = Declination(0, 30.0, True)
        _, dec, goto = self.sim.step(self.origin_ra, self.origin_dec, RightAscension(0, 30.0), target_dec)
        self.assertAlmostEqual(dec.decimal, -0.5)
        self.assertFalse(goto)

    def test_no_target_stays(self):
        """Test stepping toward the current position does not move"""
        ra, dec, goto = self.sim.step(RightAscension(5, 10.0), Declination(20, 0.0), RightAscension(5, 10.0), Declination(20, 0.0))
        self.assertAlmostEqual(ra.decimal, 5 + 10 / 60)
        self.assertAlmostEqual(dec.decimal, 20.0)
        self.assertFalse(goto)

    def test_state_code(self):
        """Test the simulated controller is always in scope mode"""
        self.assertEqual(self.sim.state_code(), "SCOP")

    # ========== Encoder Tests ==========

    def test_encoders_start_at_zero(self):
        """Test X is zero right after the anchor"""
        sample = self.sim.encoders(self.origin_dec)
        self.assertEqual((sample.x, sample.y), (0, 0))
        self.assertEqual(sample.round, DEFAULT_ROUND)

    def test_x_advances_at_sidereal_rate(self):
        """Test X reaches round/4 after a quarter day"""
        self.clock.now = 21600.0
        self.assertEqual(self.sim.encoders(self.origin_dec).x, DEFAULT_ROUND // 4)

    def test_y_follows_declination(self):
        """Test Y is proportional to the declination"""
        self.assertEqual(self.sim.encoders(Declination(90, 0.0)).y, DEFAULT_ROUND // 4)
        self.assertEqual(self.sim.encoders(Declination(-45, 0.0, True)).y, -DEFAULT_ROUND // 8)

    def test_slewing_resets_x(self):
        """Test a slew re-anchors the RA encoder"""
        self.clock.now = 100.0
        self.assertEqual(self.sim.encoders(self.origin_dec).x, 10000)
        self.assertEqual(self.sim.encoders(self.origin_dec, slewing=True).x, 0)

    def test_reset_encoders(self):
        """Test reset_encoders restarts X from zero"""
        self.clock.now = 500.0
        self.sim.reset_encoders()
        self.clock.now = 510.0
        self.assertEqual(self.sim.encoders(self.origin_dec).x, 1000)


if __name__ == "__main__":
    unittest.main()
