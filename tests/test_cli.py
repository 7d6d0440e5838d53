"""
Unit tests for the StarBook CLI

Runs the commands against a simulated StarBook.
"""

import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from starbook import __version__
from starbook.cli.main import app
from starbook.cli.utils.state import clear_mount, get_mount


SIMULATE_ENV = {"STARBOOK_SIMULATE": "1", "STARBOOK_HOST": "", "STARBOOK_TIMEOUT": "", "STARBOOK_POLL_INTERVAL": ""}


class TestCli(unittest.TestCase):
    """Test suite for CLI commands in simulate mode"""

    def setUp(self):
        """Set up test fixtures before each test"""
        clear_mount()
        self.runner = CliRunner()
        self.addCleanup(clear_mount)

    def invoke(self, *args):
        return self.runner.invoke(app, list(args), env=SIMULATE_ENV)

    def test_version(self):
        """Test the version command"""
        result = self.invoke("version")
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)

    def test_connect(self):
        """Test connecting in simulate mode"""
        result = self.invoke("mount", "connect")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("simulate", result.output)
        self.assertTrue(get_mount().simulate)

    def test_status_json(self):
        """Test JSON status output"""
        result = self.invoke("mount", "status", "--json")
        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.output)
        self.assertEqual(data["status"], "SCOP")
        self.assertTrue(data["simulate"])

    def test_goto_radec(self):
        """Test a coordinate goto without waiting"""
        result = self.invoke("goto", "radec", "--ra", "2", "--dec", "-10.5", "--no-wait")
        self.assertEqual(result.exit_code, 0, result.output)
        target = get_mount().target
        self.assertAlmostEqual(target.ra.decimal, 2.0)
        self.assertAlmostEqual(target.dec.decimal, -10.5)

    def test_goto_radec_invalid(self):
        """Test invalid coordinates exit with an error"""
        result = self.invoke("goto", "radec", "--ra", "25", "--dec", "0")
        self.assertEqual(result.exit_code, 1)

    @patch("starbook.api.telescope.telescope.time.sleep")
    def test_goto_object_wait(self, mock_sleep):
        """Test a named goto waits for the simulated slew"""
        result = self.invoke("goto", "object", "Vega")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(get_mount().target.name, "Vega")

    def test_goto_unknown_object(self):
        """Test an unknown object exits with an error"""
        result = self.invoke("goto", "object", "Nonexistent Object", "--no-wait")
        self.assertEqual(result.exit_code, 1)

    def test_grid_table(self):
        """Test a grid around an object is listed"""
        result = self.invoke("goto", "grid", "Vega", "--size", "2")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Mosaic Grid", result.output)
        self.assertIsNone(get_mount().target)

    @patch("starbook.api.telescope.telescope.time.sleep")
    def test_grid_run(self, mock_sleep):
        """Test --run slews to every cell"""
        result = self.invoke("goto", "grid", "--ra", "2", "--dec", "10", "--size", "1", "--run")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(get_mount().target.name, "RA=2.00 DEC=10.00")

    def test_grid_needs_both_coordinates(self):
        """Test --ra without --dec is refused"""
        result = self.invoke("goto", "grid", "--ra", "2")
        self.assertEqual(result.exit_code, 1)

    def test_reset(self):
        """Test the reset command"""
        result = self.invoke("mount", "reset")
        self.assertEqual(result.exit_code, 0, result.output)

    def test_move_invalid_direction(self):
        """Test an unknown direction exits with an error"""
        result = self.invoke("move", "direction", "sideways")
        self.assertEqual(result.exit_code, 1)

    @patch("starbook.cli.commands.move.time.sleep")
    def test_move_with_duration(self, mock_sleep):
        """Test a timed move stops afterwards"""
        result = self.invoke("move", "direction", "north", "--duration", "1.5")
        self.assertEqual(result.exit_code, 0, result.output)
        mock_sleep.assert_called_once_with(1.5)

    def test_speed(self):
        """Test setting the speed"""
        result = self.invoke("mount", "speed", "3")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(get_mount().getspeed(), 3)

    def test_zoom_in(self):
        """Test zooming in from the start-up speed"""
        result = self.invoke("mount", "zoom", "in")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(get_mount().getspeed(), 5)

    def test_screen_unavailable_in_simulate(self):
        """Test screen capture is refused without a controller"""
        with tempfile.TemporaryDirectory() as tmp:
            result = self.invoke("screen", "save", str(Path(tmp) / "shot.png"))
        self.assertEqual(result.exit_code, 1)

    def test_location(self):
        """Test the location command opens a map"""
        mock_open = MagicMock()
        self.invoke("mount", "connect")
        get_mount().browser = mock_open
        result = self.invoke("mount", "location")
        self.assertEqual(result.exit_code, 0, result.output)
        mock_open.assert_called_once()


if __name__ == "__main__":
    unittest.main()
