"""
Unit tests for catalogs.py

Tests catalog loading and object name resolution.
"""

import tempfile
import unittest
from pathlib import Path

from starbook.api.catalogs.catalogs import (
    CelestialObject,
    StaticCatalog,
    get_all_objects,
    load_catalogs,
)


class TestCelestialObject(unittest.TestCase):
    """Test suite for CelestialObject"""

    def setUp(self):
        """Set up test fixtures before each test"""
        self.obj = CelestialObject(name="M31", ra_degrees=10.68, dec_degrees=41.27, common_name="Andromeda Galaxy")

    def test_matches_name(self):
        """Test exact matches ignore case and spaces"""
        self.assertTrue(self.obj.matches_name("m31"))
        self.assertTrue(self.obj.matches_name("M 31"))
        self.assertTrue(self.obj.matches_name("andromeda galaxy"))
        self.assertFalse(self.obj.matches_name("M3"))

    def test_matches_search(self):
        """Test substring search on names"""
        self.assertTrue(self.obj.matches_search("androm"))
        self.assertTrue(self.obj.matches_search("M3"))
        self.assertFalse(self.obj.matches_search("orion"))


class TestLoadCatalogs(unittest.TestCase):
    """Test suite for YAML catalog loading"""

    def test_bundled_catalogs(self):
        """Test the bundled file has stars and Messier objects"""
        catalogs = load_catalogs()
        self.assertIn("stars", catalogs)
        self.assertIn("messier", catalogs)
        vega = next(obj for obj in catalogs["stars"] if obj.name == "Vega")
        self.assertEqual(vega.catalog, "stars")
        self.assertAlmostEqual(vega.dec_degrees, 38.7837)

    def test_get_all_objects(self):
        """Test all catalogs are flattened"""
        names = {obj.name for obj in get_all_objects()}
        self.assertTrue({"Polaris", "M42", "M104"} <= names)

    def test_custom_file(self):
        """Test loading a user supplied file"""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "mine.yaml"
            path.write_text(
                "favorites:\n"
                "  - name: Albireo\n"
                "    ra_degrees: 292.68\n"
                "    dec_degrees: 27.96\n"
                "    type: double_star\n",
                encoding="utf-8",
            )
            catalogs = load_catalogs(path)
        albireo = catalogs["favorites"][0]
        self.assertEqual(albireo.object_type, "double_star")
        self.assertIsNone(albireo.magnitude)


class TestStaticCatalog(unittest.TestCase):
    """Test suite for StaticCatalog lookups"""

    def setUp(self):
        """Set up test fixtures before each test"""
        self.catalog = StaticCatalog()

    def test_not_empty(self):
        """Test the bundled catalog is loaded by default"""
        self.assertGreater(len(self.catalog), 10)

    def test_exact_name_wins(self):
        """Test 'M1' does not resolve to M13 or M104"""
        self.assertEqual(self.catalog.find_object("M1").name, "M1")

    def test_common_name(self):
        """Test lookup by common name"""
        self.assertEqual(self.catalog.find_object("Orion Nebula").name, "M42")

    def test_substring_fallback(self):
        """Test partial names fall back to substring search"""
        self.assertEqual(self.catalog.find_object("sombrero").name, "M104")

    def test_not_found(self):
        """Test unknown names give None"""
        self.assertIsNone(self.catalog.find_object("Nonexistent Object"))

    def test_search(self):
        """Test search returns every match"""
        names = {obj.name for obj in self.catalog.search("nebula")}
        self.assertEqual(names, {"M1", "M42", "M57"})

    def test_custom_objects(self):
        """Test a catalog built from explicit objects"""
        catalog = StaticCatalog([CelestialObject(name="Target A", ra_degrees=0.0, dec_degrees=0.0)])
        self.assertEqual(len(catalog), 1)
        self.assertEqual(catalog.find_object("target a").name, "Target A")


if __name__ == "__main__":
    unittest.main()
