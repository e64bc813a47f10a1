import tempfile
import unittest
from pathlib import Path

from trimtune.core.models import Range
from trimtune.exporters.profile_exporter import ProfileFormatError, export_profiles, read_profiles_file, read_profiles_json
from trimtune.profile import manager
from trimtune.profile.builtin import BUILTIN_PROFILES
from trimtune.profile.validator import validate_profile


class ParseProfileTests(unittest.TestCase):
    def test_parse_skips_malformed_rows(self):
        profile = manager.parse_profile(
            {
                "mmPerLoop": "abc",
                "mapping": {"a": [[1, 4, "AR1"], [5, "x", "AR2"], [9, 6, "AR3"], ["10", "12", "AR4"]], "B": "bad"},
            },
            key="Wing",
        )
        self.assertEqual(profile.name, "Wing")
        self.assertEqual(profile.mm_per_loop, 10)
        self.assertEqual(profile.mapping, {"A": [Range(1, 4, "AR1"), Range(10, 12, "AR4")]})

    def test_non_object(self):
        profile = manager.parse_profile(None, key="Wing")
        self.assertEqual((profile.name, profile.mm_per_loop, profile.mapping), ("Wing", 10, {}))

    def test_builtin_round_trip_stays_valid(self):
        for key, raw in BUILTIN_PROFILES.items():
            again = manager.profile_to_dict(manager.parse_profile(raw, key))
            self.assertEqual(again, raw)
            self.assertEqual(validate_profile(key, again), [])


class LibraryTests(unittest.TestCase):
    def setUp(self):
        self.profiles = manager.builtin_profiles()
        self.first = next(iter(self.profiles))

    def test_active_profile_fallbacks(self):
        self.assertEqual(manager.resolve_active_key(self.profiles, "missing"), self.first)
        self.assertEqual(manager.active_profile({}, "missing").name, self.first)

    def test_ensure_profile_clones_base(self):
        profiles, key = manager.ensure_profile_for_name(self.profiles, "  Alpha M ", self.first)
        self.assertEqual(key, "Alpha M")
        self.assertEqual(profiles[key]["name"], "Alpha M")
        self.assertEqual(profiles[key]["mapping"], self.profiles[self.first]["mapping"])
        self.assertNotIn("Alpha M", self.profiles)

        again, key = manager.ensure_profile_for_name(profiles, "Alpha M", self.first)
        self.assertIs(again["Alpha M"], profiles["Alpha M"])

    def test_merge_incoming_wins_and_fills_names(self):
        incoming = {self.first: {"mmPerLoop": 5, "mapping": {}}, "New": {"mmPerLoop": 8, "mapping": {}}}
        merged = manager.merge_profiles(self.profiles, incoming)
        self.assertEqual(merged[self.first]["mmPerLoop"], 5)
        self.assertEqual(merged[self.first]["name"], self.first)
        self.assertEqual(merged["New"]["name"], "New")

    def test_draft_normalization(self):
        profiles, key = manager.save_draft(self.profiles, " Mine ", {"mmPerLoop": "7,5"})
        self.assertEqual(key, "Mine")
        self.assertEqual(profiles["Mine"]["mmPerLoop"], 7.5)
        self.assertEqual(profiles["Mine"]["mapping"], {"A": [], "B": [], "C": [], "D": []})
        with self.assertRaises(ValueError):
            manager.normalize_draft("  ", {})

    def test_delete_reset_and_mm_per_loop(self):
        profiles, next_key = manager.delete_profile(self.profiles, self.first)
        self.assertNotIn(self.first, profiles)
        self.assertIn(next_key, profiles)

        profiles, key = manager.reset_to_builtin()
        self.assertEqual(profiles, BUILTIN_PROFILES)
        self.assertEqual(key, self.first)

        updated = manager.set_mm_per_loop(profiles, key, "12")
        self.assertEqual(updated[key]["mmPerLoop"], 12)
        self.assertEqual(profiles[key]["mmPerLoop"], 10)
        with self.assertRaises(KeyError):
            manager.set_mm_per_loop(profiles, "missing", 1)


class InterchangeTests(unittest.TestCase):
    def test_export_and_read(self):
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "profiles.json"
            export_profiles(BUILTIN_PROFILES, out)
            self.assertEqual(read_profiles_file(out), BUILTIN_PROFILES)

            key = next(iter(BUILTIN_PROFILES))
            export_profiles(BUILTIN_PROFILES, out, keys=[key])
            self.assertEqual(list(read_profiles_file(out)), [key])

            with self.assertRaises(KeyError):
                export_profiles(BUILTIN_PROFILES, out, keys=["missing"])

    def test_rejects_non_object(self):
        with self.assertRaises(ProfileFormatError):
            read_profiles_json("[1, 2]")
        with self.assertRaises(ProfileFormatError):
            read_profiles_json("{oops")


if __name__ == "__main__":
    unittest.main()
