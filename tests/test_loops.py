import unittest

from trimtune.constants import DEFAULT_LOOP_TYPES
from trimtune.core import loops


class LoopDeltaTests(unittest.TestCase):
    def test_default_is_standard_loop(self):
        self.assertEqual(loops.loop_delta_for("A1", "L", {}, DEFAULT_LOOP_TYPES), 0)
        self.assertEqual(loops.loop_type_for("A1", "L", None), "SL")

    def test_line_setup(self):
        setup = {"A1|L": "DL"}
        self.assertEqual(loops.loop_delta_for("A1", "L", setup, DEFAULT_LOOP_TYPES), -7)
        self.assertEqual(loops.loop_delta_for("A1", "R", setup, DEFAULT_LOOP_TYPES), 0)

    def test_group_setup_takes_precedence(self):
        setup = {"A1|L": "DL"}
        group_setup = {"AR1|L": "AS"}
        delta = loops.loop_delta_for(
            "A1", "L", setup, DEFAULT_LOOP_TYPES, group_name="AR1", group_loop_setup=group_setup
        )
        self.assertEqual(delta, -10)
        delta = loops.loop_delta_for(
            "A1", "L", setup, DEFAULT_LOOP_TYPES, group_name="AR2", group_loop_setup=group_setup
        )
        self.assertEqual(delta, -7)

    def test_unknown_type_is_zero(self):
        self.assertEqual(loops.loop_delta_for("A1", "L", {"A1|L": "gone"}, DEFAULT_LOOP_TYPES), 0)


class LoopTableTests(unittest.TestCase):
    def test_set_and_remove_type(self):
        table = loops.set_loop_type(DEFAULT_LOOP_TYPES, "XL", 5)
        self.assertEqual(table["XL"], 5)
        self.assertNotIn("XL", DEFAULT_LOOP_TYPES)
        self.assertEqual(loops.set_loop_type(table, "XL", None)["XL"], 0)
        self.assertNotIn("XL", loops.remove_loop_type(table, "XL"))
        with self.assertRaises(ValueError):
            loops.remove_loop_type(table, "SL")

    def test_bulk_tools(self):
        groups = ["AR1", "BR1"]
        self.assertEqual(
            loops.all_standard(groups),
            {"AR1|L": "SL", "AR1|R": "SL", "BR1|L": "SL", "BR1|R": "SL"},
        )
        mirrored = loops.mirror({"AR1|L": "DL", "BR1|R": "AS"}, groups, source="L")
        self.assertEqual(mirrored["AR1|R"], "DL")
        self.assertEqual(mirrored["BR1|R"], "SL")
        mirrored = loops.mirror({"BR1|R": "AS"}, groups, source="R")
        self.assertEqual(mirrored["BR1|L"], "AS")
        self.assertEqual(mirrored["AR1|L"], "SL")

    def test_assign_rejects_bad_side(self):
        with self.assertRaises(ValueError):
            loops.assign({}, "AR1", "X", "DL")

    def test_presets(self):
        presets = loops.save_preset({}, "comp", {"A1|L": "DL"}, {"AR1|R": "AS"})
        self.assertEqual(loops.load_preset(presets, "comp"), ({"A1|L": "DL"}, {"AR1|R": "AS"}))
        with self.assertRaises(KeyError):
            loops.load_preset(presets, "missing")
        self.assertEqual(loops.delete_preset(presets, "comp"), {})


if __name__ == "__main__":
    unittest.main()
