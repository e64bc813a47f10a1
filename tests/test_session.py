import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from trimtune.core.parser import FormatError
from trimtune.profile.builtin import BUILTIN_PROFILES
from trimtune.session import TableState, TrimSession
from trimtune.state.store import load_value


WING_CSV = "\n".join(
    [
        "Input;Input;Tolerance;Correction",
        "Alpha;M;10;0",
        "Line;Nominal;Left;Right;Line;Nominal;Left;Right",
        "A1;1000;1005;995;B1;990;991;989",
        "A2;1000;1002;1001",
    ]
)


class SessionTestCase(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self._env = patch.dict(os.environ, {"TRIMTUNE_HOME": self._td.name})
        self._env.start()
        self.csv_path = Path(self._td.name) / "wing.csv"
        self.csv_path.write_text(WING_CSV)

    def tearDown(self):
        self._env.stop()
        self._td.cleanup()


class TableStateTests(SessionTestCase):
    def test_get_returns_copy_and_replace_persists(self):
        table = TableState("group_adjustments")
        snapshot = table.get()
        snapshot["AR1|L"] = 99
        self.assertEqual(table.get(), {})

        table.replace({"AR1|L": 5})
        self.assertEqual(load_value("group_adjustments"), {"AR1|L": 5})
        self.assertEqual(TableState("group_adjustments").get(), {"AR1|L": 5})

    def test_sessions_opened_together_both_accumulate(self):
        first = TrimSession()
        second = TrimSession()
        first.accumulate("AR1", "L", 10)
        second.accumulate("AR1", "L", 5)
        self.assertEqual(load_value("group_adjustments"), {"AR1|L": 15})
        self.assertEqual(first.adjustments.get(), {"AR1|L": 15})


class EndToEndTests(SessionTestCase):
    def _state(self, result, line, side):
        return next(s for s in result.states if s.line == line and s.side == side)

    def test_import_selects_profile_and_step(self):
        session = TrimSession()
        session.import_csv(self.csv_path)
        self.assertEqual(session.profile_key(), "Alpha M")
        self.assertIn("Alpha M", load_value("profiles"))
        self.assertEqual(load_value("active_profile_key"), "Alpha M")
        self.assertEqual(load_value("workflow_step"), 2)
        self.assertEqual(session.group_names(), ["AR1", "BR1"])

    def test_import_workbook(self):
        from openpyxl import Workbook

        wb = Workbook()
        for line in WING_CSV.splitlines():
            wb.active.append(line.split(";"))
        path = Path(self._td.name) / "wing.xlsx"
        wb.save(path)

        session = TrimSession()
        session.import_csv(path)
        self.assertEqual(session.profile_key(), "Alpha M")
        self.assertEqual(session.group_names(), ["AR1", "BR1"])
        self.assertEqual(session.wide_import.delimiter, ",")

    def test_rejected_file_changes_nothing(self):
        bad = Path(self._td.name) / "bad.csv"
        bad.write_text("a,b,c\n1,2,3\n")
        session = TrimSession()
        with self.assertRaises(FormatError):
            session.import_csv(bad)
        self.assertEqual(session.rows, [])
        self.assertEqual(load_value("profiles"), BUILTIN_PROFILES)
        self.assertEqual(load_value("workflow_step"), 1)

    def test_adjustment_moves_line_into_red(self):
        session = TrimSession()
        session.import_csv(self.csv_path)

        result = session.compute()
        left = self._state(result, "A1", "L")
        right = self._state(result, "A1", "R")
        self.assertEqual((left.after.delta, left.after.severity), (5, "ok"))
        self.assertEqual((right.after.delta, right.after.severity), (-5, "ok"))

        session.accumulate("AR1", "L", 10)
        left = self._state(session.compute(), "A1", "L")
        self.assertEqual((left.after.delta, left.after.severity), (15, "red"))
        self.assertEqual(left.original.delta, 5)

    def test_applied_plan_becomes_next_mean(self):
        session = TrimSession()
        session.import_csv(self.csv_path)
        session.accumulate("AR1", "L", 10)
        session.accumulate("AR1", "L", 10)

        plan = session.compute().plan
        proposal = next(p for p in plan if (p.group_name, p.side) == ("AR1", "L"))
        self.assertEqual(proposal.current_mean, 23.5)
        self.assertEqual(proposal.loops_to_apply_signed, -2)

        session.apply_plan(plan)
        stats = {(s.group_name, s.side): s.mean_delta for s in session.compute().stats}
        self.assertEqual(stats[("AR1", "L")], proposal.predicted_mean)
        self.assertEqual(load_value("group_adjustments"), {"AR1|L": 0})
        self.assertEqual(session.compute().plan, [])

    def test_group_loops_and_presets(self):
        session = TrimSession()
        session.import_csv(self.csv_path)
        session.set_group_loop("AR1", "L", "DL")
        session.mirror_loops("L")
        self.assertEqual(load_value("group_loop_setup")["AR1|R"], "DL")
        self.assertEqual(load_value("group_loop_setup")["BR1|R"], "SL")

        a1_left = self._state(session.compute(), "A1", "L")
        self.assertEqual(a1_left.loop_delta, -7)
        self.assertEqual(a1_left.loops.delta, -2)

        session.save_preset("mirror")
        session.all_standard_loops()
        self.assertEqual(self._state(session.compute(), "A1", "L").loop_delta, 0)
        session.load_preset("mirror")
        self.assertEqual(self._state(session.compute(), "A1", "L").loop_delta, -7)

    def test_reset_adjustments_and_steps(self):
        session = TrimSession()
        session.accumulate("AR1", "R", 5)
        session.reset_adjustments()
        self.assertEqual(load_value("group_adjustments"), {})
        self.assertEqual(session.set_step(7), 4)
        self.assertEqual(session.set_step(-1), 1)


if __name__ == "__main__":
    unittest.main()
