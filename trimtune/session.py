"""Session controller owning the user-editable tables.

Every table is held by a ``TableState``: readers get a copy, writers hand in
a whole new value. ``replace`` persists the new value before returning, so
the next ``compute`` always sees what is stored.
"""

import copy
import logging

from trimtune.constants import LANES
from trimtune.core import adjustments as adj
from trimtune.core import loops
from trimtune.core.mapping import extract_group_names
from trimtune.core.models import SessionMeta
from trimtune.core.parser import load_wide, profile_name_from_meta
from trimtune.core.pipeline import compute
from trimtune.core.solver import apply_plan
from trimtune.profile import manager
from trimtune.state.store import clamp_step, load_value, save_value

logger = logging.getLogger(__name__)


class TableState:
    """One persisted table; every ``get`` reads the stored value.

    Read-modify-write sequences are only safe inside ``state_lock()``.
    """

    def __init__(self, key):
        self.key = key

    def get(self):
        return load_value(self.key)

    def replace(self, value):
        value = copy.deepcopy(value)
        save_value(self.key, value)
        return copy.deepcopy(value)


class TrimSession:
    def __init__(self):
        self.profiles = TableState("profiles")
        self.active_profile_key = TableState("active_profile_key")
        self.adjustments = TableState("group_adjustments")
        self.loop_types = TableState("loop_types")
        self.loop_setup = TableState("loop_setup")
        self.group_loop_setup = TableState("group_loop_setup")
        self.loop_presets = TableState("loop_presets")
        self.workflow_step = TableState("workflow_step")

        self.meta = SessionMeta()
        self.rows = []
        self.wide_import = None

    # measurement import

    def load_measurements(self, path):
        """Replace the current measurements without touching profile selection."""
        wide = load_wide(path)
        self.wide_import = wide
        self.meta = wide.meta
        self.rows = wide.rows
        return wide

    def import_csv(self, path):
        """Replace the current measurements with the contents of ``path``.

        Raises ``FormatError`` before anything is replaced when the file is
        not in the wide layout.
        """
        wide = self.load_measurements(path)
        name = profile_name_from_meta(wide.meta)
        profiles, key = manager.ensure_profile_for_name(
            self.profiles.get(), name, self.active_profile_key.get()
        )
        self.profiles.replace(profiles)
        self.active_profile_key.replace(key)
        self.set_step(2)
        logger.info("imported %d rows from %s into profile %r", len(self.rows), path, key)
        return wide

    # profiles

    def profile_key(self):
        return manager.resolve_active_key(self.profiles.get(), self.active_profile_key.get())

    def profile(self):
        return manager.active_profile(self.profiles.get(), self.active_profile_key.get())

    def use_profile(self, key):
        if key not in self.profiles.get():
            raise KeyError(key)
        self.active_profile_key.replace(key)

    def group_names(self):
        return extract_group_names(self.rows, self.profile())

    # computation

    def compute(self, lanes=LANES):
        return compute(
            self.rows,
            self.profile(),
            self.loop_setup.get(),
            self.loop_types.get(),
            self.adjustments.get(),
            self.meta,
            group_loop_setup=self.group_loop_setup.get(),
            lanes=lanes,
        )

    # adjustments

    def accumulate(self, group_name, side, delta):
        return self.adjustments.replace(
            adj.accumulate_group(self.adjustments.get(), group_name, side, delta)
        )

    def apply_plan(self, plan):
        return self.adjustments.replace(apply_plan(self.adjustments.get(), plan))

    def reset_adjustments(self):
        return self.adjustments.replace({})

    # loops

    def set_group_loop(self, group_name, side, type_name):
        return self.group_loop_setup.replace(
            loops.assign(self.group_loop_setup.get(), group_name, side, type_name)
        )

    def set_line_loop(self, label, side, type_name):
        return self.loop_setup.replace(loops.assign(self.loop_setup.get(), label, side, type_name))

    def all_standard_loops(self):
        return self.group_loop_setup.replace(loops.all_standard(self.group_names()))

    def mirror_loops(self, source="L"):
        return self.group_loop_setup.replace(
            loops.mirror(self.group_loop_setup.get(), self.group_names(), source)
        )

    def save_preset(self, name):
        return self.loop_presets.replace(
            loops.save_preset(
                self.loop_presets.get(), name, self.loop_setup.get(), self.group_loop_setup.get()
            )
        )

    def load_preset(self, name):
        loop_setup, group_loop_setup = loops.load_preset(self.loop_presets.get(), name)
        self.loop_setup.replace(loop_setup)
        self.group_loop_setup.replace(group_loop_setup)

    def delete_preset(self, name):
        return self.loop_presets.replace(loops.delete_preset(self.loop_presets.get(), name))

    # workflow

    def set_step(self, step):
        return self.workflow_step.replace(clamp_step(step))
