"""Step command: show or set the current workflow step."""

from trimtune.commands.common import open_session
from trimtune.constants import ExitCode
from trimtune.state.locks import state_lock


STEP_LABELS = {
    1: "Import CSV",
    2: "Wing layout",
    3: "Loops setup",
    4: "Trim tables",
}


def run(args):
    session, _ = open_session()
    if args.step is not None:
        with state_lock():
            session.set_step(args.step)
    step = session.workflow_step.get()
    print(f"step {step}: {STEP_LABELS[step]}")
    return ExitCode.OK
