"""Import command."""

from trimtune.commands.common import open_session
from trimtune.constants import ExitCode
from trimtune.core.parser import profile_name_from_meta
from trimtune.state.locks import state_lock


def run(args):
    with state_lock():
        session, error = open_session(args.csv, import_profile=True)
    if error:
        print(error)
        return ExitCode.USAGE

    lines = sum(len(row.blocks) for row in session.rows)
    print(f"Imported {len(session.rows)} rows ({lines} lines) from {args.csv}")
    print(f"- wing: {profile_name_from_meta(session.meta)}")
    print(f"- tolerance: {session.meta.tolerance} mm, correction: {session.meta.correction} mm")
    print(f"- profile: {session.profile_key()}")
    print(f"- groups: {', '.join(session.group_names()) or '(none)'}")
    return ExitCode.OK
