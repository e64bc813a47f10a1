"""Export command: re-serialize a measurement file in the wide layout."""

from trimtune.commands.common import open_session
from trimtune.constants import ExitCode
from trimtune.exporters.csv_exporter import export_wide_csv


def run(args):
    session, error = open_session(args.csv)
    if error:
        print(error)
        return ExitCode.USAGE

    try:
        export_wide_csv(session.wide_import, args.out)
    except OSError as exc:
        print(f"error: export failed: {exc}")
        return ExitCode.RUNTIME_ERROR

    print(f"  CSV: {args.out}")
    return ExitCode.OK
