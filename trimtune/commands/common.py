"""Shared command helpers."""

from dataclasses import asdict
import json
from pathlib import Path

from trimtune.core.parser import FormatError
from trimtune.session import TrimSession


def require_yes(args, action_text):
    if getattr(args, "yes", False):
        return True
    try:
        reply = input(f"{action_text} [y/N]: ").strip().lower()
    except EOFError:
        return False
    return reply in ("y", "yes")


def ensure_existing_file(path_text):
    if not path_text:
        return None
    p = Path(path_text).expanduser()
    if not p.exists() or not p.is_file():
        return None
    return p


def open_session(csv_path=None, import_profile=False):
    """Return ``(session, error_message)``; the message is None on success."""
    session = TrimSession()
    if csv_path is None:
        return session, None

    path = ensure_existing_file(csv_path)
    if path is None:
        return None, f"error: measurement file not found: {csv_path}"
    try:
        if import_profile:
            session.import_csv(path)
        else:
            session.load_measurements(path)
    except FormatError as exc:
        return None, f"error: {exc}"
    return session, None


def fmt_mm(value, signed=True):
    if value is None:
        return "–"
    text = f"{value:+.1f}" if signed else f"{value:.1f}"
    return text[:-2] if text.endswith(".0") else text


def print_json(items):
    payload = [asdict(item) for item in items] if isinstance(items, list) else items
    print(json.dumps(payload, indent=2))
