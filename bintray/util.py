import json
import logging
import sys
from functools import partial, wraps
from typing import Callable, Optional

import requests

from .exc import BintrayException


def in_debug() -> bool:
    """Determine if debugging is enabled.

    :return: True if the root logger is set to DEBUG
    """
    return logging.getLogger().level <= logging.DEBUG


def handle_expected_exceptions(
    func: Optional[Callable] = None,
    *,
    ignore_exceptions: tuple[Callable] = (BrokenPipeError,),
    report_exit_exceptions: tuple[Callable] = (
        BintrayException,
        OSError,
        requests.RequestException,
    ),
) -> Callable:
    """Wrap a function to treat certain exceptions sensibly.

    :param ignore_exceptions: Exceptions to be ignored
    :param report_exit_exceptions: Exceptions to be reported with exit
    """
    if not func:
        return partial(
            handle_expected_exceptions,
            ignore_exceptions=ignore_exceptions,
            report_exit_exceptions=report_exit_exceptions,
        )

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ignore_exceptions:
            if in_debug():
                raise
        except report_exit_exceptions as e:
            if in_debug():
                raise
            else:
                sys.exit(f"Error: {e}")

    return wrapper


def prettify_json(text: str) -> str:
    """Reformat JSON text for humans, return anything else unchanged."""
    try:
        return json.dumps(json.loads(text), indent=2, sort_keys=True)
    except ValueError:
        return text


def _json_field(text: str, field: str) -> Optional[str]:
    try:
        parsed = json.loads(text)
    except ValueError:
        return None
    if isinstance(parsed, dict) and isinstance(parsed.get(field), str):
        return parsed[field]
    return None


def get_bintray_message(text: str, default_message: Optional[str] = None) -> Optional[str]:
    """Extract the `message` Bintray sends along with errors."""
    message = _json_field(text, "message")
    return message if message is not None else default_message


def get_bintray_warning(text: str) -> Optional[str]:
    """Extract the `warn` field Bintray sometimes adds to successful answers."""
    return _json_field(text, "warn")
