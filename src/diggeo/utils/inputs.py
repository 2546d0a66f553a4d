# src/diggeo/utils/inputs.py
from typing import Iterable, List, Sequence, TextIO


def _clean(values: Iterable[str]) -> List[str]:
    targets = []
    for value in values:
        value = value.strip()
        if value:
            targets.append(value)
    return targets


def collect_targets(args: Sequence[str], stream: TextIO | None = None) -> List[str]:
    """
    Return the targets to look up, in input order.
    Arguments win; with no arguments every non-empty line of `stream` is a target.
    No arguments and no stream gives an empty list.
    """
    if args:
        return _clean(args)
    if stream is None:
        return []
    return _clean(stream)


def stream_is_interactive(stream: TextIO | None) -> bool:
    if stream is None:
        return False
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # closed stream
        return False
