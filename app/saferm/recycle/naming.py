"""Collision-free naming for items entering the recycle bin.

When an item's name is already tracked, it is renamed to the next free
``name(N).ext`` form: ``report.txt`` becomes ``report(1).txt``, then
``report(2).txt``, and ``report(4).txt`` continues at ``report(5).txt``.

Only the last extension is kept apart from the counter, so
``archive.tar.gz`` becomes ``archive.tar(1).gz``.
"""

from collections.abc import Container

EXTENSION_DELIMITER = "."


def split_extension(name: str) -> tuple[str, str]:
    """Split a name at its last extension delimiter.

    Args:
        name: Base name to split.

    Returns:
        Tuple of (base, ext) where ext includes the delimiter, or is
        empty when the name has no delimiter.
    """
    index = name.rfind(EXTENSION_DELIMITER)
    if index < 0:
        return name, ""
    return name[:index], name[index:]


def parse_counter(base: str) -> tuple[str, int]:
    """Split a trailing ``(N)`` counter off a base name.

    The counter must be one or more decimal digits in parentheses at the
    very end, preceded by a non-empty prefix.

    Args:
        base: Name without extension.

    Returns:
        Tuple of (prefix, counter). When no counter is present the whole
        base is the prefix and the counter is 0.
    """
    if not base.endswith(")"):
        return base, 0

    end = len(base) - 1
    start = end
    while start > 0 and base[start - 1] in "0123456789":
        start -= 1

    # Need at least one digit, an opening parenthesis, and a prefix before it
    if start == end or start < 2 or base[start - 1] != "(":
        return base, 0

    return base[: start - 1], int(base[start:end])


def resolve_name(desired: str, taken: Container[str]) -> str:
    """Find the first free counter-suffixed variant of a name.

    Args:
        desired: Name that collides with a tracked name.
        taken: Names that cannot be used.

    Returns:
        A ``prefix(N)ext`` name not in taken, with N greater than any
        counter already present in desired.
    """
    base, ext = split_extension(desired)
    prefix, counter = parse_counter(base)

    while True:
        counter += 1
        candidate = f"{prefix}({counter}){ext}"
        if candidate not in taken:
            return candidate
