"""URL path canonicalisation."""

from __future__ import annotations


def clean_path(p: str) -> str:
    """Return the canonical URL path for ``p``.

    Repeated slashes collapse to one, ``.`` elements are dropped, ``..``
    removes the element before it (never climbing above the root), and a
    missing leading slash is added. A trailing slash is kept, and one is added
    when the path ends in a ``.`` element. An empty result is ``/``.
    """
    if not p:
        return "/"

    trailing = len(p) > 1 and p.endswith("/")
    parts = p.split("/")
    last_index = len(parts) - 1
    stack: list[str] = []

    for position, element in enumerate(parts):
        if element == "":
            continue
        if element == ".":
            if position == last_index:
                trailing = True
            continue
        if element == "..":
            if stack:
                stack.pop()
            continue
        stack.append(element)

    result = "/" + "/".join(stack)
    if trailing and stack:
        result += "/"
    return result