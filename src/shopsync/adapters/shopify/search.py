from __future__ import annotations


def build_search_query(field: str, value: str) -> str:
    """Build a ``field:value`` search term, quoting values with spaces or quotes."""

    term = value.strip()
    if " " in term or '"' in term:
        term = '"' + term.replace('"', '\\"') + '"'
    return f"{field}:{term}"
