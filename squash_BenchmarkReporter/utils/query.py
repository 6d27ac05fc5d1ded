# squash_BenchmarkReporter/utils/query.py
from __future__ import annotations
from urllib.parse import unquote_plus

QueryValue = str | None | list

def parse_query_string(qs: str) -> dict[str, QueryValue]:
    """
    Split ``a=1&b=2&a=3`` into ``{"a": ["1", "3"], "b": "2"}``.
    A leading '?' is ignored; a key without '=' maps to None.
    """
    out: dict[str, QueryValue] = {}
    qs = qs[1:] if qs.startswith("?") else qs
    if not qs:
        return out
    for part in qs.split("&"):
        key, sep, value = part.partition("=")
        key = unquote_plus(key)
        val = unquote_plus(value) if sep else None
        if key not in out:
            out[key] = val
        elif isinstance(out[key], list):
            out[key].append(val)
        else:
            out[key] = [out[key], val]
    return out

def email_prefill(qs: str) -> str | None:
    """Value for the announcement e-mail field, if the query carries one."""
    v = parse_query_string(qs).get("email")
    if isinstance(v, list):
        v = v[0]
    return v
