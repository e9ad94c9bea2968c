"""Tenant name derivations shared with the component that creates tenant indices.

Both functions are part of a cross-component contract: index names are
produced elsewhere from the same tenant names, so the output here must match
that component bit for bit.  Change nothing in this module without changing
the producer too.
"""

from __future__ import annotations

import re

__all__ = ["INT32_MAX", "INT32_MIN", "sanitize_tenant_name", "tenant_hash"]

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def tenant_hash(name: str) -> int:
    """Return the 32-bit polynomial string hash of *name*.

    ``h = 31 * h + c`` over the UTF-16 code units of *name*, wrapping to a
    signed 32-bit integer.  Characters outside the Basic Multilingual Plane
    contribute their two surrogate code units.

    Args:
        name: The tenant name exactly as configured (not sanitised).

    Returns:
        Signed integer in ``[-2**31, 2**31 - 1]``.

    Examples::

        tenant_hash("")    # 0
        tenant_hash("a")   # 97
        tenant_hash("ab")  # 3105
    """
    data = name.encode("utf-16-be", "surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        h = (31 * h + ((data[i] << 8) | data[i + 1])) & 0xFFFFFFFF
    return h - 0x1_0000_0000 if h & 0x8000_0000 else h


def sanitize_tenant_name(name: str) -> str:
    """Lower-case *name* and drop every character outside ``[a-z0-9]``.

    Runs of other characters disappear entirely; no separator is inserted.
    The function is idempotent.

    Examples::

        sanitize_tenant_name("Human Resources")  # "humanresources"
        sanitize_tenant_name("R&D-Team 2")       # "rdteam2"
    """
    return _NON_ALNUM.sub("", name.lower())
