"""
Helpers shared by the repositories
"""
from typing import Any, Dict, Iterable, List, Tuple


def build_update_clause(changes: Dict[str, Any], allowed: Iterable[str]) -> Tuple[str, List[Any]]:
    """
    Build the SET clause of a partial UPDATE.

    Only whitelisted columns with a non-None value are included; updated_at
    is bumped whenever anything changes.

    Returns:
        Tuple of (set clause, parameter values). The clause is empty when
        there is nothing to update.
    """
    fields = []
    values = []

    for column in allowed:
        value = changes.get(column)
        if value is not None:
            fields.append(f"{column} = %s")
            values.append(value)

    if not fields:
        return "", []

    fields.append("updated_at = NOW()")
    return ", ".join(fields), values
