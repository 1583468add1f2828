"""
SQL helpers shared by the CRUD modules.
"""

from typing import Any, Dict, List, Mapping, Tuple

from jobly.core.exceptions import BadRequestError


def sql_for_partial_update(
    data: Mapping[str, Any],
    js_to_sql: Dict[str, str],
) -> Tuple[str, List[Any]]:
    """
    Build the SET clause of a partial UPDATE.

    Only the keys present in `data` are assigned, in iteration order.
    Keys missing from `js_to_sql` are used verbatim as the column name.

    Args:
        data: Field name -> new value, e.g. {"firstName": "Aliya", "age": 32}
        js_to_sql: Field name -> column name, e.g. {"firstName": "first_name"}

    Returns:
        ('"first_name"=$1, "age"=$2', ["Aliya", 32])

    Raises:
        BadRequestError: If data is empty

    The caller binds its WHERE value as ${len(values) + 1}.
    """
    if not data:
        raise BadRequestError("No data")

    cols = [
        f'"{js_to_sql.get(field, field)}"=${idx}'
        for idx, field in enumerate(data, start=1)
    ]

    return ", ".join(cols), list(data.values())
