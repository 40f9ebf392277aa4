"""
repositories/singer_query.py
----------------------------
Builds the parameterized SELECT used to list singers.
"""

from models.singer import FilterPayload, as_date
from repositories.singer_row import COLUMNS, TABLE_NAME

SELECT_SQL = f"SELECT {', '.join(COLUMNS)} FROM {TABLE_NAME}"


def like_pattern(name: str) -> str:
    """Wrap `name` for a LIKE substring match, escaping LIKE metacharacters."""
    escaped = name.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_filter_query(filter: FilterPayload) -> tuple[str, dict]:
    """
    Build the SQL and named parameters for listing singers.

    Each condition present in the filter adds one AND-ed clause. With no
    conditions the query is a full scan. All parameters are always bound,
    whether or not the SQL references them. Row order is not specified.

    Args:
        filter: The filter conditions.

    Returns:
        (sql, params) ready for `cursor.execute`.
    """
    start = as_date(filter.birth_date_start)
    end = as_date(filter.birth_date_end)

    clauses: list[str] = []
    if filter.name:
        clauses.append("(first_name LIKE %(name)s OR last_name LIKE %(name)s)")
    if start is not None:
        clauses.append("birth_date >= %(birth_date_start)s")
    if end is not None:
        clauses.append("birth_date <= %(birth_date_end)s")

    sql = SELECT_SQL
    if clauses:
        sql += " WHERE " + " AND ".join(clauses)
    sql += ";"

    params = {
        "name": like_pattern(filter.name or ""),
        "birth_date_start": start,
        "birth_date_end": end,
    }
    return sql, params
