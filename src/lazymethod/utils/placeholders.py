"""Positional placeholder handling for SQL templates."""

from collections.abc import Iterator

PLACEHOLDER = "?"
QUOTES = ("'", '"', "`")
# Comment opener -> terminator
COMMENTS = {"--": "\n", "/*": "*/"}


def _scan(sql: str, backslash_escapes: bool = False) -> Iterator[tuple[str, bool]]:
    """Split ``sql`` into (text, literal) chunks.

    ``literal`` chunks are quoted strings, quoted identifiers and comments,
    where a ``?`` is not a placeholder; everything else comes one character
    at a time. A doubled quote closes one literal and opens the next, which
    leaves the state correct. With ``backslash_escapes`` (MySQL) a backslash
    inside a quoted string escapes the character after it.

    ``#`` line comments and PostgreSQL dollar quoting are not recognised.
    """
    i = 0
    length = len(sql)
    while i < length:
        char = sql[i]
        if char in QUOTES:
            end = i + 1
            while end < length and sql[end] != char:
                end += 2 if backslash_escapes and sql[end] == "\\" and char != "`" else 1
            end = min(end + 1, length)
        elif sql[i:i + 2] in COMMENTS:
            terminator = COMMENTS[sql[i:i + 2]]
            end = sql.find(terminator, i + 2)
            end = length if end == -1 else end + len(terminator)
        else:
            yield char, False
            i += 1
            continue
        yield sql[i:end], True
        i = end


def count_placeholders(sql: str, backslash_escapes: bool = False) -> int:
    """Count ``?`` placeholders outside literals, quoted identifiers and comments."""
    return sum(
        1 for text, literal in _scan(sql, backslash_escapes)
        if text == PLACEHOLDER and not literal
    )


def convert_placeholders(sql: str, paramstyle: str, backslash_escapes: bool = False) -> str:
    """Rewrite ``?`` placeholders for a driver's DB-API paramstyle.

    Args:
        sql: SQL template using ``?`` placeholders
        paramstyle: ``qmark``, ``format``, ``pyformat`` or ``numeric``
        backslash_escapes: Whether backslashes escape quotes in literals

    Returns:
        The SQL text the driver expects

    Raises:
        ValueError: If the paramstyle is not supported
    """
    if paramstyle == "qmark":
        return sql
    if paramstyle not in ("format", "pyformat", "numeric"):
        raise ValueError(f"Unsupported paramstyle: {paramstyle}")

    parts: list[str] = []
    position = 0
    for text, literal in _scan(sql, backslash_escapes):
        if text == PLACEHOLDER and not literal:
            position += 1
            parts.append(f":{position}" if paramstyle == "numeric" else "%s")
        elif paramstyle != "numeric":
            # format-style drivers treat a bare % as a directive, even in literals
            parts.append(text.replace("%", "%%"))
        else:
            parts.append(text)
    return "".join(parts)
