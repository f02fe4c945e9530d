from datetime import datetime
from typing import Any

def clean_metadata(md: dict[str, Any]) -> dict[str, Any]:
    """
    Pinecone metadata values must be:
      - string, number, boolean
      - list[str]
    Nulls are NOT allowed, so keys with None are removed.
    Datetimes are stored as ISO-8601 strings.
    """
    cleaned: dict[str, Any] = {}
    for k, v in md.items():
        if v is None:
            continue
        if isinstance(v, datetime):
            cleaned[k] = v.isoformat()
        elif isinstance(v, (str, int, float, bool)):
            cleaned[k] = v
        elif isinstance(v, list) and all(isinstance(x, str) for x in v):
            cleaned[k] = v
    return cleaned
