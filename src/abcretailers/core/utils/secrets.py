"""Helpers for printing configuration without leaking credentials."""


def mask_connection_string(conn_str: str) -> str:
    """Mask sensitive parts of connection string for display."""
    if not conn_str:
        return "not set"
    parts = []
    for part in conn_str.split(";"):
        if part.startswith("AccountKey="):
            parts.append("AccountKey=***masked***")
        elif part.startswith("SharedAccessSignature="):
            parts.append("SharedAccessSignature=***masked***")
        else:
            parts.append(part)
    return ";".join(parts)
