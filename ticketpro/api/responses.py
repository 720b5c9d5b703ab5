from typing import Any


def ok(data: Any = None, message: str = "OK") -> dict:
    out = {"success": True, "message": message}
    if data is not None:
        out["data"] = data
    return out


def fail(message: str, errors: list | None = None, **extra) -> dict:
    out = {"success": False, "message": message}
    if errors:
        out["errors"] = errors
    out.update(extra)
    return out
