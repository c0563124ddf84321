import hashlib

from flask import current_app, has_request_context, request


def client_fingerprint() -> str:
    """
    Stable per-client hash: forwarded IP + User-Agent + FP_SALT.
    Truncated to 32 chars; never stored alongside the raw inputs.
    """
    if not has_request_context():
        return "noctx"
    ip = (
        request.headers.get("X-Forwarded-For", "")
        or request.headers.get("CF-Connecting-IP", "")
        or request.remote_addr
        or ""
    )
    ua = request.headers.get("User-Agent", "")
    salt = current_app.config.get("FP_SALT", "")
    raw = f"{ip}|{ua}|{salt}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:32]


def anon_id(explicit=None) -> str:
    """Body-supplied id wins, then the X-Anon-Id header, then the fingerprint."""
    for candidate in (explicit, request.headers.get("X-Anon-Id") if has_request_context() else None):
        value = (candidate or "").strip()
        if len(value) > 5:
            return value[:128]
    return f"anon_{client_fingerprint()}"
