import secrets

from flask import Request, session


def ensure_csrf_token() -> str:
    """Ensure a CSRF token exists in the session and return it."""
    token = session.get("csrf_token")
    if not token:
        token = secrets.token_urlsafe(32)
        session["csrf_token"] = token
    return token


def validate_csrf(req: Request) -> bool:
    """Validate the CSRF token sent by an HTML form (field or header)."""
    token = req.headers.get("X-CSRF-Token") or req.form.get("csrf_token")
    return bool(token and secrets.compare_digest(token.encode(), (session.get("csrf_token") or "").encode()))


def csrf_exempt_path(path: str) -> bool:
    # JSON API, static assets and stored files
    return path.startswith(("/api/", "/static/", "/uploads/", "/healthz"))
