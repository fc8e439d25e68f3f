"""Flask wiring for the application context and session login."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, TypeVar

from flask import Flask, current_app, session
from werkzeug.exceptions import Unauthorized

from .context import AppContext

EXTENSION_KEY = "habitoid"
SESSION_USER_KEY = "user_id"

F = TypeVar("F", bound=Callable[..., Any])


def init_context(app: Flask, ctx: AppContext) -> None:
    """Attach the shared context so blueprints can reach repositories."""

    app.extensions[EXTENSION_KEY] = ctx


def get_context() -> AppContext:
    ctx = current_app.extensions.get(EXTENSION_KEY)
    if ctx is None:  # pragma: no cover - create_app always installs it
        raise RuntimeError("Application context not initialized")
    return ctx


def login_user(user_id: int) -> None:
    session.clear()
    session[SESSION_USER_KEY] = user_id
    session.permanent = True


def logout_user() -> None:
    session.clear()


def current_user_id() -> int:
    user_id = session.get(SESSION_USER_KEY)
    if user_id is None:
        raise Unauthorized()
    return int(user_id)


def login_required(view: F) -> F:
    """Reject requests without a logged-in user (401)."""

    @wraps(view)
    def wrapped(*args: Any, **kwargs: Any) -> Any:
        user_id = current_user_id()
        if get_context().user_repo.get_by_id(user_id) is None:
            session.clear()
            raise Unauthorized()
        return view(*args, **kwargs)

    return wrapped  # type: ignore[return-value]


__all__ = [
    "current_user_id",
    "get_context",
    "init_context",
    "login_required",
    "login_user",
    "logout_user",
]
