"""JSON error responses for the API."""

from __future__ import annotations

import logging

from flask import Flask, jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger("habitoid.errors")


class NotFoundError(LookupError):
    """A requested record does not exist or belongs to another user."""


def validation_messages(exc: ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by their top-level field."""

    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = str(loc[0]) if loc else "__root__"
        structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
    return structured


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _invalid_request(exc: ValidationError):
        return jsonify(message="Invalid request", errors=validation_messages(exc)), 400

    @app.errorhandler(ValueError)
    def _bad_request(exc: ValueError):
        return jsonify(message=str(exc) or "Bad request"), 400

    @app.errorhandler(NotFoundError)
    def _not_found(exc: NotFoundError):
        message = exc.args[0] if exc.args else "Not found"
        return jsonify(message=str(message)), 404

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        if exc.code == 401:
            message = "Unauthorized"
        else:
            message = exc.description or exc.name
        return jsonify(message=message), exc.code

    @app.errorhandler(Exception)
    def _server_error(exc: Exception):
        logger.error("Unhandled error: %s", exc, exc_info=True)
        return jsonify(message="Internal server error"), 500


__all__ = ["NotFoundError", "register_error_handlers", "validation_messages"]
