"""Registration, login and session routes."""

from __future__ import annotations

import logging

from flask import jsonify

from ...extensions import current_user_id, get_context, login_required, login_user, logout_user
from ...services import auth as auth_service
from ..common import json_body, serialize_user
from . import bp
from .forms import LoginForm, PasswordChangeForm, RegisterForm

logger = logging.getLogger("habitoid.auth")


@bp.post("/register")
def register():
    form = RegisterForm.model_validate(json_body())
    ctx = get_context()
    user = auth_service.create_user(
        username=form.username,
        password=form.password,
        email=form.email,
        first_name=form.first_name,
        last_name=form.last_name,
        session_factory=ctx.session_factory,
    )
    login_user(user.id)
    logger.info("User registered", extra={"user_id": user.id})
    return jsonify(serialize_user(user)), 201


@bp.post("/login")
def login():
    form = LoginForm.model_validate(json_body())
    user = auth_service.authenticate(
        username=form.username,
        password=form.password,
        session_factory=get_context().session_factory,
    )
    if user is None:
        logger.info("Failed login", extra={"username": form.username})
        return jsonify(message="Invalid username or password"), 401
    login_user(user.id)
    return jsonify(serialize_user(user))


@bp.post("/logout")
def logout():
    logout_user()
    return jsonify(success=True)


@bp.get("/user")
@login_required
def current_user():
    user = get_context().user_repo.get_by_id(current_user_id())
    return jsonify(serialize_user(user))


@bp.post("/password")
@login_required
def change_password():
    form = PasswordChangeForm.model_validate(json_body())
    auth_service.change_password(
        user_id=current_user_id(),
        current=form.current_password,
        new=form.new_password,
        session_factory=get_context().session_factory,
    )
    return jsonify(success=True)
