"""Token helpers for API tests."""

from __future__ import annotations

from contextlib import nullcontext

from flask import Flask, current_app, has_app_context
from flask_jwt_extended import create_access_token


def bearer_headers(app: Flask, actor_id: int, role: str) -> dict[str, str]:
    """Issue an access token the way the identity service does.

    Parameters
    ----------
    app: flask.Flask
        Application whose ``JWT_SECRET_KEY`` signs the token.
    actor_id: int
        Trainer or student id stored as the token identity.
    role: str
        ``"trainer"`` or ``"student"`` claim.
    """
    # Reuse an active context for this app: popping a fresh one would tear
    # down the shared transactional test session.
    reuse = has_app_context() and current_app._get_current_object() is app
    with nullcontext() if reuse else app.app_context():
        token = create_access_token(identity=str(actor_id), additional_claims={"role": role})
    return {"Authorization": f"Bearer {token}"}
