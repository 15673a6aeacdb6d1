from flask import current_app

from board.db import db, utcnow
from board.models.user_model import User


def get_by_id(user_id: int):
    return db.session.get(User, user_id)


def get_by_open_id(open_id: str):
    return User.query.filter_by(open_id=open_id).first()


def upsert_user(open_id, name=None, email=None, login_method=None, role=None):
    """Insert or update the user keyed on ``open_id``.

    Only the fields that are passed change; the sign-in time is always
    refreshed. The configured owner is stored as an admin.
    """
    if not isinstance(open_id, str) or not open_id.strip():
        raise ValueError("User open_id is required for upsert")

    open_id = open_id.strip()
    if role is None and open_id == current_app.config.get("OWNER_OPEN_ID"):
        role = "admin"

    user = get_by_open_id(open_id)
    if user is None:
        user = User(open_id=open_id)
        db.session.add(user)

    if name is not None:
        user.name = name
    if email is not None:
        user.email = email
    if login_method is not None:
        user.login_method = login_method
    if role is not None:
        user.role = role
    user.last_signed_in = utcnow()

    db.session.commit()
    return user
