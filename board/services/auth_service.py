from flask_jwt_extended import create_access_token, create_refresh_token

from board.repositories import user_repository


def sign_in(open_id, name=None, email=None, login_method=None):
    """Record a sign-in posted by the identity callback to ``/api/auth/session``."""
    user = user_repository.upsert_user(
        open_id,
        name=name,
        email=email,
        login_method=login_method,
    )
    return {
        "access_token": create_access_token(identity=user.open_id),
        "refresh_token": create_refresh_token(identity=user.open_id),
    }


def refresh_access_token(open_id):
    return {
        "access_token": create_access_token(identity=open_id)
    }


def get_current_user(open_id):
    if not open_id:
        return None
    return user_repository.get_by_open_id(open_id)
