import hmac

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required, unset_jwt_cookies

from board.services import auth_service


auth_bp = Blueprint("auth", __name__)


def _is_identity_callback():
    expected = current_app.config.get("IDENTITY_CALLBACK_SECRET") or ""
    supplied = request.headers.get("X-Identity-Secret", "")
    return bool(expected) and hmac.compare_digest(supplied.encode(), expected.encode())


@auth_bp.route("/session", methods=["POST"])
def create_session():
    if not current_app.config.get("IDENTITY_CALLBACK_SECRET"):
        return jsonify({"error": "Not found"}), 404
    if not _is_identity_callback():
        return jsonify({"error": "Invalid identity callback"}), 403

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON body"}), 400

    try:
        tokens = auth_service.sign_in(
            data.get("openId"),
            name=data.get("name"),
            email=data.get("email"),
            login_method=data.get("loginMethod"),
        )
        return jsonify(tokens), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@auth_bp.route("/me", methods=["GET"])
@jwt_required(optional=True)
def me():
    user = auth_service.get_current_user(get_jwt_identity())
    return jsonify(user.to_dict() if user else None), 200


@auth_bp.route("/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh_token():
    open_id = get_jwt_identity()
    return jsonify(auth_service.refresh_access_token(open_id)), 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    response = jsonify({"success": True})
    unset_jwt_cookies(response)
    return response, 200
