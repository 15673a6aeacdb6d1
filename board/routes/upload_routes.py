from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from board.errors import StorageError, ValidationError
from board.schemas.post_schema import PhotoUploadResponseSchema, UploadResponseSchema
from board.services.upload_service import read_upload, store_upload
from board.services.upload_validator import MULTI_FILE, SINGLE_IMAGE

upload_bp = Blueprint("uploads", __name__)


def _handle_upload(mode, schema):
    try:
        incoming = read_upload(request.files.get("file"))
        uploaded = store_upload(incoming, mode)
        return jsonify(schema.dump(uploaded)), 200
    except StorageError as e:
        return jsonify({"error": str(e)}), 500
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400


@upload_bp.route("/uploads/photo", methods=["POST"])
@jwt_required()
def upload_photo():
    return _handle_upload(SINGLE_IMAGE, PhotoUploadResponseSchema())


@upload_bp.route("/uploads/file", methods=["POST"])
@jwt_required()
def upload_file():
    return _handle_upload(MULTI_FILE, UploadResponseSchema())
