from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError as SchemaValidationError

from board.errors import BoardError
from board.schemas.post_schema import (
    PostCreateSchema,
    RejectedFileSchema,
    UploadResponseSchema,
)
from board.services import post_service
from board.services.submission_service import Submission, SubmissionFailed
from board.services.upload_service import read_upload
from board.services.upload_validator import MULTI_FILE, SINGLE_IMAGE

post_bp = Blueprint("posts", __name__)


def _error_response(error: BoardError):
    return jsonify({"error": error.message}), error.status_code


def _submit_multipart(open_id):
    photo = request.files.get("photo")
    files = [
        f for f in (request.files.getlist("files") or request.files.getlist("files[]"))
        if f.filename
    ]
    if photo and files:
        return jsonify({"error": "Send either a photo or files, not both"}), 400

    if photo:
        mode, incoming = SINGLE_IMAGE, [read_upload(photo)]
    else:
        mode, incoming = MULTI_FILE, [read_upload(f) for f in files]

    submission = Submission(
        open_id,
        text=request.form.get("text"),
        files=incoming,
        mode=mode,
    )
    result = submission.run()
    return jsonify({
        "message": "Post created successfully",
        "id": result.post_id,
        "attachments": UploadResponseSchema(many=True).dump(result.attachments),
        "rejected": RejectedFileSchema(many=True).dump(result.rejected),
    }), 201


@post_bp.route("/posts", methods=["POST"])
@jwt_required()
def create_post():
    open_id = get_jwt_identity()
    content_type = (request.content_type or "").lower()

    try:
        if "multipart/form-data" in content_type:
            return _submit_multipart(open_id)

        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Invalid JSON body"}), 400

        try:
            payload = PostCreateSchema().load(data)
        except SchemaValidationError as e:
            return jsonify({"error": "Invalid post data", "details": e.messages}), 400

        post_id = post_service.create_post(
            open_id,
            text=payload["text"],
            attachments=payload["attachments"],
            photo_url=payload["photo_url"],
            photo_key=payload["photo_key"],
        )
        return jsonify({"message": "Post created successfully", "id": post_id}), 201
    except SubmissionFailed as e:
        return jsonify({
            "error": e.message,
            "rejected": RejectedFileSchema(many=True).dump(e.rejected),
        }), 400
    except BoardError as e:
        return _error_response(e)


@post_bp.route("/posts", methods=["GET"])
def list_posts():
    limit = request.args.get("limit", default=None, type=int)

    try:
        posts = post_service.list_feed(limit)
    except BoardError as e:
        return _error_response(e)
    return jsonify(post_service.serialize_feed(posts)), 200


@post_bp.route("/posts/<int:post_id>", methods=["DELETE"])
@jwt_required()
def delete_post(post_id):
    try:
        post_service.delete_post(get_jwt_identity(), post_id)
    except BoardError as e:
        return _error_response(e)
    return jsonify({"success": True}), 200
