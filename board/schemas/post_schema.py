from marshmallow import ValidationError as SchemaValidationError
from marshmallow import EXCLUDE, validate, validates_schema

from board.errors import UploadRejected
from board.extensions.extensions import ma
from board.services.upload_validator import validate_attachment_metadata


class AttachmentInputSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    file_url = ma.Str(required=True, data_key="fileUrl", validate=validate.Length(min=1))
    file_key = ma.Str(required=True, data_key="fileKey", validate=validate.Length(min=1, max=255))
    file_name = ma.Str(required=True, data_key="fileName", validate=validate.Length(min=1, max=255))
    file_type = ma.Str(required=True, data_key="fileType", validate=validate.Length(min=1, max=100))
    file_size = ma.Int(required=True, data_key="fileSize", strict=True, validate=validate.Range(min=0))

    @validates_schema
    def check_upload_rules(self, data, **kwargs):
        try:
            validate_attachment_metadata(
                data["file_key"], data["file_type"], data["file_size"]
            )
        except UploadRejected as e:
            raise SchemaValidationError(e.message, field_name="fileKey") from e


class PostCreateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    text = ma.Str(load_default=None, allow_none=True)
    attachments = ma.List(
        ma.Nested(AttachmentInputSchema),
        load_default=list,
    )
    photo_url = ma.Str(data_key="photoUrl", load_default=None, allow_none=True)
    photo_key = ma.Str(data_key="photoKey", load_default=None, allow_none=True)

    @validates_schema
    def check_photo_fields(self, data, **kwargs):
        has_url = bool(data.get("photo_url"))
        has_key = bool(data.get("photo_key"))
        if has_url != has_key:
            raise SchemaValidationError(
                "photoUrl and photoKey must be sent together",
                field_name="photoKey",
            )
        if has_key and data.get("attachments"):
            raise SchemaValidationError(
                "Send either a photo or attachments, not both",
                field_name="attachments",
            )


class AuthorSchema(ma.Schema):
    id = ma.Int()
    name = ma.Str(allow_none=True)


class AttachmentSchema(ma.Schema):
    id = ma.Int()
    file_url = ma.Str(data_key="fileUrl")
    file_key = ma.Str(data_key="fileKey")
    file_name = ma.Str(data_key="fileName")
    file_type = ma.Str(data_key="fileType")
    file_size = ma.Int(data_key="fileSize")


class PostSchema(ma.Schema):
    id = ma.Int()
    text = ma.Str(allow_none=True)
    created_at = ma.DateTime(data_key="createdAt")
    author = ma.Nested(AuthorSchema)
    attachments = ma.List(ma.Nested(AttachmentSchema))
    photo_url = ma.Method("get_photo_url", data_key="photoUrl")

    def get_photo_url(self, post):
        for attachment in post.attachments:
            if attachment.is_image:
                return attachment.file_url
        return None


class UploadResponseSchema(ma.Schema):
    url = ma.Str(attribute="file_url")
    key = ma.Str(attribute="file_key")
    file_name = ma.Str(data_key="fileName")
    file_type = ma.Str(data_key="fileType")
    file_size = ma.Int(data_key="fileSize")


class PhotoUploadResponseSchema(ma.Schema):
    url = ma.Str(attribute="file_url")
    key = ma.Str(attribute="file_key")


class RejectedFileSchema(ma.Schema):
    file_name = ma.Str(data_key="fileName")
    reason = ma.Str()
    error = ma.Str(attribute="message")
