import logging
import posixpath

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from board.db import db
from board.errors import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    RepositoryError,
    ValidationError,
)
from board.extensions.blob_store import get_blob_store
from board.feed_events import notify_feed_changed
from board.repositories import post_repository, user_repository
from board.schemas.post_schema import PostSchema
from board.services.upload_service import UploadedAttachment
from board.services.upload_validator import validate_attachment_metadata


logger = logging.getLogger(__name__)


def require_user(open_id):
    user = user_repository.get_by_open_id(open_id) if open_id else None
    if not user:
        raise AuthenticationError("Please log in")
    return user


def clean_text(text):
    if text is None:
        return None
    if not isinstance(text, str):
        raise ValidationError("Text must be a string")

    text = text.strip()
    max_length = current_app.config["POST_TEXT_MAX_LENGTH"]
    if len(text) > max_length:
        raise ValidationError(f"Text must be at most {max_length} characters")
    return text or None


def _stored_attachment(file_key, file_url, file_name, missing_message):
    """Check a client-declared file against the blob store it claims to live in."""
    store = get_blob_store()
    if file_url != store.url_for(file_key):
        raise ValidationError("File URL does not match its key")

    try:
        info = store.stat(file_key)
    except NotFoundError as e:
        raise ValidationError(missing_message) from e

    validate_attachment_metadata(file_key, info.content_type, info.size)
    return UploadedAttachment(
        file_url=file_url,
        file_key=file_key,
        file_name=file_name,
        file_type=info.content_type,
        file_size=info.size,
    )


def _as_uploaded(item):
    # Attachments stored by this process are trusted; JSON metadata is not.
    if isinstance(item, UploadedAttachment):
        return item
    return _stored_attachment(
        item["file_key"],
        item["file_url"],
        item["file_name"],
        "Attachment was not uploaded",
    )


def _photo_attachment(photo_url, photo_key):
    """A single photo is kept as an ordinary image attachment."""
    return _stored_attachment(
        photo_key,
        photo_url,
        posixpath.basename(photo_key),
        "Photo was not uploaded",
    )


def create_post(open_id, text=None, attachments=None, photo_url=None, photo_key=None):
    user = require_user(open_id)
    text = clean_text(text)
    attachments = [_as_uploaded(item) for item in attachments or []]

    if bool(photo_url) != bool(photo_key):
        raise ValidationError("photoUrl and photoKey must be sent together")
    if photo_key:
        attachments.append(_photo_attachment(photo_url, photo_key))

    if text is None and not attachments:
        raise ValidationError("Post must have text or attachments")

    max_attachments = current_app.config["POST_MAX_ATTACHMENTS"]
    if len(attachments) > max_attachments:
        raise ValidationError(f"Maximum {max_attachments} attachments allowed")

    try:
        post = post_repository.create_post(user.id, text, attachments)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Could not save post for user %s: %s", user.id, e)
        raise RepositoryError("Post could not be saved") from e

    logger.info("User %s created post %s with %d attachment(s)",
                user.id, post.id, len(attachments))
    notify_feed_changed("created", post.id)
    return post.id


def list_feed(limit=None):
    feed_limit = current_app.config["FEED_LIMIT"]
    if limit is None or limit > feed_limit:
        limit = feed_limit
    if limit < 1:
        limit = 1

    try:
        return post_repository.list_posts(limit)
    except SQLAlchemyError as e:
        logger.error("Could not load feed: %s", e)
        raise RepositoryError("Feed is unavailable") from e


def serialize_feed(posts):
    return PostSchema(many=True).dump(posts)


def delete_post(open_id, post_id):
    user = require_user(open_id)

    post = post_repository.get_post(post_id)
    if not post:
        raise NotFoundError("Post not found")

    if (
        current_app.config.get("POST_DELETE_OWNER_ONLY")
        and post.user_id != user.id
        and not user.is_admin
    ):
        raise PermissionDeniedError("Only the author can delete this post")

    try:
        post_repository.delete_post(post)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Could not delete post %s: %s", post_id, e)
        raise RepositoryError("Post could not be deleted") from e

    logger.info("User %s deleted post %s", user.id, post_id)
    notify_feed_changed("deleted", post_id)
