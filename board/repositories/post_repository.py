from sqlalchemy.orm import selectinload

from board.db import db
from board.models.post_model import Post
from board.repositories.attachment_repository import add_attachment


def create_post(user_id, text, attachments=()):
    post = Post(
        user_id=user_id,
        text=text
    )
    db.session.add(post)
    db.session.flush()

    for attachment in attachments:
        add_attachment(post, attachment)

    db.session.flush()
    return post


def list_posts(limit):
    return (
        Post.query
        .options(selectinload(Post.attachments))
        .order_by(Post.created_at.desc(), Post.id.desc())
        .limit(limit)
        .all()
    )


def get_post(post_id):
    return db.session.get(Post, post_id)


def delete_post(post):
    db.session.delete(post)
    db.session.flush()
