from board.db import db, utcnow


class Post(db.Model):
    __tablename__ = "posts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    text = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    author = db.relationship("User", lazy="joined")

    attachments = db.relationship(
        "Attachment",
        backref="post",
        lazy="select",
        cascade="all, delete-orphan",
        order_by="Attachment.id",
    )
