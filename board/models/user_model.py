from board.db import db, utcnow


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    # Identifier issued by the external identity provider.
    open_id = db.Column(db.String(64), unique=True, nullable=False)
    name = db.Column(db.Text, nullable=True)
    email = db.Column(db.String(320), nullable=True)
    login_method = db.Column(db.String(64), nullable=True)
    role = db.Column(
        db.Enum("user", "admin", name="user_role"),
        nullable=False,
        default="user",
    )
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
    last_signed_in = db.Column(db.DateTime, nullable=False, default=utcnow)

    @property
    def is_admin(self):
        return self.role == "admin"

    def to_dict(self):
        return {
            "id": self.id,
            "openId": self.open_id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }
