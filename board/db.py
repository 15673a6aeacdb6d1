from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def utcnow():
    # Columns are naive UTC.
    return datetime.now(timezone.utc).replace(tzinfo=None)
