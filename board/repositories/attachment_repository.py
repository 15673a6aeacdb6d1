from board.db import db
from board.models.attachment_model import Attachment


def add_attachment(post, uploaded):
    attachment = Attachment(
        post_id=post.id,
        file_url=uploaded.file_url,
        file_key=uploaded.file_key,
        file_name=uploaded.file_name,
        file_type=uploaded.file_type,
        file_size=uploaded.file_size,
    )
    post.attachments.append(attachment)
    db.session.add(attachment)
    return attachment
