"""Post submission with file attachments.

A ``Submission`` validates and stores each file, then creates the post once
with everything that made it through. Blob writes happen before the post row
is written; if the post cannot be saved the stored blobs are left behind.
"""

import logging
from dataclasses import dataclass, field

from flask import current_app

from board.errors import BoardError, StorageError, ValidationError
from board.services import post_service
from board.services.upload_service import IncomingFile, UploadedAttachment, store_upload
from board.services.upload_validator import SINGLE_IMAGE, UPLOAD_MODES, validate_upload


logger = logging.getLogger(__name__)

IDLE = "idle"
VALIDATING = "validating"
UPLOADING = "uploading"
SUBMITTING = "submitting"
DONE = "done"
FAILED = "failed"


@dataclass(frozen=True)
class RejectedFile:
    file_name: str
    reason: str
    message: str


@dataclass
class SubmissionResult:
    post_id: int
    attachments: list[UploadedAttachment] = field(default_factory=list)
    rejected: list[RejectedFile] = field(default_factory=list)


class SubmissionFailed(ValidationError):
    """The post was not created; ``rejected`` lists the files that failed."""

    def __init__(self, message: str, rejected=()):
        super().__init__(message)
        self.rejected = list(rejected)


class Submission:
    def __init__(self, open_id, text=None, files=(), mode=SINGLE_IMAGE):
        if mode not in UPLOAD_MODES:
            raise ValueError(f"Unknown upload mode: {mode}")

        self.open_id = open_id
        self.text = text
        self.files: list[IncomingFile] = list(files)
        self.mode = mode
        self.state = IDLE
        self.error = None
        self.rejected: list[RejectedFile] = []
        self.attachments: list[UploadedAttachment] = []

    @property
    def aborts_on_file_error(self):
        return self.mode == SINGLE_IMAGE

    def _reject(self, incoming: IncomingFile, error: BoardError):
        reason = getattr(error, "reason", "upload_failed")
        self.rejected.append(RejectedFile(incoming.file_name, reason, error.message))
        if self.aborts_on_file_error:
            raise error

    def _validate(self):
        self.state = VALIDATING
        if self.mode == SINGLE_IMAGE and len(self.files) > 1:
            raise ValidationError("Only one photo can be attached")
        max_attachments = current_app.config["POST_MAX_ATTACHMENTS"]
        if len(self.files) > max_attachments:
            raise ValidationError(f"Maximum {max_attachments} attachments allowed")

        accepted = []
        for incoming in self.files:
            try:
                validate_upload(incoming.mime_type, incoming.size, self.mode)
            except ValidationError as e:
                self._reject(incoming, e)
                continue
            accepted.append(incoming)
        return accepted

    def _upload(self, accepted):
        self.state = UPLOADING
        for incoming in accepted:
            try:
                self.attachments.append(store_upload(incoming, self.mode))
            except StorageError as e:
                self._reject(incoming, e)

    def _submit(self):
        self.state = SUBMITTING
        if self.text is None and not self.attachments:
            raise SubmissionFailed(
                "Post must have text or attachments", self.rejected
            )

        return post_service.create_post(
            self.open_id,
            text=self.text,
            attachments=self.attachments,
        )

    def run(self) -> SubmissionResult:
        if self.state != IDLE:
            raise RuntimeError("Submission has already run")

        try:
            post_service.require_user(self.open_id)
            self.text = post_service.clean_text(self.text)
            accepted = self._validate()
            self._upload(accepted)
            post_id = self._submit()
        except BoardError as e:
            self.state = FAILED
            self.error = e
            logger.info("Submission failed for %s: %s", self.open_id, e)
            raise

        self.state = DONE
        return SubmissionResult(
            post_id=post_id,
            attachments=list(self.attachments),
            rejected=list(self.rejected),
        )
