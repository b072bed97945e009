"""
core.domain.uploads — Purpose-routed file intake.

Uploads are partitioned by the form field they arrive in:

    profile_pic              → profile_pics/
    document / service_doc   → service_docs/
    proof_file               → payments/
    anything else            → MEDIA_ROOT itself

Stored names follow ``{fieldname}-{timestamp_ms}-{random}{ext}``.  Names are
not content-addressed; the random suffix makes collisions practically
impossible, and Django's storage still de-duplicates if one happens.

Files are written by the storage backend when the owning row is saved,
i.e. *inside* the service's transaction.  ``discard_on_failure`` removes
whatever was written if that transaction rolls back, so a failed
operation leaves neither a row nor an orphan file.
"""

from __future__ import annotations

import contextlib
import logging
import os
import random
import time
from typing import Callable, Iterator

from django.db.models.fields.files import FieldFile
from django.utils.deconstruct import deconstructible

logger = logging.getLogger(__name__)

#: Form field name → storage sub-directory.
UPLOAD_DIRECTORIES: dict[str, str] = {
    "profile_pic": "profile_pics",
    "document": "service_docs",
    "service_doc": "service_docs",
    "proof_file": "payments",
}


def directory_for_field(fieldname: str) -> str:
    """Return the storage sub-directory for an upload field ('' = root)."""
    return UPLOAD_DIRECTORIES.get(fieldname, "")


def build_stored_name(fieldname: str, original_name: str) -> str:
    """
    Build ``{fieldname}-{timestamp_ms}-{random}{ext}`` for an upload.

    The extension is taken from the client-supplied name and lowercased;
    everything else in the client name is discarded.
    """
    _, ext = os.path.splitext(os.path.basename(original_name or ""))
    unique = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{fieldname}-{unique}{ext.lower()}"


@deconstructible
class PurposeUploadPath:
    """
    ``upload_to`` callable that routes a file by the form field it came from.

    Deconstructible so that migrations can serialise it::

        file = models.FileField(upload_to=PurposeUploadPath("proof_file"))
    """

    def __init__(self, fieldname: str) -> None:
        self.fieldname = fieldname

    def __call__(self, instance, filename: str) -> str:
        name = build_stored_name(self.fieldname, filename)
        directory = directory_for_field(self.fieldname)
        return f"{directory}/{name}" if directory else name

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PurposeUploadPath) and other.fieldname == self.fieldname

    def __hash__(self) -> int:
        return hash(self.fieldname)


@contextlib.contextmanager
def discard_on_failure() -> Iterator[Callable[[FieldFile], None]]:
    """
    Track stored files and delete them if the enclosed block raises.

    Enter this *outside* the ``transaction.atomic()`` block so the
    rollback has already happened when the files are removed::

        with discard_on_failure() as track, transaction.atomic():
            payment = Payment.objects.create(proof_file=upload, ...)
            track(payment.proof_file)
            ...

    The original exception is always re-raised.
    """
    stored: list[FieldFile] = []
    try:
        yield stored.append
    except BaseException:
        for field_file in stored:
            if not field_file.name:
                continue
            try:
                field_file.storage.delete(field_file.name)
            except OSError:
                logger.exception("Could not discard stored upload %s", field_file.name)
            else:
                logger.info("Discarded upload %s after failed operation", field_file.name)
        raise
