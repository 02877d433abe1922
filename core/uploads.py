"""
Upload checks shared by employee documents, driver proofs and payment images.
"""

import os

from django.conf import settings
from rest_framework import serializers

EXTENSION_TYPES = {
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.webp': 'image/webp',
    '.pdf': 'application/pdf',
}


def validate_document(file):
    """Reject files over ``MAX_UPLOAD_SIZE`` or outside ``ALLOWED_DOCUMENT_TYPES``."""
    if file is None:
        return file

    if file.size > settings.MAX_UPLOAD_SIZE:
        max_mb = settings.MAX_UPLOAD_SIZE / 1024 / 1024
        raise serializers.ValidationError(f"File size exceeds maximum allowed size of {max_mb:g}MB")

    content_type = getattr(file, 'content_type', None)
    if not content_type:
        content_type = EXTENSION_TYPES.get(os.path.splitext(file.name)[1].lower())
    if content_type not in settings.ALLOWED_DOCUMENT_TYPES:
        raise serializers.ValidationError("File type not allowed. Use JPG, PNG, WEBP or PDF.")

    return file
