"""Shared FastAPI dependencies for external collaborators."""
from typing import Optional

from fastapi import Header

from tufo.clients import OpenBetaClient
from tufo.services.media import FFmpegMediaProcessor


def get_openbeta_client():
    client = OpenBetaClient.from_settings()
    try:
        yield client
    finally:
        client.close()


def get_media_processor():
    return FFmpegMediaProcessor()


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Caller identity as forwarded by the auth layer."""
    return x_user_id or None
