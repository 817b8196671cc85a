"""Photo and short-video uploads for climbs.

Probing and thumbnailing are delegated to a media processor; the default
one shells out to ffprobe/ffmpeg.
"""
import json
import os
import subprocess
import uuid
import structlog
from typing import BinaryIO, Optional

from sqlalchemy.orm import Session

from tufo.config import Settings, get_settings
from tufo.db import Climb, Media, MediaType
from tufo.errors import NotFoundError, TufoError, ValidationFailure

log = structlog.get_logger()

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}
VIDEO_EXTENSIONS = {".mp4", ".webm", ".mov"}
CHUNK_SIZE = 1024 * 1024


class MediaProcessingError(TufoError):
    """The media processor could not read or thumbnail a file."""


class FFmpegMediaProcessor:
    """Video probing and snapshots through the ffmpeg command-line tools."""

    def __init__(self, ffprobe: str = "ffprobe", ffmpeg: str = "ffmpeg", timeout: float = 60.0):
        self.ffprobe = ffprobe
        self.ffmpeg = ffmpeg
        self.timeout = timeout

    def duration_seconds(self, path: str) -> float:
        output = self._run([
            self.ffprobe, "-v", "error",
            "-show_entries", "format=duration",
            "-of", "json", path,
        ])
        try:
            return float(json.loads(output)["format"]["duration"])
        except (ValueError, KeyError, TypeError) as e:
            raise MediaProcessingError(f"Could not read duration of {path}") from e

    def snapshot(self, path: str, thumbnail_path: str, at_seconds: float):
        self._run([
            self.ffmpeg, "-y", "-v", "error",
            "-ss", str(at_seconds),
            "-i", path,
            "-frames:v", "1",
            thumbnail_path,
        ])

    def _run(self, args: list[str]) -> str:
        try:
            completed = subprocess.run(args, capture_output=True, text=True, timeout=self.timeout, check=True)
        except (OSError, subprocess.SubprocessError) as e:
            raise MediaProcessingError(f"{args[0]} failed: {e}") from e
        return completed.stdout


def classify_upload(filename: str, content_type: Optional[str]) -> Optional[MediaType]:
    """Photo or Video from the content type or extension; None if neither."""
    ext = os.path.splitext(filename or "")[1].lower()
    content_type = (content_type or "").lower()

    if content_type.startswith("image/") or ext in IMAGE_EXTENSIONS:
        return MediaType.PHOTO
    if content_type.startswith("video/") or ext in VIDEO_EXTENSIONS:
        return MediaType.VIDEO
    return None


def _remove_quietly(path: str):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


class MediaService:
    """Stores uploads on disk and records them against climbs."""

    URL_PREFIX = "/uploads"

    def __init__(self, session: Session, processor=None, settings: Optional[Settings] = None):
        self.session = session
        self.processor = processor or FFmpegMediaProcessor()
        self.settings = settings or get_settings()

    def attach_upload(
        self,
        climb_id: int,
        filename: str,
        content_type: Optional[str],
        stream: BinaryIO,
        caption: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Media:
        """
        Save an uploaded photo or video and attach it to a climb.

        Raises:
            NotFoundError: the climb does not exist
            ValidationFailure: empty, too large, unsupported, too long or
                unreadable; the saved file is removed first
        """
        if not self.session.get(Climb, climb_id):
            raise NotFoundError(f"Climb {climb_id} not found")

        upload_dir = self.settings.upload_dir
        os.makedirs(upload_dir, exist_ok=True)

        ext = os.path.splitext(filename or "")[1].lower()
        stored_name = f"{uuid.uuid4()}{ext}"
        full_path = os.path.join(upload_dir, stored_name)

        size = self._save(stream, full_path)
        thumbnail_path = None

        try:
            if size == 0:
                raise ValidationFailure("No file uploaded.")

            media_type = classify_upload(filename, content_type)
            if media_type is None:
                raise ValidationFailure("Only images (jpg/png/webp) or videos (mp4/webm/mov) are allowed.")

            media = Media(
                climb_id=climb_id,
                user_id=user_id,
                type=media_type,
                url=f"{self.URL_PREFIX}/{stored_name}",
                caption=caption,
                bytes=size,
            )

            if media_type is MediaType.VIDEO:
                thumbnail_path = self._process_video(media, full_path, stored_name)

            self.session.add(media)
            self.session.commit()
            self.session.refresh(media)

        except Exception:
            self.session.rollback()
            _remove_quietly(full_path)
            if thumbnail_path:
                _remove_quietly(thumbnail_path)
            raise

        log.info("media_uploaded", climb_id=climb_id, media_id=media.id, type=media.type.value, bytes=size)
        return media

    def _save(self, stream: BinaryIO, full_path: str) -> int:
        """Copy the upload to disk, enforcing the size cap."""
        size = 0
        try:
            with open(full_path, "wb") as out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.settings.max_upload_bytes:
                        raise ValidationFailure("File is too large.")
                    out.write(chunk)
        except BaseException:
            # Partial writes never stay on disk
            _remove_quietly(full_path)
            raise
        return size

    def _process_video(self, media: Media, full_path: str, stored_name: str) -> str:
        """Fill duration and thumbnail; returns the thumbnail path."""
        try:
            duration = int(round(self.processor.duration_seconds(full_path)))
        except Exception as e:
            log.warning("video_probe_failed", path=full_path, error=str(e))
            raise ValidationFailure("Could not analyse video. Ensure FFmpeg is installed.") from e

        if duration > self.settings.max_video_seconds:
            raise ValidationFailure(f"Video must be {self.settings.max_video_seconds} seconds or less.")
        media.duration_seconds = duration

        thumbnail_name = f"{os.path.splitext(stored_name)[0]}.jpg"
        thumbnail_path = os.path.join(self.settings.upload_dir, thumbnail_name)
        try:
            self.processor.snapshot(full_path, thumbnail_path, min(1, duration))
        except Exception as e:
            log.warning("video_thumbnail_failed", path=full_path, error=str(e))
            raise ValidationFailure("Could not analyse video. Ensure FFmpeg is installed.") from e

        media.thumbnail_url = f"{self.URL_PREFIX}/{thumbnail_name}"
        return thumbnail_path
