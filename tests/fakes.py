"""Stand-ins for the ffmpeg media processor."""
from tufo.services.media import MediaProcessingError


class FakeProcessor:
    def __init__(self, duration=10.0, fail=False):
        self.duration = duration
        self.fail = fail
        self.snapshots = []

    def duration_seconds(self, path):
        if self.fail:
            raise MediaProcessingError("ffprobe missing")
        return self.duration

    def snapshot(self, path, thumbnail_path, at_seconds):
        self.snapshots.append(at_seconds)
        with open(thumbnail_path, "wb") as f:
            f.write(b"jpg")
