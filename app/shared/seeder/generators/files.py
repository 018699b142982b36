"""File record generator."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.shared.seeder.config import FileConfig
    from app.shared.seeder.fixtures import FixtureGenerator


STORAGE_BASE_URL = "https://taskhub-files.s3.amazonaws.com"

# file_type -> (name prefixes, original names, mime types, (min_kb, max_kb), folder, extensions, tags)
FILE_TYPES: dict[str, dict[str, Any]] = {
    "image": {
        "prefixes": ["screenshot", "photo", "image", "design", "mockup"],
        "names": ["screenshot.png", "design-mockup.jpg", "photo-2024.png", "ui-wireframe.png"],
        "mime_types": ["image/png", "image/jpeg", "image/gif", "image/webp"],
        "size_kb": (50, 5000),
        "folder": "uploads/images",
        "extensions": ["png", "jpg", "jpeg", "gif", "webp"],
        "tags": ["image", "visual", "design"],
    },
    "document": {
        "prefixes": ["document", "report", "proposal", "contract", "manual"],
        "names": ["project-proposal.pdf", "technical-spec.docx", "meeting-notes.txt", "requirements.pdf"],
        "mime_types": [
            "application/pdf",
            "application/msword",
            "text/plain",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ],
        "size_kb": (100, 10000),
        "folder": "uploads/documents",
        "extensions": ["pdf", "doc", "docx", "txt"],
        "tags": ["document", "text", "pdf"],
    },
    "video": {
        "prefixes": ["video", "recording", "demo", "tutorial", "presentation"],
        "names": ["demo-recording.mp4", "tutorial-video.mov", "presentation.mp4", "walkthrough.webm"],
        "mime_types": ["video/mp4", "video/quicktime", "video/webm", "video/avi"],
        "size_kb": (1000, 100000),
        "folder": "uploads/videos",
        "extensions": ["mp4", "mov", "webm", "avi"],
        "tags": ["video", "media", "recording"],
    },
    "audio": {
        "prefixes": ["audio", "recording", "podcast", "music", "sound"],
        "names": ["meeting-recording.mp3", "podcast-episode.wav", "voice-note.m4a", "music-track.mp3"],
        "mime_types": ["audio/mpeg", "audio/wav", "audio/mp4", "audio/ogg"],
        "size_kb": (500, 50000),
        "folder": "uploads/audio",
        "extensions": ["mp3", "wav", "m4a", "ogg"],
        "tags": ["audio", "sound", "recording"],
    },
    "archive": {
        "prefixes": ["backup", "archive", "package", "bundle", "compressed"],
        "names": ["backup-2024.zip", "project-files.tar.gz", "data-export.rar", "source-code.zip"],
        "mime_types": ["application/zip", "application/x-tar", "application/x-rar-compressed", "application/gzip"],
        "size_kb": (200, 20000),
        "folder": "uploads/archives",
        "extensions": ["zip", "tar.gz", "rar", "7z"],
        "tags": ["archive", "compressed", "backup"],
    },
    "code": {
        "prefixes": ["script", "module", "component", "library", "config"],
        "names": ["main.js", "component.tsx", "config.json", "utils.py", "styles.css"],
        "mime_types": ["application/javascript", "text/plain", "application/json", "text/css"],
        "size_kb": (1, 100),
        "folder": "uploads/code",
        "extensions": ["js", "ts", "json", "css", "py"],
        "tags": ["code", "script", "development"],
    },
    "spreadsheet": {
        "prefixes": ["data", "report", "analysis", "budget", "inventory"],
        "names": ["budget-2024.xlsx", "data-analysis.csv", "inventory.xls", "reports.xlsx"],
        "mime_types": [
            "application/vnd.ms-excel",
            "text/csv",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        ],
        "size_kb": (50, 2000),
        "folder": "uploads/spreadsheets",
        "extensions": ["xlsx", "xls", "csv"],
        "tags": ["data", "spreadsheet", "analysis"],
    },
    "presentation": {
        "prefixes": ["slides", "presentation", "deck", "pitch", "report"],
        "names": ["project-pitch.pptx", "quarterly-review.key", "team-update.pdf", "strategy-deck.pptx"],
        "mime_types": [
            "application/vnd.ms-powerpoint",
            "application/vnd.openxmlformats-officedocument.presentationml.presentation",
            "application/pdf",
        ],
        "size_kb": (200, 5000),
        "folder": "uploads/presentations",
        "extensions": ["pptx", "ppt", "pdf", "key"],
        "tags": ["presentation", "slides", "deck"],
    },
}

ENCODINGS = ["UTF-8", "ASCII", "ISO-8859-1", "UTF-16"]


class FileGenerator:
    """Generator for uploaded-file records with type-specific metadata."""

    def __init__(self, fixtures: FixtureGenerator, config: FileConfig) -> None:
        self.fixtures = fixtures
        self.config = config

    def generate(
        self,
        users: Sequence[Mapping[str, Any]],
        tasks: Sequence[Mapping[str, Any]],
    ) -> list[dict[str, Any]]:
        """Generate file candidates.

        Args:
            users: Uploaders (must not be empty).
            tasks: Tasks a file may be attached to (may be empty).

        Returns:
            ``config.count`` file dictionaries.
        """
        return [self.build(users, tasks) for _ in range(self.config.count)]

    def build(self, users: Sequence[Mapping[str, Any]], tasks: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
        fx = self.fixtures
        file_type = fx.choice(list(FILE_TYPES))
        file_kind = FILE_TYPES[file_type]
        uploader = fx.choice(users)
        task = fx.choice(tasks) if tasks and fx.boolean(0.8) else None
        extension = fx.choice(file_kind["extensions"])
        filename = (
            f"{fx.choice(file_kind['prefixes'])}_{int(fx.reference_time.timestamp())}_{fx.alphanumeric(8)}.{extension}"
        )
        path = f"{file_kind['folder']}/{filename}"
        size = fx.integer(*file_kind["size_kb"]) * 1024
        created_at, updated_at = fx.timestamps(90)

        return {
            "_id": fx.object_id(),
            "filename": filename,
            "original_name": fx.choice(file_kind["names"]),
            "file_type": file_type,
            "mime_type": fx.choice(file_kind["mime_types"]),
            "size": size,
            "path": path,
            "url": f"{STORAGE_BASE_URL}/{path}",
            "uploaded_by": uploader["_id"],
            "task": task["_id"] if task else None,
            "board": task.get("board") if task else None,
            "workspace": task.get("workspace") if task else None,
            "tags": list(file_kind["tags"]),
            "metadata": self.metadata(file_type),
            "checksum": fx.alphanumeric(64),
            "permissions": {
                "is_public": fx.boolean(0.3),
                "allow_download": fx.boolean(0.8),
                "allow_edit": fx.boolean(0.4),
                "allow_delete": fx.boolean(0.2),
                "allowed_users": [user["_id"] for user in fx.pick_many(users, 0, 3)],
            },
            "versions": self.versions(size, uploader["_id"], created_at) if fx.boolean(0.2) else [],
            "downloads": fx.integer(0, 100),
            "views": fx.integer(0, 500),
            "is_archived": fx.boolean(0.1),
            "created_at": created_at,
            "updated_at": updated_at,
        }

    def metadata(self, file_type: str) -> dict[str, Any]:
        """Type-specific metadata: dimensions, duration or page count."""
        fx = self.fixtures
        metadata: dict[str, Any] = {
            "encoding": fx.choice(ENCODINGS),
            "virus_scanned": fx.boolean(0.9),
        }
        if file_type == "image":
            metadata["width"] = fx.integer(800, 4000)
            metadata["height"] = fx.integer(600, 3000)
        elif file_type in ("video", "audio"):
            metadata["duration"] = fx.integer(30, 3600)
        elif file_type == "document":
            metadata["pages"] = fx.integer(1, 50)
        return metadata

    def versions(self, size: int, uploader: str, created_at: Any) -> list[dict[str, Any]]:
        fx = self.fixtures
        return [
            {
                "version": number,
                "size": max(1024, size + fx.integer(-1024, 1024) * number),
                "uploaded_by": uploader,
                "uploaded_at": fx.datetime_between(created_at, fx.reference_time),
                "checksum": fx.alphanumeric(64),
            }
            for number in range(1, fx.integer(1, 3) + 1)
        ]
