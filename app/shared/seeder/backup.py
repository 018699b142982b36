"""File-system snapshots of the document store and rollback.

Layout of one snapshot::

    <backup_dir>/<backup_id>/
        metadata.json
        <collection>.json     # one per non-empty collection
"""

from __future__ import annotations

import asyncio
import json
import shutil
import sys
import uuid
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from app.core.config import get_settings
from app.core.exceptions import BackupError, NotFoundError, PersistenceError, RestoreError
from app.core.logging import get_logger, run_id_ctx

if TYPE_CHECKING:
    from app.shared.documents import DocumentStore

logger = get_logger(__name__)

BACKUP_FORMAT_VERSION = "1.0"
METADATA_FILE = "metadata.json"


def new_backup_id(now: datetime | None = None) -> str:
    """``backup-<ISO timestamp>`` with ``:`` and ``.`` replaced by ``-``."""
    stamp = (now or datetime.now(UTC)).isoformat()
    return "backup-" + stamp.replace(":", "-").replace(".", "-")


def _write_snapshot(
    target: Path,
    collections: dict[str, list[dict[str, Any]]],
    metadata: dict[str, Any],
) -> None:
    for name, documents in collections.items():
        (target / f"{name}.json").write_text(
            json.dumps(documents, indent=2, default=str),
            encoding="utf-8",
        )
    (target / METADATA_FILE).write_text(json.dumps(metadata, indent=2), encoding="utf-8")


def _read_documents(path: Path) -> list[dict[str, Any]]:
    documents: list[dict[str, Any]] = json.loads(path.read_text(encoding="utf-8"))
    return documents


class BackupManager:
    """Creates, lists, restores and prunes snapshots of a document store."""

    def __init__(self, store: DocumentStore, backup_dir: str | Path | None = None) -> None:
        """Initialize the manager.

        Args:
            store: Store to snapshot and restore.
            backup_dir: Snapshot root (defaults to ``settings.seeder_backup_dir``).
        """
        self.store = store
        self.backup_dir = Path(backup_dir or get_settings().seeder_backup_dir)

    def _path(self, backup_id: str) -> Path:
        return self.backup_dir / backup_id

    def _read_metadata(self, backup_id: str) -> dict[str, Any]:
        path = self._path(backup_id) / METADATA_FILE
        if not path.is_file():
            raise NotFoundError(f"Backup not found: {backup_id}", details={"backup_id": backup_id})
        try:
            metadata: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise BackupError(
                f"Unreadable backup metadata: {backup_id}",
                details={"backup_id": backup_id, "error": str(e)},
            ) from e
        return metadata

    # -------------------------------------------------------------------------
    # Snapshot / restore
    # -------------------------------------------------------------------------

    async def create_backup(self, description: str = "Manual backup") -> str:
        """Snapshot every non-empty collection.

        Args:
            description: Free-text label stored in the metadata.

        Returns:
            The new backup id.

        Raises:
            BackupError: If the store cannot be read, the snapshot directory
                already exists or the files cannot be written. Only a
                directory created by this call is removed on failure.
        """
        now = datetime.now(UTC)
        backup_id = new_backup_id(now)
        target = self._path(backup_id)
        token = run_id_ctx.set(run_id_ctx.get() or uuid.uuid4().hex[:12])
        created = False
        try:
            logger.info("seeder.backup.started", backup_id=backup_id, description=description)
            try:
                collections: dict[str, list[dict[str, Any]]] = {}
                for name in await self.store.list_collections():
                    documents = await self.store.collection(name).find()
                    if documents:
                        collections[name] = documents

                target.mkdir(parents=True, exist_ok=False)
                created = True
                metadata = {
                    "id": backup_id,
                    "timestamp": now.isoformat(),
                    "description": description,
                    "collections": sorted(collections),
                    "counts": {name: len(docs) for name, docs in collections.items()},
                    "total_documents": sum(len(docs) for docs in collections.values()),
                    "database": self.store.name,
                    "version": BACKUP_FORMAT_VERSION,
                }
                await asyncio.to_thread(_write_snapshot, target, collections, metadata)
            except FileExistsError as e:
                logger.error("seeder.backup.exists", backup_id=backup_id)
                raise BackupError(
                    f"Backup already exists: {backup_id}",
                    details={"backup_id": backup_id},
                ) from e
            except (OSError, PersistenceError) as e:
                logger.error("seeder.backup.failed", backup_id=backup_id, error=str(e), exc_info=True)
                if created:
                    shutil.rmtree(target, ignore_errors=True)
                raise BackupError(
                    f"Failed to create backup {backup_id}: {e}",
                    details={"backup_id": backup_id},
                ) from e

            logger.info(
                "seeder.backup.completed",
                backup_id=backup_id,
                collections=len(metadata["collections"]),
                documents=metadata["total_documents"],
            )
            return backup_id
        finally:
            run_id_ctx.reset(token)

    async def restore_backup(self, backup_id: str) -> dict[str, int]:
        """Replace the store contents with a snapshot.

        Every collection is cleared first, then each collection named in the
        metadata is bulk-loaded. A failure part-way leaves the store as it
        is at that point.

        Args:
            backup_id: Snapshot to restore.

        Returns:
            Documents restored per collection.

        Raises:
            NotFoundError: If the snapshot does not exist.
            RestoreError: If clearing or loading fails.
        """
        metadata = self._read_metadata(backup_id)
        token = run_id_ctx.set(run_id_ctx.get() or uuid.uuid4().hex[:12])
        restored: dict[str, int] = {}
        try:
            logger.info("seeder.restore.started", backup_id=backup_id)
            try:
                await self.store.clear_all()
                for name in metadata.get("collections", []):
                    path = self._path(backup_id) / f"{name}.json"
                    documents = await asyncio.to_thread(_read_documents, path)
                    restored[name] = await self.store.collection(name).insert_many(documents)
            except (OSError, json.JSONDecodeError, PersistenceError) as e:
                logger.error(
                    "seeder.restore.failed",
                    backup_id=backup_id,
                    restored=restored,
                    error=str(e),
                    exc_info=True,
                )
                raise RestoreError(
                    f"Failed to restore backup {backup_id}: {e}",
                    details={"backup_id": backup_id, "restored": restored},
                ) from e

            logger.info(
                "seeder.restore.completed",
                backup_id=backup_id,
                collections=len(restored),
                documents=sum(restored.values()),
            )
            return restored
        finally:
            run_id_ctx.reset(token)

    # -------------------------------------------------------------------------
    # Listing and housekeeping
    # -------------------------------------------------------------------------

    def list_backups(self) -> list[dict[str, Any]]:
        """Metadata of every readable snapshot, newest first."""
        if not self.backup_dir.is_dir():
            return []
        backups = []
        for entry in self.backup_dir.iterdir():
            if not (entry / METADATA_FILE).is_file():
                continue
            try:
                backups.append(self._read_metadata(entry.name))
            except BackupError as e:
                logger.warning("seeder.backup.unreadable", backup_id=entry.name, error=e.message)
        return sorted(backups, key=lambda meta: meta.get("timestamp", ""), reverse=True)

    def delete_backup(self, backup_id: str) -> None:
        """Remove one snapshot.

        Raises:
            NotFoundError: If the snapshot does not exist.
            BackupError: If the directory cannot be removed.
        """
        target = self._path(backup_id)
        if not target.is_dir():
            raise NotFoundError(f"Backup not found: {backup_id}", details={"backup_id": backup_id})
        try:
            shutil.rmtree(target)
        except OSError as e:
            raise BackupError(f"Failed to delete backup {backup_id}: {e}") from e
        logger.info("seeder.backup.deleted", backup_id=backup_id)

    def cleanup_old_backups(self, max_age_days: int = 7) -> int:
        """Delete snapshots older than ``max_age_days``.

        Returns:
            Number of snapshots deleted.
        """
        cutoff = datetime.now(UTC) - timedelta(days=max_age_days)
        deleted = 0
        for metadata in self.list_backups():
            if datetime.fromisoformat(metadata["timestamp"]) < cutoff:
                self.delete_backup(metadata["id"])
                deleted += 1
        logger.info("seeder.backup.cleanup_completed", deleted=deleted, max_age_days=max_age_days)
        return deleted

    def get_backup_stats(self) -> dict[str, Any]:
        backups = self.list_backups()
        total_documents = sum(meta.get("total_documents", 0) for meta in backups)
        return {
            "total_backups": len(backups),
            "total_documents": total_documents,
            "oldest": backups[-1]["timestamp"] if backups else None,
            "newest": backups[0]["timestamp"] if backups else None,
            "average_documents": round(total_documents / len(backups), 2) if backups else 0,
        }

    def get_backup_info(self, backup_id: str) -> dict[str, Any]:
        """Snapshot metadata plus the size in bytes of each file."""
        metadata = self._read_metadata(backup_id)
        files = {
            path.name: path.stat().st_size
            for path in sorted(self._path(backup_id).iterdir())
            if path.is_file()
        }
        return {**metadata, "files": files, "size_bytes": sum(files.values())}

    def print_backup_summary(self, stream: TextIO | None = None) -> None:
        out = stream or sys.stdout
        backups = self.list_backups()
        stats = self.get_backup_stats()
        out.write("\n📦 Backups\n")
        out.write("=" * 60 + "\n")
        if not backups:
            out.write("  No backups found\n")
            return
        for metadata in backups:
            out.write(
                f"  {metadata['id']}  {metadata.get('total_documents', 0):>8} docs  "
                f"{metadata.get('description', '')}\n"
            )
        out.write("-" * 60 + "\n")
        out.write(
            f"  {stats['total_backups']} backup(s), {stats['total_documents']} documents, "
            f"{stats['average_documents']} on average\n"
        )
