"""File management service for uploaded documents."""

import re
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any, List

from ..models.config import APIConfig
from ...utils.config import Config


class FileManager:
    """Manages uploaded file storage and cleanup."""

    def __init__(self, config: APIConfig):
        self.config = config
        self.upload_dir = Path(config.upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def sanitize_filename(filename: str) -> str:
        """Replace anything but letters, digits, dots and dashes."""
        return re.sub(r'[^a-zA-Z0-9.-]', '_', filename)

    @staticmethod
    def original_name(file_id: str) -> str:
        """Strip the timestamp prefix from a stored file name."""
        return re.sub(r'^\d+_', '', file_id)

    def is_allowed(self, filename: str) -> bool:
        """Check the file extension against the allowed upload types."""
        return Path(filename).suffix.lower() in self.config.allowed_extensions

    def save_file(self, filename: str, data: bytes) -> Dict[str, Any]:
        """
        Store an uploaded file under a timestamp-prefixed name.

        Args:
            filename: Original client filename
            data: Raw file bytes

        Returns:
            File information dictionary for the stored file
        """
        timestamp = int(time.time() * 1000)
        sanitized = self.sanitize_filename(Path(filename).name)

        file_path = self.upload_dir / f"{timestamp}_{sanitized}"
        while file_path.exists():
            timestamp += 1
            file_path = self.upload_dir / f"{timestamp}_{sanitized}"

        file_path.write_bytes(data)

        info = self.file_info(file_path)
        info["name"] = filename
        return info

    def get_file_path(self, file_id: str) -> Optional[Path]:
        """Get the full path to a stored file."""
        if not file_id or "/" in file_id or "\\" in file_id or ".." in file_id:
            return None

        file_path = self.upload_dir / file_id
        if not file_path.is_file():
            return None

        return file_path

    def file_info(self, file_path: Path) -> Dict[str, Any]:
        """Describe a stored file the way the client lists it."""
        stat = file_path.stat()
        extension = file_path.suffix.lower()

        return {
            "id": file_path.name,
            "name": self.original_name(file_path.name),
            "size": stat.st_size,
            "modified": datetime.fromtimestamp(stat.st_mtime),
            "type": Config.file_type(extension),
            "extension": extension
        }

    def list_files(self) -> List[Dict[str, Any]]:
        """List stored files, newest first."""
        files = [
            self.file_info(file_path)
            for file_path in self.upload_dir.iterdir()
            if file_path.is_file()
        ]
        files.sort(key=lambda f: f["modified"], reverse=True)
        return files

    def read_content(self, file_id: str) -> Optional[str]:
        """Read a stored file as text."""
        file_path = self.get_file_path(file_id)
        if not file_path:
            return None
        return file_path.read_text(encoding="utf-8", errors="replace")

    def write_content(self, file_id: str, content: str) -> bool:
        """Overwrite an existing stored file."""
        file_path = self.get_file_path(file_id)
        if not file_path:
            return False
        file_path.write_text(content, encoding="utf-8")
        return True

    def delete_file(self, file_id: str) -> bool:
        """Delete a stored file."""
        file_path = self.get_file_path(file_id)
        if not file_path:
            return False
        try:
            file_path.unlink()
            return True
        except OSError:
            return False

    def get_storage_stats(self) -> Dict[str, Any]:
        """Get current storage statistics."""
        total_files = 0
        total_bytes = 0

        for file_path in self.upload_dir.iterdir():
            if file_path.is_file():
                total_files += 1
                total_bytes += file_path.stat().st_size

        return {
            "total_files": total_files,
            "total_bytes": total_bytes,
            "total_mb": round(total_bytes / (1024 * 1024), 2)
        }

    def enforce_storage_limits(self) -> Dict[str, Any]:
        """Enforce storage limits by removing oldest files if needed."""
        stats = self.get_storage_stats()

        if stats["total_files"] <= self.config.max_stored_files:
            return {"action": "none", "reason": "within_limits"}

        # Oldest first
        files = sorted(
            (file_path for file_path in self.upload_dir.iterdir() if file_path.is_file()),
            key=lambda p: p.stat().st_mtime
        )

        removed_files = 0
        removed_bytes = 0

        for file_path in files[:len(files) - self.config.max_stored_files]:
            size = file_path.stat().st_size
            file_path.unlink()
            removed_files += 1
            removed_bytes += size

        return {
            "action": "cleanup",
            "removed_files": removed_files,
            "removed_bytes": removed_bytes,
            "reason": "storage_limit_exceeded"
        }
