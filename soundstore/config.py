import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from soundstore.utils.validators import MAX_FILE_SIZE_BYTES


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(',') if origin.strip()]


@dataclass
class Settings:
    """Runtime configuration for the sound store service.

    Everything the service touches on disk hangs off `sounds_dir`; uploads
    live in its ``uploads`` subdirectory and are published under
    ``/sounds/uploads/``.
    """
    sounds_dir: Path = Path("sounds")
    max_upload_bytes: int = MAX_FILE_SIZE_BYTES
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    frontend_dir: Optional[Path] = None

    @property
    def uploads_dir(self) -> Path:
        return Path(self.sounds_dir) / "uploads"

    @classmethod
    def from_env(cls) -> "Settings":
        frontend = os.environ.get('SOUNDSTORE_FRONTEND_DIR')
        return cls(
            sounds_dir=Path(os.environ.get('SOUNDSTORE_SOUNDS_DIR', 'sounds')),
            max_upload_bytes=int(os.environ.get('SOUNDSTORE_MAX_UPLOAD_BYTES', MAX_FILE_SIZE_BYTES)),
            host=os.environ.get('SOUNDSTORE_HOST', '127.0.0.1'),
            port=int(os.environ.get('SOUNDSTORE_PORT', 3000)),
            log_level=os.environ.get('SOUNDSTORE_LOG_LEVEL', 'INFO').upper(),
            cors_origins=_split_origins(os.environ.get('SOUNDSTORE_CORS_ORIGINS', '*')),
            frontend_dir=Path(frontend) if frontend else None,
        )
