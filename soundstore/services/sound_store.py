import logging
import os
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Callable, List, Tuple

from soundstore.models.sound_record import SoundRecord, public_path
from soundstore.utils.errors import (
    DeleteError,
    FileTooLarge,
    InvalidType,
    ListError,
    MissingFile,
    MissingId,
    NotFound,
    PathTraversal,
    SoundStoreError,
    StorageError,
    UploadError,
)
from soundstore.utils.validators import (
    MAX_FILE_SIZE_BYTES,
    is_audio_mimetype,
    max_file_size_ok,
    resolve_inside,
    resolve_under,
    stored_filename,
    strip_extension,
)

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
TEMP_PREFIX = ".upload-"


def _now_ms() -> int:
    return int(time.time() * 1000)


class SoundStore:
    """Audio files kept flat inside a single uploads directory.

    The directory listing is the only source of truth: a SoundRecord is
    derived from a file's name and stat on every call.
    """

    def __init__(self, uploads_dir, max_upload_bytes: int = MAX_FILE_SIZE_BYTES,
                 clock: Callable[[], int] = _now_ms):
        self.uploads_dir = Path(uploads_dir)
        self.sounds_dir = self.uploads_dir.parent
        self.max_upload_bytes = max_upload_bytes
        self.clock = clock

    def ensure_directory(self):
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def _record_for(self, entry: os.DirEntry) -> SoundRecord:
        stats = entry.stat()
        return SoundRecord(
            id=entry.name,
            name=strip_extension(entry.name),
            path=public_path(entry.name),
            size=stats.st_size,
            upload_date=datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc),
        )

    def list_sounds(self) -> List[SoundRecord]:
        sounds = []
        try:
            with os.scandir(self.uploads_dir) as entries:
                for entry in entries:
                    # skip in-flight uploads and anything that is not a plain file
                    if entry.name.startswith(TEMP_PREFIX):
                        continue
                    try:
                        if not entry.is_file(follow_symlinks=False):
                            continue
                        sounds.append(self._record_for(entry))
                    except FileNotFoundError:
                        # removed by a concurrent delete
                        continue
        except OSError as e:
            logger.error(f"Error listing sounds: {e}", exc_info=True)
            raise ListError() from e
        return sounds

    def _link_into_place(self, temp_path: str, original_name: str) -> str:
        # os.link refuses to replace an existing file, so a taken name is never clobbered
        timestamp = self.clock()
        while True:
            safe_name = stored_filename(timestamp, original_name)
            try:
                os.link(temp_path, self.uploads_dir / safe_name)
            except FileExistsError:
                timestamp += 1
                continue
            os.unlink(temp_path)
            return safe_name

    def _write_temp(self, stream: BinaryIO) -> Tuple[str, int]:
        fd, temp_path = tempfile.mkstemp(prefix=TEMP_PREFIX, dir=str(self.uploads_dir))
        written = 0
        try:
            with os.fdopen(fd, "wb") as out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if not max_file_size_ok(written, self.max_upload_bytes):
                        raise FileTooLarge()
                    out.write(chunk)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise
        return temp_path, written

    def save_upload(self, filename: str, content_type: str, stream: BinaryIO) -> SoundRecord:
        """Validate and persist one uploaded sound, returning its record.

        The bytes land in a temp file first and are hard-linked into place, so a
        failed upload never leaves a stored file behind.
        """
        if stream is None:
            raise MissingFile()
        if not is_audio_mimetype(content_type):
            raise InvalidType()

        original_name = filename or ""
        temp_path = None
        try:
            try:
                temp_path, size = self._write_temp(stream)
                safe_name = self._link_into_place(temp_path, original_name)
            except OSError as e:
                logger.error(f"Error saving file: {e}", exc_info=True)
                if temp_path and os.path.exists(temp_path):
                    os.unlink(temp_path)
                raise StorageError() from e
        except SoundStoreError:
            raise
        except Exception as e:
            logger.error(f"Error handling upload: {e}", exc_info=True)
            raise UploadError() from e

        logger.info(f"Stored {original_name!r} as {safe_name} ({size} bytes)")
        return SoundRecord(
            id=safe_name,
            name=strip_extension(original_name),
            path=public_path(safe_name),
            size=size,
            upload_date=datetime.now(timezone.utc),
        )

    def delete_sound(self, sound_id: str):
        if not sound_id:
            raise MissingId()

        file_path = resolve_inside(str(self.uploads_dir), sound_id)
        if file_path is None:
            logger.warning(f"Rejected delete outside uploads directory: {sound_id!r}")
            raise PathTraversal()

        if not os.path.isfile(file_path):
            raise NotFound()

        try:
            os.unlink(file_path)
        except FileNotFoundError as e:
            raise NotFound() from e
        except OSError as e:
            logger.error(f"Error deleting sound: {e}", exc_info=True)
            raise DeleteError() from e
        logger.info(f"Deleted {sound_id}")

    def resolve_sound(self, sound_id: str) -> str:
        """Absolute path of a stored sound for playback; NotFound otherwise."""
        file_path = resolve_inside(str(self.uploads_dir), sound_id or "")
        if file_path is None or os.path.basename(file_path).startswith(TEMP_PREFIX):
            raise NotFound()
        if not os.path.isfile(file_path):
            raise NotFound()
        return file_path

    def resolve_asset(self, relative_path: str) -> str:
        """Absolute path of any file under the sounds directory (bundled tones
        as well as uploads). Hidden files are never served."""
        file_path = resolve_under(str(self.sounds_dir), relative_path or "")
        if file_path is None or not os.path.isfile(file_path):
            raise NotFound()
        return file_path
