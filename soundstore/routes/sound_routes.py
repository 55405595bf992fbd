# soundstore/routes/sound_routes.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse

from soundstore.models.sound_record import DeleteRequest, DeleteResponse, SoundRecord
from soundstore.services.sound_store import SoundStore
from soundstore.utils.errors import MissingFile
from soundstore.utils.validators import media_type_for

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Sounds"])


def get_store(request: Request) -> SoundStore:
    return request.app.state.sound_store


@router.get("/health")
async def health_check(store: SoundStore = Depends(get_store)):
    return {
        "status": "healthy",
        "uploads_dir": str(store.uploads_dir),
        "uploads_dir_exists": store.uploads_dir.is_dir(),
    }


@router.get("/list-sounds", response_model=List[SoundRecord])
async def list_sounds(store: SoundStore = Depends(get_store)):
    return await run_in_threadpool(store.list_sounds)


@router.post("/upload-sound", response_model=SoundRecord)
async def upload_sound(request: Request, store: SoundStore = Depends(get_store)):
    """Store the multipart field `sound` under a timestamped, sanitized name."""
    async with request.form() as form:
        sound = form.get("sound")
        # a plain text field or a part without a filename carries no file
        if sound is None or isinstance(sound, str) or not sound.filename:
            raise MissingFile()
        return await run_in_threadpool(
            store.save_upload, sound.filename, sound.content_type, sound.file
        )


@router.post("/delete-sound", response_model=DeleteResponse)
async def delete_sound(payload: Optional[DeleteRequest] = None,
                       store: SoundStore = Depends(get_store)):
    await run_in_threadpool(store.delete_sound, payload.id if payload else None)
    return DeleteResponse()


@router.get("/sounds/uploads/{sound_id}")
async def play_sound(sound_id: str, store: SoundStore = Depends(get_store)):
    file_path = store.resolve_sound(sound_id)
    return FileResponse(file_path, media_type=media_type_for(sound_id))


# registered after the uploads route so stored sounds resolve there first
@router.get("/sounds/{asset_path:path}")
async def play_asset(asset_path: str, store: SoundStore = Depends(get_store)):
    file_path = store.resolve_asset(asset_path)
    return FileResponse(file_path, media_type=media_type_for(file_path))
