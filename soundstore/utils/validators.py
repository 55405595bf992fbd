import os
import re

# 50 MB default max file size for uploads
MAX_FILE_SIZE_BYTES = 50 * 1024 * 1024

# Extensions whose Content-Type is pinned instead of guessed
AUDIO_MEDIA_TYPES = {
    '.mp3': 'audio/mpeg',
    '.wav': 'audio/wav',
}

_UNSAFE_CHARS = re.compile(r'[^a-zA-Z0-9.-]')
_LAST_EXTENSION = re.compile(r'\.[^/.]+$')


def is_audio_mimetype(content_type: str) -> bool:
    if not content_type:
        return False
    return content_type.startswith('audio/')


def max_file_size_ok(size: int, limit: int = MAX_FILE_SIZE_BYTES) -> bool:
    return size <= limit


def sanitize_filename(filename: str) -> str:
    # Every character outside [A-Za-z0-9.-] becomes '_'
    return _UNSAFE_CHARS.sub('_', filename or '')


def strip_extension(filename: str) -> str:
    return _LAST_EXTENSION.sub('', filename)


def stored_filename(timestamp_ms: int, original_name: str) -> str:
    return f"{timestamp_ms}-{sanitize_filename(original_name)}"


def resolve_inside(directory: str, name: str):
    """Join `name` onto `directory` and return the absolute path, or None when
    the result is not a direct child of `directory`.

    The parent of the normalized path must equal the directory exactly, so
    `..` segments, absolute paths and sibling directories that merely share a
    prefix (``uploads-evil``) are all refused.
    """
    base = os.path.abspath(directory)
    candidate = os.path.abspath(os.path.join(base, name))
    if os.path.dirname(candidate) != base:
        return None
    if os.path.basename(candidate) in ('', '.', '..'):
        return None
    return candidate


def resolve_under(directory: str, relative_path: str):
    """Like resolve_inside but allows nested paths. Any hidden segment, such as
    an in-flight upload, refuses the path."""
    base = os.path.abspath(directory)
    candidate = os.path.abspath(os.path.join(base, relative_path))
    if candidate == base or os.path.commonpath([base, candidate]) != base:
        return None
    parts = os.path.relpath(candidate, base).split(os.sep)
    if any(part.startswith(".") for part in parts):
        return None
    return candidate


def media_type_for(filename: str):
    # None lets the response guess from the filename
    ext = os.path.splitext(filename)[1].lower()
    return AUDIO_MEDIA_TYPES.get(ext)
