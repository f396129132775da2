from app.schemas.schemas import (
    OKResponse,
    NoteCreate, NoteUpdate, NoteResponse, NoteListResponse,
    RenderResponse,
    EXPORT_FORMATS, MAX_NOTE_LENGTH,
)

__all__ = [
    "OKResponse",
    "NoteCreate", "NoteUpdate", "NoteResponse", "NoteListResponse",
    "RenderResponse",
    "EXPORT_FORMATS", "MAX_NOTE_LENGTH",
]
