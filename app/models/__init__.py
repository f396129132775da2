from app.models.models import Note

__all__ = ["Note"]
