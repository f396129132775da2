#!/usr/bin/env python
#
# Drop every cached note render so the next view re-renders from source.
# Run from the project root:  python scripts/clear.py
# -----------------------------------------------------------------------------

import asyncio

from sqlalchemy import update

from app.core.config import get_settings
from app.core.database import get_session_factory, init_db
from app.models.models import Note

s = get_settings()

init_db(s.database_url)

async def clear():
    sf = get_session_factory()
    async with sf() as db:
        result = await db.execute(update(Note).values(rendered=None))
        await db.commit()
    print(f'cleared {result.rowcount} cached renders')

asyncio.run(clear())
