"""create_notes

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'notes',
        sa.Column('id',         sa.Integer(),               primary_key=True, autoincrement=True),
        sa.Column('content',    sa.Text(),                  nullable=False),
        sa.Column('rendered',   sa.Text(),                  nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_notes_created_at', 'notes', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_notes_created_at', table_name='notes')
    op.drop_table('notes')
