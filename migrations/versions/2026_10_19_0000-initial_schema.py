"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the store schema:
    - collections table: one row per collection with its counter
    - entries table: short key -> serialized entry record

    Tables already created by SequenceKeyedStore.open() are left alone.
    """
    bind = op.get_bind()
    existing_tables = inspect(bind).get_table_names()

    if 'collections' not in existing_tables:
        op.create_table(
            'collections',
            sa.Column('name', sa.String(length=64), nullable=False),
            sa.Column('sequence', sa.BigInteger(), nullable=False),
            sa.PrimaryKeyConstraint('name')
        )

    if 'entries' not in existing_tables:
        op.create_table(
            'entries',
            sa.Column('collection', sa.String(length=64), nullable=False),
            sa.Column('key', sa.String(length=20), nullable=False),
            sa.Column('value', sa.LargeBinary(), nullable=False),
            sa.PrimaryKeyConstraint('collection', 'key')
        )


def downgrade() -> None:
    op.drop_table('entries')
    op.drop_table('collections')
