"""create storeentrys

Revision ID: 3c1f0d2a9b7e
Revises:
Create Date: 2025-12-20 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3c1f0d2a9b7e'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'storeentrys',
        sa.Column('key', sa.String(length=128), nullable=False),
        sa.Column('schema_version', sa.Integer(), nullable=False),
        sa.Column('value_json', sa.Text(), nullable=False),
        sa.Column('saved_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('key'),
    )
    op.create_index(op.f('ix_storeentrys_key'), 'storeentrys', ['key'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_storeentrys_key'), table_name='storeentrys')
    op.drop_table('storeentrys')
