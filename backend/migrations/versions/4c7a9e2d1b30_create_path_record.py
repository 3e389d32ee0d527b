"""create path_record for saved reading paths and selected words

Revision ID: 4c7a9e2d1b30
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c7a9e2d1b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # create_all() at app start may already have built it
    if 'path_record' in set(insp.get_table_names()):
        return

    op.create_table(
        'path_record',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('room_id', sa.Text(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('color', sa.String(length=16), nullable=True),
        sa.Column('path', sa.Text(), nullable=False),
        sa.Column('selected_words', sa.Text(), nullable=True),
        sa.UniqueConstraint('room_id', 'user_id', name='uq_path_record_room_user'),
    )
    op.create_index('ix_path_record_room_id', 'path_record', ['room_id'])


def downgrade():
    op.drop_index('ix_path_record_room_id', table_name='path_record')
    op.drop_table('path_record')
