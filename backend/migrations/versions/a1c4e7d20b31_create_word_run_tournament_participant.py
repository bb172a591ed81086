"""create word, run, tournament and participant tables

Revision ID: a1c4e7d20b31
Revises:
Create Date: 2026-10-16 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1c4e7d20b31'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'word' not in existing_tables:
        op.create_table(
            'word',
            sa.Column('word', sa.String(length=5), primary_key=True),
        )

    if 'tournament' not in existing_tables:
        op.create_table(
            'tournament',
            sa.Column('id', sa.String(length=80), primary_key=True),
            sa.Column('entry_fee', sa.String(length=80), nullable=False),
            sa.Column('end_time', sa.BigInteger(), nullable=False),
            sa.Column('is_open', sa.Boolean(), nullable=False, server_default=sa.true()),
        )

    if 'participant' not in existing_tables:
        op.create_table(
            'participant',
            sa.Column('tournament_id', sa.String(length=80), sa.ForeignKey('tournament.id'), primary_key=True),
            sa.Column('player', sa.String(length=64), primary_key=True),
            sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('attempts', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('time_ms', sa.BigInteger(), nullable=False, server_default='0'),
        )

    if 'run' not in existing_tables:
        op.create_table(
            'run',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('player', sa.String(length=64), nullable=False),
            sa.Column('secret_word', sa.String(length=5), nullable=False),
            sa.Column('start_time', sa.BigInteger(), nullable=False),
            sa.Column('end_time', sa.BigInteger(), nullable=True),
            sa.Column('attempts', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('status', sa.String(length=16), nullable=False, server_default='active'),
            sa.Column('tournament_id', sa.String(length=80), nullable=True),
            sa.Column('guesses', sa.Text(), nullable=True),
        )
        op.create_index('ix_run_player', 'run', ['player'])
        op.create_index('ix_run_status', 'run', ['status'])
        op.create_index('ix_run_tournament_id', 'run', ['tournament_id'])


def downgrade():
    op.drop_index('ix_run_tournament_id', table_name='run')
    op.drop_index('ix_run_status', table_name='run')
    op.drop_index('ix_run_player', table_name='run')
    op.drop_table('run')
    op.drop_table('participant')
    op.drop_table('tournament')
    op.drop_table('word')
