"""create room, player, response and vote tables

Revision ID: 1c7e4a9b2f60
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1c7e4a9b2f60'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'room' not in existing_tables:
        op.create_table(
            'room',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('join_code', sa.String(length=16), nullable=False),
            sa.Column('host_player_id', sa.Integer(), nullable=True),
            sa.Column('phase', sa.String(length=16), nullable=False, server_default='lobby'),
            sa.Column('topic', sa.String(length=255), nullable=True),
            sa.Column('member_ids', sa.Text(), nullable=False, server_default='[]'),
            sa.Column('current_turn_index', sa.Integer(), nullable=True),
            sa.Column('round_number', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.Column('version', sa.Integer(), nullable=False),
        )
        op.create_index('ix_room_join_code', 'room', ['join_code'], unique=True)

    if 'player' not in existing_tables:
        op.create_table(
            'player',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('room_id', sa.Integer(), sa.ForeignKey('room.id'), nullable=False),
            sa.Column('display_name', sa.String(length=64), nullable=False),
            sa.Column('is_impostor', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('is_eliminated', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('is_host', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
        )
        op.create_index('ix_player_room_id', 'player', ['room_id'])

    if 'response' not in existing_tables:
        op.create_table(
            'response',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('room_id', sa.Integer(), sa.ForeignKey('room.id'), nullable=False),
            sa.Column('player_id', sa.Integer(), nullable=False),
            sa.Column('round_number', sa.Integer(), nullable=False),
            sa.Column('text', sa.Text(), nullable=False),
            sa.Column('submitted_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_response_room_round', 'response', ['room_id', 'round_number'])

    if 'vote' not in existing_tables:
        op.create_table(
            'vote',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('room_id', sa.Integer(), sa.ForeignKey('room.id'), nullable=False),
            sa.Column('voter_id', sa.Integer(), nullable=False),
            sa.Column('voted_for_id', sa.Integer(), nullable=False),
            sa.Column('round_number', sa.Integer(), nullable=False),
            sa.UniqueConstraint('room_id', 'voter_id', 'round_number', name='uq_vote_room_voter_round'),
        )
        op.create_index('ix_vote_room_round', 'vote', ['room_id', 'round_number'])


def downgrade():
    op.drop_index('ix_vote_room_round', table_name='vote')
    op.drop_table('vote')
    op.drop_index('ix_response_room_round', table_name='response')
    op.drop_table('response')
    op.drop_index('ix_player_room_id', table_name='player')
    op.drop_table('player')
    op.drop_index('ix_room_join_code', table_name='room')
    op.drop_table('room')
