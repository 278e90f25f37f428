from impostor import db
from datetime import datetime, timezone
import json
import string
import random

PHASES = ('lobby', 'game', 'voting', 'results')

JOIN_CODE_ALPHABET = string.ascii_uppercase + string.digits


def utcnow():
    return datetime.now(timezone.utc)


def normalize_join_code(code):
    return (code or '').strip().upper()


def draw_join_code(length=6):
    """Draw one candidate join code. Uniqueness is checked by the caller."""
    return ''.join(random.choices(JOIN_CODE_ALPHABET, k=length))


class Room(db.Model):
    __tablename__ = 'room'
    id = db.Column(db.Integer, primary_key=True)
    join_code = db.Column(db.String(16), unique=True, nullable=False, index=True)
    # Player ids are plain references; the host row is created after the room
    host_player_id = db.Column(db.Integer, nullable=True)
    phase = db.Column(db.String(16), nullable=False, default='lobby')
    topic = db.Column(db.String(255), nullable=True)
    member_ids_json = db.Column('member_ids', db.Text, nullable=False, default='[]')
    current_turn_index = db.Column(db.Integer, nullable=True)
    round_number = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    # Bumped by every UPDATE; a concurrent writer holding an older value fails
    version = db.Column(db.Integer, nullable=False)

    players = db.relationship('Player', back_populates='room', order_by='Player.id')

    __mapper_args__ = {'version_id_col': version}

    @property
    def member_ids(self):
        return list(json.loads(self.member_ids_json or '[]'))

    @member_ids.setter
    def member_ids(self, ids):
        seen = []
        for pid in map(int, ids):
            if pid not in seen:
                seen.append(pid)
        self.member_ids_json = json.dumps(seen)

    def touch(self):
        """Mark the room as changed so its version advances on commit."""
        self.updated_at = utcnow()

    def to_dict(self):
        return {
            'id': self.id,
            'join_code': self.join_code,
            'host_player_id': self.host_player_id,
            'phase': self.phase,
            'topic': self.topic,
            'member_ids': self.member_ids,
            'current_turn_index': self.current_turn_index,
            'round_number': self.round_number,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'version': self.version,
        }


class Player(db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey('room.id'), nullable=False, index=True)
    display_name = db.Column(db.String(64), nullable=False)
    is_impostor = db.Column(db.Boolean, default=False, nullable=False)
    is_eliminated = db.Column(db.Boolean, default=False, nullable=False)
    is_host = db.Column(db.Boolean, default=False, nullable=False)
    score = db.Column(db.Integer, default=0, nullable=False)
    room = db.relationship('Room', back_populates='players')

    def to_dict(self):
        return {
            'id': self.id,
            'room_id': self.room_id,
            'display_name': self.display_name,
            'is_impostor': self.is_impostor,
            'is_eliminated': self.is_eliminated,
            'is_host': self.is_host,
            'score': self.score,
        }


class Response(db.Model):
    __tablename__ = 'response'
    __table_args__ = (
        db.Index('ix_response_room_round', 'room_id', 'round_number'),
    )
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey('room.id'), nullable=False)
    # Not a foreign key: responses outlive players who leave
    player_id = db.Column(db.Integer, nullable=False)
    round_number = db.Column(db.Integer, nullable=False)
    text = db.Column(db.Text, nullable=False)
    submitted_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self, player_name=None):
        data = {
            'id': self.id,
            'room_id': self.room_id,
            'player_id': self.player_id,
            'round_number': self.round_number,
            'text': self.text,
            'submitted_at': self.submitted_at.isoformat() if self.submitted_at else None,
        }
        if player_name is not None:
            data['player_name'] = player_name
        return data


class Vote(db.Model):
    __tablename__ = 'vote'
    __table_args__ = (
        db.Index('ix_vote_room_round', 'room_id', 'round_number'),
        db.UniqueConstraint('room_id', 'voter_id', 'round_number', name='uq_vote_room_voter_round'),
    )
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey('room.id'), nullable=False)
    voter_id = db.Column(db.Integer, nullable=False)
    voted_for_id = db.Column(db.Integer, nullable=False)
    round_number = db.Column(db.Integer, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'room_id': self.room_id,
            'voter_id': self.voter_id,
            'voted_for_id': self.voted_for_id,
            'round_number': self.round_number,
        }
