"""Client-side projection of room snapshots.

A client never keeps game logic of its own: everything it shows is derived
from the last authoritative snapshot by :func:`project`, which is pure, so
the same snapshot always yields an equal :class:`ClientView`. The
:class:`ClientSession` object is what a connected client owns; it is passed
around explicitly and holds nothing but its ids, the cached snapshot and the
view derived from it.
"""
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

UNKNOWN_PLAYER_NAME = 'Unknown Player'


class Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra='ignore')


class PlayerSnapshot(Frozen):
    id: int
    display_name: str
    is_impostor: bool = False
    is_eliminated: bool = False
    is_host: bool = False
    score: int = 0


class VoteSnapshot(Frozen):
    voter_id: int
    voted_for_id: int
    round_number: int


class ResponseSnapshot(Frozen):
    id: int
    player_id: int
    player_name: str = UNKNOWN_PLAYER_NAME
    round_number: int
    text: str
    submitted_at: Optional[str] = None


class Snapshot(Frozen):
    id: int
    version: int = 0
    phase: str
    topic: Optional[str] = None
    host_player_id: Optional[int] = None
    member_ids: Tuple[int, ...] = ()
    current_turn_index: Optional[int] = None
    round_number: Optional[int] = None
    players: Tuple[PlayerSnapshot, ...] = ()
    votes: Tuple[VoteSnapshot, ...] = ()
    responses: Tuple[ResponseSnapshot, ...] = ()


class VotingResults(Frozen):
    voted_player_id: int
    is_impostor_caught: bool
    vote_counts: Dict[str, int]


class ClientView(Frozen):
    phase: str
    topic: Optional[str]
    round_number: Optional[int]
    current_turn_index: Optional[int]
    players: Tuple[PlayerSnapshot, ...]
    my_player: Optional[PlayerSnapshot]
    current_player: Optional[PlayerSnapshot]
    is_my_turn: bool
    am_i_impostor: bool
    am_i_host: bool
    my_vote: Optional[int]
    votes_by_voter: Dict[int, int]
    vote_counts: Dict[int, int]
    responses: Tuple[ResponseSnapshot, ...]


def _as_snapshot(snapshot) -> Snapshot:
    if isinstance(snapshot, Snapshot):
        return snapshot
    return Snapshot.model_validate(snapshot)


def current_player_of(snapshot: Snapshot) -> Optional[PlayerSnapshot]:
    index = snapshot.current_turn_index
    if index is None or not 0 <= index < len(snapshot.member_ids):
        return None
    wanted = snapshot.member_ids[index]
    return next((p for p in snapshot.players if p.id == wanted), None)


def project(snapshot, my_player_id) -> ClientView:
    snap = _as_snapshot(snapshot)
    my_player = next((p for p in snap.players if p.id == my_player_id), None)
    current = current_player_of(snap)

    # Vote caches are rebuilt from scratch on every snapshot
    votes_by_voter = {v.voter_id: v.voted_for_id for v in snap.votes}
    vote_counts = {}
    for target in votes_by_voter.values():
        vote_counts[target] = vote_counts.get(target, 0) + 1

    return ClientView(
        phase=snap.phase,
        topic=snap.topic,
        round_number=snap.round_number,
        current_turn_index=snap.current_turn_index,
        players=snap.players,
        my_player=my_player,
        current_player=current,
        is_my_turn=current is not None and current.id == my_player_id,
        am_i_impostor=bool(my_player and my_player.is_impostor),
        am_i_host=bool(my_player and my_player.is_host),
        my_vote=votes_by_voter.get(my_player_id),
        votes_by_voter=votes_by_voter,
        vote_counts=dict(sorted(vote_counts.items())),
        responses=snap.responses,
    )


class ClientSession:
    """Per-client state: which room and player it is, and the last snapshot seen."""

    def __init__(self, room_id: int, player_id: int):
        self.room_id = room_id
        self.player_id = player_id
        self.cached_snapshot: Optional[Snapshot] = None
        self.view: Optional[ClientView] = None
        self.last_results: Optional[VotingResults] = None

    def apply_snapshot(self, payload) -> bool:
        """Adopt a snapshot and recompute the view.

        Returns True only when the derived view changed. Snapshots for other
        rooms and snapshots older than the cached one are ignored.
        """
        snapshot = _as_snapshot(payload)
        if snapshot.id != self.room_id:
            return False
        if self.cached_snapshot is not None and snapshot.version < self.cached_snapshot.version:
            return False

        self.cached_snapshot = snapshot
        if snapshot.phase != 'results':
            self.last_results = None

        view = project(snapshot, self.player_id)
        if view == self.view:
            return False
        self.view = view
        return True

    def record_results(self, results) -> VotingResults:
        self.last_results = VotingResults.model_validate(results)
        return self.last_results

    def reset(self) -> None:
        """Forget everything about the room, e.g. after leaving it."""
        self.cached_snapshot = None
        self.view = None
        self.last_results = None
