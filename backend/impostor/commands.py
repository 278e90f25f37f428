"""Typed command payloads, one per mutating operation.

Each model names exactly the fields its command accepts; unknown fields are
rejected so a client cannot smuggle extra attributes into a mutation.
"""
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints

DisplayName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]
Topic = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
JoinCode = Annotated[str, StringConstraints(strip_whitespace=True, to_upper=True, min_length=1, max_length=16)]


class Command(BaseModel):
    model_config = ConfigDict(extra='forbid', frozen=True)


class CreateRoom(Command):
    host_display_name: DisplayName


class JoinRoom(Command):
    join_code: JoinCode
    display_name: DisplayName


class StartGame(Command):
    player_id: int
    topic: Topic


class StartVoting(Command):
    player_id: int


class SubmitResponse(Command):
    player_id: int
    text: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=2000)]


class SubmitVote(Command):
    voter_id: int
    voted_for_id: int


class ResetRound(Command):
    new_topic: Topic


class UpdateScore(Command):
    score_increase: int
