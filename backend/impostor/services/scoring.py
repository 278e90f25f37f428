from impostor.models import Player

CAUGHT_BONUS = 2
ESCAPE_BONUS = 3


def active_impostor(players):
    """The impostor of the running round: flagged and still in play."""
    return next((p for p in players if p.is_impostor and not p.is_eliminated), None)


def score_round(players, impostor: Player, caught: bool) -> dict:
    """Apply scoring for the round just voted on.

    +2 to every unflagged player when the voted player is an impostor,
    otherwise +3 to the impostor still in play. Bonuses are flat, not per
    vote. Returns the points awarded keyed by player id.
    """
    awarded = {}
    if caught:
        for p in players:
            if not p.is_impostor:
                p.score = (p.score or 0) + CAUGHT_BONUS
                awarded[p.id] = CAUGHT_BONUS
    elif impostor is not None:
        impostor.score = (impostor.score or 0) + ESCAPE_BONUS
        awarded[impostor.id] = ESCAPE_BONUS
    return awarded
