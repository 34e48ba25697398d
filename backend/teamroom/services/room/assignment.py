import random
from typing import Dict, List, Sequence, TypeVar

T = TypeVar('T')


def validate_rules(capacity: int, traitor_count: int) -> None:
    """Reject room rules the balanced split cannot honour."""
    if capacity < 2 or capacity % 2:
        raise ValueError(f"Room capacity must be an even number >= 2, got {capacity}")
    if traitor_count < 0 or traitor_count % 2:
        raise ValueError(f"Traitor count must be an even number >= 0, got {traitor_count}")
    if traitor_count > capacity:
        raise ValueError(f"Traitor count {traitor_count} exceeds room capacity {capacity}")


def shuffled(items: Sequence[T], rng: random.Random) -> List[T]:
    """Fisher-Yates shuffle into a new list."""
    result = list(items)
    rng.shuffle(result)
    return result


def assign_teams_and_traitors(players, traitor_count: int, rng: random.Random) -> Dict[str, list]:
    """Split a full room into two equal teams with the same number of traitors each.

    Players are shuffled, traitor_count of them are picked at random, then
    traitors and regulars are shuffled separately and dealt so each team
    gets traitor_count // 2 traitors. Every player's is_traitor and team
    fields are written here and nowhere else.
    """
    if len(players) % 2:
        raise ValueError(f"Cannot split {len(players)} players into two equal teams")
    team_size = len(players) // 2
    per_team = traitor_count // 2

    order = shuffled(players, rng)
    traitor_indices = set(rng.sample(range(len(order)), traitor_count))
    for index, player in enumerate(order):
        player.is_traitor = index in traitor_indices

    traitors = shuffled([p for p in order if p.is_traitor], rng)
    regulars = shuffled([p for p in order if not p.is_traitor], rng)
    fill = team_size - per_team

    team1 = shuffled(traitors[:per_team] + regulars[:fill], rng)
    team2 = shuffled(traitors[per_team:] + regulars[fill:], rng)

    for player in team1:
        player.team = 1
    for player in team2:
        player.team = 2

    return {'team1': team1, 'team2': team2}
