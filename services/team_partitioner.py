import math
import random

from models.draft import TEAM_1, TEAM_2
from services.shuffler import shuffle


def even_split(roster, rng: random.Random | None = None) -> tuple[list, list]:
    """Shuffle once and cut; Team 1 gets the extra player on odd rosters"""
    shuffled = shuffle(roster, rng)
    mid = math.ceil(len(shuffled) / 2)
    return shuffled[:mid], shuffled[mid:]


def balanced_team_for(team1_size: int, team2_size: int) -> int:
    """Smaller team gets the next player, ties go to Team 1"""
    return TEAM_1 if team1_size <= team2_size else TEAM_2


def assign_incrementally(order) -> tuple[list, list, dict]:
    team1, team2, assignments = [], [], {}
    for player in order:
        team = balanced_team_for(len(team1), len(team2))
        (team1 if team == TEAM_1 else team2).append(player)
        assignments[player] = team
    return team1, team2, assignments
