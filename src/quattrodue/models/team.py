"""Team registry: the nine half-teams of the rotation."""
from dataclasses import dataclass, field
from typing import Iterable, List, Union

from quattrodue.errors import UnknownTeamError


@dataclass(frozen=True, order=True)
class Team:
    """A rotation unit identified by a single letter."""

    code: str
    name: str = field(default="", compare=False)

    def __post_init__(self):
        if not self.name:
            object.__setattr__(self, "name", f"Team {self.code}")

    def __str__(self) -> str:
        return self.code


TEAM_CODES = "ABCDEFGHI"
ALL_TEAMS = tuple(Team(c) for c in TEAM_CODES)

_BY_CODE = {t.code: t for t in ALL_TEAMS}

TeamLike = Union[Team, str]


def get_team(code: TeamLike) -> Team:
    """Resolve a team code (case-insensitive) or pass a Team through."""
    if isinstance(code, Team):
        if code.code not in _BY_CODE:
            raise UnknownTeamError(code.code)
        return _BY_CODE[code.code]
    key = str(code).strip().upper()
    try:
        return _BY_CODE[key]
    except KeyError:
        raise UnknownTeamError(code) from None


def teams_from_codes(codes: Iterable[str]) -> List[Team]:
    """Resolve each code in order, e.g. ``teams_from_codes("GHI")``."""
    return [get_team(c) for c in codes]


def teams_as_string(teams: Iterable[Team]) -> str:
    return "".join(t.code for t in teams)
