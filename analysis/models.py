from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class Standing:
    teamId: str
    wins: int = 0
    losses: int = 0
    pointsFor: int = 0
    pointsAgainst: int = 0
    teamName: Optional[str] = None

    @property
    def pointDiff(self) -> int:
        return self.pointsFor - self.pointsAgainst

    @property
    def played(self) -> int:
        return self.wins + self.losses

    def to_json(self) -> Dict[str, Any]:
        return {
            "teamId": self.teamId,
            "teamName": self.teamName or self.teamId,
            "wins": self.wins,
            "losses": self.losses,
            "pointsFor": self.pointsFor,
            "pointsAgainst": self.pointsAgainst,
            "pointDiff": self.pointDiff,
            # short keys used by the standings table
            "w": self.wins,
            "l": self.losses,
        }


@dataclass
class Leader:
    id: str
    value: int

    def to_json(self) -> Dict[str, Any]:
        return {"id": self.id, "value": self.value}
