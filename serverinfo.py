from dataclasses import dataclass, field
from typing import Optional, Dict, Mapping, Any

# team 0 holds the players still joining, real teams start at 1
QUEUE_TEAM = 0
NO_QUEUE_TEAM = -1


@dataclass(frozen=True)
class PlayerRecord:
    persona_id: int
    tag: str
    name: str
    rank: int
    score: int
    kills: int
    deaths: int
    squad_id: int
    role: int

    def display_name(self) -> str:
        return f"[{self.tag}]{self.name}" if self.tag else self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "personaId": self.persona_id,
            "tag": self.tag,
            "name": self.name,
            "rank": self.rank,
            "score": self.score,
            "kills": self.kills,
            "deaths": self.deaths,
            "squadId": self.squad_id,
            "role": self.role,
        }


@dataclass(frozen=True)
class TeamInfo:
    index: int
    players: Mapping[int, PlayerRecord] = field(default_factory=dict)

    @property
    def is_queue(self) -> bool:
        return self.index == QUEUE_TEAM

    def to_dict(self) -> Dict[str, Any]:
        return {"players": {str(pid): p.to_dict() for pid, p in self.players.items()}}


@dataclass(frozen=True)
class RushState:
    attackers_tickets: int
    attackers_max_tickets: int
    defenders_bases: int
    defenders_max_bases: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attackers": {"tickets": self.attackers_tickets, "ticketsMax": self.attackers_max_tickets},
            "defenders": {"bases": self.defenders_bases, "basesMax": self.defenders_max_bases},
        }


@dataclass(frozen=True)
class ServerInfo:
    game_id: int
    game_mode: str
    map_variant: int
    current_map: str
    round_time: int
    default_round_time_multiplier: int
    max_players: int
    waiting_players: int
    round_state: Optional[RushState] = None
    teams: Mapping[int, TeamInfo] = field(default_factory=dict)

    def joining_player_count(self) -> int:
        team = self.teams.get(QUEUE_TEAM)
        if team is None:
            return NO_QUEUE_TEAM
        return len(team.players)

    def total_player_count(self) -> int:
        return sum(len(t.players) for t in self.teams.values())

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "gameId": self.game_id,
            "gameMode": self.game_mode,
            "mapVariant": self.map_variant,
            "currentMap": self.current_map,
            "maxPlayers": self.max_players,
            "waitingPlayers": self.waiting_players,
            "roundTime": self.round_time,
            "defaultRoundTimeMultiplier": self.default_round_time_multiplier,
        }
        if self.round_state is not None:
            d["rush"] = self.round_state.to_dict()
        d["teamInfo"] = {str(i): t.to_dict() for i, t in self.teams.items()}
        return d
