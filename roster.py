from types import MappingProxyType
from typing import Dict, List, Optional

from cursor import ByteCursor
from errors import DuplicatePlayer
from serverinfo import PlayerRecord, TeamInfo


class PlayerRecordDecoder:
    def decode(self, cursor: ByteCursor) -> PlayerRecord:
        return PlayerRecord(
            persona_id=cursor.read_u64(),
            tag=cursor.read_string(),
            name=cursor.read_string(),
            rank=cursor.read_u8(),
            score=cursor.read_i32(),
            kills=cursor.read_u16(),
            deaths=cursor.read_u16(),
            squad_id=cursor.read_u8(),
            role=cursor.read_u8(),
        )


class TeamRosterDecoder:
    """Reads team entries back to back: a u8 player count, then the players.

    Index 0 is the joining queue and is counted like any other team.
    """

    def __init__(self, players: Optional[PlayerRecordDecoder] = None):
        self.players = players or PlayerRecordDecoder()

    def decode_team(self, cursor: ByteCursor, index: int) -> TeamInfo:
        count = cursor.read_u8()
        roster: Dict[int, PlayerRecord] = {}
        for _ in range(count):
            offset = cursor.origin + cursor.position
            player = self.players.decode(cursor)
            if player.persona_id in roster:
                raise DuplicatePlayer(player.persona_id, index, offset)
            roster[player.persona_id] = player
        return TeamInfo(index=index, players=MappingProxyType(roster))

    def decode_teams(self, cursor: ByteCursor, count: int) -> List[TeamInfo]:
        return [self.decode_team(cursor, i) for i in range(count)]
