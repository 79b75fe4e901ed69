import logging
from types import MappingProxyType
from typing import Optional

from constants import INFO_OFFSET
from cursor import ByteCursor
from roster import TeamRosterDecoder
from roundstate import RoundStateDecoder, default_round_states
from serverinfo import ServerInfo

log = logging.getLogger(__name__)


class ServerInfoDecoder:
    """Turns the second-round datagram into a ServerInfo.

    Layout from INFO_OFFSET on (the header before it is not interpreted):
    gameId u64, gameMode str, mapVariant u8, round state size u8 + block,
    currentMap str, roundTime u32, defaultRoundTimeMultiplier u32,
    maxPlayers u8, waitingPlayers u8, team count u8, then count + 1 teams.
    """

    def __init__(self, round_states: Optional[RoundStateDecoder] = None,
                 roster: Optional[TeamRosterDecoder] = None):
        self.round_states = round_states or default_round_states()
        self.roster = roster or TeamRosterDecoder()

    def decode(self, data: bytes) -> ServerInfo:
        cursor = ByteCursor(data)
        cursor.seek(INFO_OFFSET)

        game_id = cursor.read_u64()
        game_mode = cursor.read_string()
        map_variant = cursor.read_u8()

        block_size = cursor.read_u8()
        block_start = cursor.position
        round_state = self.round_states.decode(cursor, game_mode, block_size)
        cursor.advance_to(block_start + block_size)

        current_map = cursor.read_string()
        round_time = cursor.read_u32()
        multiplier = cursor.read_u32()
        max_players = cursor.read_u8()
        waiting_players = cursor.read_u8()

        team_count = cursor.read_u8()
        log.debug("%s on %s: %d team(s), roster at 0x%x", game_mode, current_map, team_count, cursor.position)
        teams = self.roster.decode_teams(cursor, team_count + 1)

        if cursor.remaining:
            log.debug("Ignoring %d trailing byte(s) at 0x%x", cursor.remaining, cursor.position)

        return ServerInfo(
            game_id=game_id,
            game_mode=game_mode,
            map_variant=map_variant,
            current_map=current_map,
            round_time=round_time,
            default_round_time_multiplier=multiplier,
            max_players=max_players,
            waiting_players=waiting_players,
            round_state=round_state,
            teams=MappingProxyType({t.index: t for t in teams}),
        )


def decode_server_info(data: bytes) -> ServerInfo:
    return ServerInfoDecoder().decode(data)
