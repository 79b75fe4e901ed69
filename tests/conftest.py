"""Shared builders for synthetic server info datagrams."""
import struct

import pytest

HEADER = b"\x00" * 0x13


def lp(text: str) -> bytes:
    raw = text.encode("latin-1")
    return bytes([len(raw)]) + raw


def player_bytes(persona_id, tag="", name="player", rank=0, score=0, kills=0, deaths=0, squad_id=0, role=0) -> bytes:
    return (struct.pack(">Q", persona_id) + lp(tag) + lp(name) + bytes([rank])
            + struct.pack(">iHH", score, kills, deaths) + bytes([squad_id, role]))


def team_bytes(*players: bytes) -> bytes:
    return bytes([len(players)]) + b"".join(players)


def build_datagram(game_id=1234567890123, game_mode="RushLarge", map_variant=0, block=None,
                   block_size=None, current_map="MP_Abandoned", round_time=3600, multiplier=100,
                   max_players=64, waiting_players=3, teams=None, team_count=None, trailer=b"") -> bytes:
    if block is None:
        block = struct.pack(">HHHH", 75, 100, 1, 4)
    if block_size is None:
        block_size = len(block)
    if teams is None:
        teams = [team_bytes(), team_bytes(player_bytes(1, name="alpha")), team_bytes(player_bytes(2, name="bravo"))]
    if team_count is None:
        team_count = len(teams) - 1
    return (HEADER + struct.pack(">Q", game_id) + lp(game_mode) + bytes([map_variant, block_size]) + block
            + lp(current_map) + struct.pack(">II", round_time, multiplier)
            + bytes([max_players, waiting_players, team_count]) + b"".join(teams) + trailer)


@pytest.fixture
def datagram():
    return build_datagram()
