"""Tests for decoder module."""
import struct

import pytest

from conftest import build_datagram, player_bytes, team_bytes
from decoder import ServerInfoDecoder, decode_server_info
from errors import TruncatedData, MalformedServerInfo, DuplicatePlayer
from serverinfo import RushState, ServerInfo, TeamInfo, PlayerRecord


class TestDecodeServerInfo:
    def test_known_fields(self, datagram):
        info = decode_server_info(datagram)
        assert info.game_id == 1234567890123
        assert info.game_mode == "RushLarge"
        assert info.map_variant == 0
        assert info.current_map == "MP_Abandoned"
        assert info.round_time == 3600
        assert info.default_round_time_multiplier == 100
        assert info.max_players == 64
        assert info.waiting_players == 3

    def test_rush_round_state(self, datagram):
        info = decode_server_info(datagram)
        assert info.round_state == RushState(75, 100, 1, 4)

    def test_teams_include_queue(self, datagram):
        info = decode_server_info(datagram)
        assert list(info.teams) == [0, 1, 2]
        assert info.teams[0].is_queue
        assert info.teams[1].players[1].name == "alpha"
        assert info.teams[2].players[2].name == "bravo"
        assert info.total_player_count() == 2
        assert info.joining_player_count() == 0

    def test_team_count_is_declared_plus_one(self):
        teams = [team_bytes() for _ in range(5)]
        info = decode_server_info(build_datagram(teams=teams))
        assert len(info.teams) == 5

    def test_queue_players_counted(self):
        teams = [
            team_bytes(player_bytes(10, name="waiting")),
            team_bytes(player_bytes(11), player_bytes(12)),
            team_bytes(player_bytes(13)),
        ]
        info = decode_server_info(build_datagram(teams=teams))
        assert info.joining_player_count() == 1
        assert info.total_player_count() == 4

    def test_trailing_bytes_ignored(self):
        info = decode_server_info(build_datagram(trailer=b"\xde\xad"))
        assert info.total_player_count() == 2


class TestRoundStateAlignment:
    def test_unknown_mode_skips_block(self):
        info = decode_server_info(build_datagram(game_mode="ConquestLarge0", block=b"\x01\x02\x03"))
        assert info.round_state is None
        assert info.current_map == "MP_Abandoned"

    def test_unknown_mode_empty_block(self):
        info = decode_server_info(build_datagram(game_mode="TeamDeathMatch0", block=b""))
        assert info.round_state is None
        assert info.max_players == 64

    def test_rush_with_unexpected_size_is_skipped(self):
        info = decode_server_info(build_datagram(block=b"\x00" * 12))
        assert info.round_state is None
        assert info.current_map == "MP_Abandoned"

    def test_block_past_end_is_truncated(self):
        data = build_datagram(game_mode="Domination0", block=b"", block_size=200)
        with pytest.raises(TruncatedData):
            decode_server_info(data)

    def test_custom_decoder_cannot_overread(self):
        decoder = ServerInfoDecoder()
        decoder.round_states.register("Greedy0", lambda c: c.read_u64(), 4)
        with pytest.raises(TruncatedData):
            decoder.decode(build_datagram(game_mode="Greedy0", block=b"\x00" * 4))

    def test_custom_decoder_reading_less_stays_aligned(self):
        decoder = ServerInfoDecoder()
        decoder.round_states.register("Obliteration", lambda c: c.read_u8(), 6)
        info = decoder.decode(build_datagram(game_mode="Obliteration", block=b"\x07" + b"\x00" * 5))
        assert info.round_state == 7
        assert info.current_map == "MP_Abandoned"


class TestTruncation:
    def test_every_prefix_raises(self, datagram):
        for cut in range(len(datagram)):
            with pytest.raises(TruncatedData):
                decode_server_info(datagram[:cut])

    def test_truncated_is_malformed(self):
        with pytest.raises(MalformedServerInfo) as exc:
            decode_server_info(b"\x00" * 0x15)
        assert exc.value.offset == 0x13

    def test_more_teams_declared_than_sent(self):
        with pytest.raises(TruncatedData):
            decode_server_info(build_datagram(team_count=4))


class TestDuplicates:
    def test_duplicate_persona_in_team(self):
        teams = [team_bytes(), team_bytes(player_bytes(5), player_bytes(5)), team_bytes()]
        with pytest.raises(DuplicatePlayer) as exc:
            decode_server_info(build_datagram(teams=teams))
        assert exc.value.persona_id == 5
        assert exc.value.team_index == 1

    def test_same_persona_in_different_teams(self):
        teams = [team_bytes(player_bytes(5)), team_bytes(player_bytes(5)), team_bytes()]
        info = decode_server_info(build_datagram(teams=teams))
        assert info.total_player_count() == 2


def test_large_game_id():
    info = decode_server_info(build_datagram(game_id=2 ** 64 - 1))
    assert info.game_id == 2 ** 64 - 1


def test_block_values_read_big_endian():
    block = struct.pack(">HHHH", 0x0102, 0x0304, 0x0506, 0x0708)
    info = decode_server_info(build_datagram(block=block))
    assert info.round_state.attackers_tickets == 0x0102
    assert info.round_state.defenders_max_bases == 0x0708


class TestPlayerFields:
    def test_every_player_field(self):
        player = player_bytes(288230376155291823, tag="ABC", name="Soldier", rank=140, score=-25,
                              kills=300, deaths=7, squad_id=3, role=2)
        teams = [team_bytes(), team_bytes(player), team_bytes()]
        info = decode_server_info(build_datagram(teams=teams))
        assert info.teams[1].players[288230376155291823] == PlayerRecord(
            persona_id=288230376155291823, tag="ABC", name="Soldier", rank=140, score=-25,
            kills=300, deaths=7, squad_id=3, role=2,
        )

    def test_score_is_signed(self):
        teams = [team_bytes(), team_bytes(player_bytes(1, score=-2147483648)), team_bytes()]
        info = decode_server_info(build_datagram(teams=teams))
        assert info.teams[1].players[1].score == -2147483648


def test_whole_record_reproduced():
    teams = [
        team_bytes(),
        team_bytes(player_bytes(11, tag="AB", name="alpha", rank=12, score=1500, kills=9, deaths=4, squad_id=1, role=0)),
        team_bytes(player_bytes(22, name="bravo", rank=3, score=-10, kills=0, deaths=2, squad_id=0, role=1)),
    ]
    data = build_datagram(game_id=42, game_mode="RushLarge", map_variant=2, current_map="MP_Abandoned",
                          round_time=1800, multiplier=150, max_players=64, waiting_players=3, teams=teams)
    expected = ServerInfo(
        game_id=42, game_mode="RushLarge", map_variant=2, current_map="MP_Abandoned", round_time=1800,
        default_round_time_multiplier=150, max_players=64, waiting_players=3,
        round_state=RushState(75, 100, 1, 4),
        teams={
            0: TeamInfo(0, {}),
            1: TeamInfo(1, {11: PlayerRecord(11, "AB", "alpha", 12, 1500, 9, 4, 1, 0)}),
            2: TeamInfo(2, {22: PlayerRecord(22, "", "bravo", 3, -10, 0, 2, 0, 1)}),
        },
    )
    info = decode_server_info(data)
    assert info == expected
    assert info.to_dict() == expected.to_dict()
    assert info.total_player_count() == 2


def test_decoded_maps_are_read_only(datagram):
    info = decode_server_info(datagram)
    with pytest.raises(TypeError):
        info.teams[9] = TeamInfo(9, {})
    with pytest.raises(TypeError):
        info.teams[1].players[99] = PlayerRecord(99, "", "x", 0, 0, 0, 0, 0, 0)
