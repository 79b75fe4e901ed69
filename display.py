from typing import List

from serverinfo import ServerInfo, TeamInfo, RushState, PlayerRecord
from utils import fmt_hms_from_seconds

WIDTH = 110
ROW_RULE = "|---------------|------|--------------------------------|------|------------|-------|--------|---------|------|"
ROW_END = "|_______________|______|________________________________|______|____________|_______|________|_________|______|"


def banner(title: str) -> List[str]:
    rule = "#" * WIDTH
    return [rule, "#" + title.center(WIDTH - 2) + "#", rule]


def format_player(p: PlayerRecord) -> str:
    return (f"| {p.persona_id:>13} | {p.tag:>4} | {p.name:>30} | {p.rank:>4} | {p.score:>10} "
            f"| {p.kills:>5} | {p.deaths:>6} | {p.squad_id:>7} | {p.role:>4} |")


def format_team(team: TeamInfo) -> List[str]:
    title = "Joining Players" if team.is_queue else f"Team {team.index} Information"
    lines = banner(title)
    lines.append(f"| {'PersonaId':>13} | {'Tag':>4} | {'Name':>30} | {'Rank':>4} | {'Score':>10} "
                 f"| {'Kills':>5} | {'Deaths':>6} | {'SquadId':>7} | {'Role':>4} |")
    lines.append(ROW_RULE)
    lines.extend(format_player(p) for p in team.players.values())
    lines.append(ROW_END)
    lines.append("")
    return lines


def format_round_state(state: RushState) -> List[str]:
    lines = banner("Rush")
    lines.append(f"Attackers: {state.attackers_tickets}/{state.attackers_max_tickets} tickets")
    lines.append(f"Defenders: {state.defenders_bases}/{state.defenders_max_bases} bases")
    lines.append("")
    return lines


def format_server_info(info: ServerInfo) -> str:
    lines = banner("General Information")
    lines += [
        f"CurrentMap: {info.current_map}",
        f"DefaultRoundTimeMultiplier: {info.default_round_time_multiplier}",
        f"GameId: {info.game_id}",
        f"GameMode: {info.game_mode}",
        f"MapVariant: {info.map_variant}",
        f"MaxPlayers: {info.max_players}",
        f"WaitingPlayers: {info.waiting_players}",
        f"RoundTime: {info.round_time} ({fmt_hms_from_seconds(info.round_time)})",
        f"Players: {info.total_player_count()}/{info.max_players} (joining {info.joining_player_count()})",
        "",
    ]
    if isinstance(info.round_state, RushState):
        lines += format_round_state(info.round_state)
    for team in info.teams.values():
        lines += format_team(team)
    return "\n".join(lines)
