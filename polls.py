from dataclasses import dataclass

from serverinfo import ServerInfo


@dataclass
class PollResult:
    ok: bool
    map_name: str
    queue: int
    player_count: int
    joining: int
    max_players: int
    error: str = ""

    @staticmethod
    def from_info(info: ServerInfo) -> "PollResult":
        return PollResult(
            ok=True,
            map_name=info.current_map,
            queue=info.waiting_players,
            player_count=info.total_player_count(),
            joining=info.joining_player_count(),
            max_players=info.max_players,
        )

    @staticmethod
    def failed(error: str) -> "PollResult":
        return PollResult(False, "Unknown", 0, 0, 0, 0, error)

    def summary(self) -> str:
        if not self.ok:
            return self.error
        return f"Queue: {self.queue:2} - Players: {self.player_count:2} - Joining: {self.joining:2}"
