from dataclasses import dataclass
from typing import Dict, Any

from constants import TIMEOUT, UPDATE_INTERVAL, DEFAULT_PLATFORM


@dataclass
class AppPrefs:
    timeout: float = TIMEOUT
    poll_interval: int = UPDATE_INTERVAL
    platform: str = DEFAULT_PLATFORM
    dump_raw: bool = False
    log_players: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timeout": self.timeout,
            "poll_interval": self.poll_interval,
            "platform": self.platform,
            "dump_raw": self.dump_raw,
            "log_players": self.log_players,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "AppPrefs":
        try:
            timeout = float(d.get("timeout", TIMEOUT))
        except (TypeError, ValueError):
            timeout = TIMEOUT
        try:
            poll_interval = int(d.get("poll_interval", UPDATE_INTERVAL))
        except (TypeError, ValueError):
            poll_interval = UPDATE_INTERVAL
        return AppPrefs(
            timeout=timeout if timeout > 0 else TIMEOUT,
            poll_interval=max(1, poll_interval),
            platform=str(d.get("platform", DEFAULT_PLATFORM)).strip().lower() or DEFAULT_PLATFORM,
            dump_raw=bool(d.get("dump_raw", False)),
            log_players=bool(d.get("log_players", True)),
        )
