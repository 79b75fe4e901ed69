from typing import Optional, Dict, Tuple, Any
from dataclasses import dataclass
from utils import parse_address, parse_game_id
from constants import DEFAULT_PLATFORM


@dataclass
class ServerProfile:
    name: str
    guid: str
    platform: str = DEFAULT_PLATFORM
    # cached from the last Battlelog lookup, skips the HTTP round trip when set
    address: Optional[Tuple[str, int]] = None
    game_id: Optional[int] = None

    @property
    def resolved(self) -> bool:
        return self.address is not None and self.game_id is not None

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ServerProfile":
        addr_s = str(d.get("address", "") or "").strip()
        try:
            address = parse_address(addr_s) if addr_s else None
        except ValueError:
            address = None
        gid = d.get("game_id", None)
        try:
            game_id = parse_game_id(gid) if gid is not None and str(gid).strip() != "" else None
        except ValueError:
            game_id = None
        return ServerProfile(
            name=str(d.get("name", "")).strip(),
            guid=str(d.get("guid", "")).strip(),
            platform=str(d.get("platform", DEFAULT_PLATFORM)).strip().lower() or DEFAULT_PLATFORM,
            address=address,
            game_id=game_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "guid": self.guid,
            "platform": self.platform,
            "address": f"{self.address[0]}:{self.address[1]}" if self.address else "",
            "game_id": self.game_id,
        }
