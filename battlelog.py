import gzip
import json
import logging
import urllib.error
from dataclasses import dataclass
from typing import Dict, Any, Tuple

from constants import BATTLELOG_URL, DEFAULT_PLATFORM, PLATFORMS
from errors import MetadataLookupFailed
from utils import http_open, parse_game_id

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerShow:
    ip: str
    port: int
    game_id: int

    @property
    def address(self) -> Tuple[str, int]:
        return self.ip, self.port

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ServerShow":
        missing = [k for k in ("ip", "port", "gameId") if d.get(k) in (None, "")]
        if missing:
            raise MetadataLookupFailed(f"SERVER_INFO is missing {', '.join(missing)}")
        ip = str(d["ip"]).strip()
        try:
            port = int(d["port"])
            game_id = parse_game_id(d["gameId"])
        except (TypeError, ValueError) as e:
            raise MetadataLookupFailed(f"Bad SERVER_INFO: {e}") from e
        if not ip or not (1 <= port <= 65535):
            raise MetadataLookupFailed(f"Bad SERVER_INFO address {ip!r}:{port}")
        return ServerShow(ip=ip, port=port, game_id=game_id)


def server_show_url(guid: str, platform: str = DEFAULT_PLATFORM) -> str:
    guid = (guid or "").strip()
    platform = (platform or DEFAULT_PLATFORM).strip().lower()
    if not guid:
        raise MetadataLookupFailed("Empty server guid")
    if platform not in PLATFORMS:
        raise MetadataLookupFailed(f"Unknown platform {platform!r}")
    return BATTLELOG_URL.format(platform=platform, guid=guid)


def parse_server_show(body: bytes) -> ServerShow:
    try:
        response = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise MetadataLookupFailed(f"Response is not JSON: {e}") from e
    if not isinstance(response, dict) or "type" not in response:
        raise MetadataLookupFailed("Request failed")
    message = response.get("message")
    if not isinstance(message, dict):
        raise MetadataLookupFailed("message didn't exist")
    info = message.get("SERVER_INFO")
    if not isinstance(info, dict):
        raise MetadataLookupFailed("SERVER_INFO didn't exist")
    return ServerShow.from_dict(info)


def get_server_show(guid: str, platform: str = DEFAULT_PLATFORM, timeout_sec: int = 15) -> ServerShow:
    url = server_show_url(guid, platform)
    log.debug("GET %s", url)
    try:
        with http_open(url, timeout_sec=timeout_sec) as resp:
            body = resp.read()
            if (resp.headers.get("Content-Encoding") or "").lower() == "gzip":
                body = gzip.decompress(body)
    except urllib.error.HTTPError as e:
        raise MetadataLookupFailed(f"HTTP {getattr(e, 'code', '')}".strip()) from e
    except (urllib.error.URLError, OSError, EOFError) as e:
        raise MetadataLookupFailed(str(e)) from e
    return parse_server_show(body)
