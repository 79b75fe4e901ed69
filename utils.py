import os
import csv
import json
import urllib.request
from datetime import datetime, timezone
from typing import Optional, Dict, List, Tuple, Any

from application import AppPrefs
from constants import (
    SERVERS_FILENAME, PREFS_FILENAME, LOGS_ROOT, USER_AGENT, TIMEOUT, DEFAULT_PLATFORM,
)

CSV_HEADER = ["UTC Timestamp", "Map", "Queue", "Players", "Joining", "Max Players"]


# helpers
def now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def now_utc_hms() -> str:
    return datetime.now(timezone.utc).strftime("%H:%M:%S")

def now_utc_stamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")

def fmt_hms_from_seconds(seconds: int) -> str:
    seconds = max(0, int(seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    if h > 0:
        return f"{h}h {m:02d}m"
    if m > 0:
        return f"{m}m {s:02d}s"
    return f"{s}s"

def parse_address(addr: str) -> Tuple[str, int]:
    addr = (addr or "").strip()
    if not addr:
        raise ValueError("Empty address")
    if ":" not in addr:
        raise ValueError("Address must be ip:port")

    host, port_s = addr.rsplit(":", 1)
    host = host.strip()
    port_s = port_s.strip()
    if not host:
        raise ValueError("Invalid host")
    if not port_s.isdigit():
        raise ValueError("Port must be numeric")
    port = int(port_s)
    if not (1 <= port <= 65535):
        raise ValueError("Port out of range")
    return host, port

def parse_game_id(value: Any) -> int:
    s = str(value).strip()
    if not s.isdigit():
        raise ValueError(f"gameId must be a non-negative integer, got {value!r}")
    game_id = int(s)
    if game_id >= 2 ** 64:
        raise ValueError("gameId does not fit in 64 bits")
    return game_id

def safe_server_folder(name: str) -> str:
    bad = '<>:"/\\|?*'
    cleaned = "".join(c for c in (name or "").strip() if c not in bad).strip()
    return cleaned or "server"

def http_open(url: str, timeout_sec: int = TIMEOUT * 3):
    req = urllib.request.Request(url, headers={
        "User-Agent": USER_AGENT,
        "Accept-Encoding": "gzip",
    })
    return urllib.request.urlopen(req, timeout=timeout_sec)

# per server csv logging
def server_log_dir(profile_name: str) -> str:
    d = os.path.join(LOGS_ROOT, safe_server_folder(profile_name))
    os.makedirs(d, exist_ok=True)
    return d

def server_csv_path(profile_name: str) -> str:
    return os.path.join(server_log_dir(profile_name), "player_log.csv")

def ensure_server_csv(csv_path: str) -> None:
    if not os.path.exists(csv_path):
        os.makedirs(os.path.dirname(csv_path), exist_ok=True)
        with open(csv_path, "w", newline="", encoding="utf-8") as f:
            csv.writer(f).writerow(CSV_HEADER)

def append_server_csv(csv_path: str, row: List[Any]) -> None:
    ensure_server_csv(csv_path)
    with open(csv_path, "a", newline="", encoding="utf-8") as f:
        csv.writer(f).writerow(row)

# raw datagrams
def dump_datagram(data: bytes, path: str) -> str:
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)
    return path

def error_dump_path(profile_name: str) -> str:
    return os.path.join(server_log_dir(profile_name), f"serverData_error_{now_utc_stamp()}.bin")

# persistence
def load_servers(path: str = SERVERS_FILENAME) -> List[Dict[str, Any]]:
    if not os.path.exists(path):
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return []
    if not isinstance(data, list):
        return []
    out: List[Dict[str, Any]] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        if "name" not in item or "guid" not in item:
            continue
        out.append({
            "name": str(item.get("name", "")).strip(),
            "guid": str(item.get("guid", "")).strip(),
            "platform": str(item.get("platform", DEFAULT_PLATFORM)).strip() or DEFAULT_PLATFORM,
            "address": str(item.get("address", "") or "").strip(),
            "game_id": item.get("game_id", None),
        })
    return out

def save_servers(servers: List[Dict[str, Any]], path: str = SERVERS_FILENAME) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(servers, f, indent=2, ensure_ascii=False)

def load_prefs(path: str = PREFS_FILENAME) -> AppPrefs:
    if not os.path.exists(path):
        return AppPrefs()
    try:
        with open(path, "r", encoding="utf-8") as f:
            d = json.load(f)
    except (OSError, ValueError):
        return AppPrefs()
    if isinstance(d, dict):
        return AppPrefs.from_dict(d)
    return AppPrefs()

def save_prefs(prefs: AppPrefs, path: str = PREFS_FILENAME) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(prefs.to_dict(), f, indent=2, ensure_ascii=False)

def find_profile(profiles: List[Dict[str, Any]], key: str) -> Optional[Dict[str, Any]]:
    key = (key or "").strip()
    for p in profiles:
        if p.get("name") == key or p.get("guid") == key:
            return p
    return None
