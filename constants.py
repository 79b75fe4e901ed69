from typing import Tuple

# config
APP_NAME = "bfquery"
APP_VERSION = "1.0"
TIMEOUT = 5
UPDATE_INTERVAL = 5
RECONNECT_DELAY = 1.0
MAX_FAILS_BEFORE_OFFLINE = 5
SERVERS_FILENAME = "servers.json"
PREFS_FILENAME = "prefs.json"
LOGS_ROOT = "logs"
DUMP_FILENAME = "serverData.bin"

# wire
QUERY_PREFIX = b"\xff\xff\xff\xff\x51\x50\x5f"
CHALLENGE_BUFFER_SIZE = 1024
INFO_BUFFER_SIZE = 4096
CHALLENGE_HEADER_SIZE = 8
CHALLENGE_SHORT_REPLY = 4
INFO_OFFSET = 0x13

# battlelog
DEFAULT_PLATFORM = "pc"
PLATFORMS: Tuple[str, ...] = ("pc", "ps4", "xboxone", "ps3", "xbox360")
BATTLELOG_URL = "https://battlelog.battlefield.com/bf4/servers/show/{platform}/{guid}/SERVER/?json=1"
USER_AGENT = "Mozilla/5.0 (compatible; bfquery)"

# round state
RUSH_LARGE = "RushLarge"
RUSH_BLOCK_SIZE = 0x08
