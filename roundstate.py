import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Any

from constants import RUSH_LARGE, RUSH_BLOCK_SIZE
from cursor import ByteCursor
from serverinfo import RushState

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundStateFormat:
    decode: Callable[[ByteCursor], Any]
    size: int


def decode_rush(cursor: ByteCursor) -> RushState:
    return RushState(
        attackers_tickets=cursor.read_u16(),
        attackers_max_tickets=cursor.read_u16(),
        defenders_bases=cursor.read_u16(),
        defenders_max_bases=cursor.read_u16(),
    )


class RoundStateDecoder:
    """Maps a game mode id to the decoder for its round-state block.

    Decoders only ever see a window of exactly the declared block, so they
    cannot read into the fields that follow it. Moving the outer cursor past
    the block is left to the caller.
    """

    def __init__(self, formats: Optional[Dict[str, RoundStateFormat]] = None):
        self.formats: Dict[str, RoundStateFormat] = dict(formats or {})

    def register(self, game_mode: str, decode: Callable[[ByteCursor], Any], size: int) -> None:
        self.formats[game_mode] = RoundStateFormat(decode, size)

    def decode(self, cursor: ByteCursor, game_mode: str, block_size: int) -> Optional[Any]:
        block = cursor.window(block_size)
        fmt = self.formats.get(game_mode)
        if fmt is None:
            log.debug("No round state format for %r, skipping %d byte(s)", game_mode, block_size)
            return None
        if fmt.size != block_size:
            log.debug("%s round state is %d byte(s), expected %d; skipping", game_mode, block_size, fmt.size)
            return None
        return fmt.decode(block)


def default_round_states() -> RoundStateDecoder:
    decoder = RoundStateDecoder()
    decoder.register(RUSH_LARGE, decode_rush, RUSH_BLOCK_SIZE)
    return decoder
