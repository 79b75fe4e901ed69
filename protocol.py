import struct
import logging
from typing import Optional

from constants import (
    QUERY_PREFIX, CHALLENGE_BUFFER_SIZE, INFO_BUFFER_SIZE,
    CHALLENGE_HEADER_SIZE, CHALLENGE_SHORT_REPLY,
)
from decoder import ServerInfoDecoder
from errors import QueryFailed
from serverinfo import ServerInfo
from transport import QueryTransport

log = logging.getLogger(__name__)


def build_packet(game_id: int, challenge: bytes = b"") -> bytes:
    if not 0 <= game_id < 2 ** 64:
        raise ValueError(f"gameId out of range: {game_id}")
    return QUERY_PREFIX + struct.pack(">Q", game_id) + challenge


def extract_challenge(response: bytes) -> bytes:
    # short replies are the bare token, longer ones carry an 8 byte header first
    if len(response) > CHALLENGE_SHORT_REPLY:
        return response[CHALLENGE_HEADER_SIZE:]
    return response


class ChallengeResponseProtocol:
    """Two round trips: probe for a challenge token, then ask for the info.

    No retries here. If the transport reconnects in between, the token is
    stale and the whole exchange has to start again.
    """

    def __init__(self, transport: QueryTransport, decoder: Optional[ServerInfoDecoder] = None,
                 timeout: Optional[float] = None):
        self.transport = transport
        self.decoder = decoder or ServerInfoDecoder()
        self.timeout = timeout

    def _exchange(self, packet: bytes, bufsize: int, step: str) -> bytes:
        try:
            self.transport.send(packet)
            return self.transport.receive(bufsize, self.timeout)
        except OSError as e:
            # socket.timeout is an OSError too
            raise QueryFailed(f"{step} failed: {str(e) or type(e).__name__}") from e

    def fetch_datagram(self, game_id: int) -> bytes:
        reply = self._exchange(build_packet(game_id), CHALLENGE_BUFFER_SIZE, "Challenge request")
        challenge = extract_challenge(reply)
        log.debug("Challenge reply %d byte(s), token %s", len(reply), challenge.hex())

        data = self._exchange(build_packet(game_id, challenge), INFO_BUFFER_SIZE, "Info request")
        log.debug("Info reply %d byte(s)", len(data))
        return data

    def query(self, game_id: int) -> ServerInfo:
        return self.decoder.decode(self.fetch_datagram(game_id))
