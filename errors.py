from typing import Optional


class QueryError(Exception):
    """Base for everything a server query can fail with."""


class TransportError(QueryError):
    pass


class QueryFailed(TransportError):
    """A send, receive or timeout during the challenge/info exchange."""


class MetadataLookupFailed(QueryError):
    pass


class DecodeError(QueryError):
    def __init__(self, message: str, offset: Optional[int] = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at offset 0x{offset:x})"
        super().__init__(message)


class MalformedServerInfo(DecodeError):
    pass


class TruncatedData(MalformedServerInfo):
    def __init__(self, wanted: int, offset: int, available: int):
        self.wanted = wanted
        self.available = available
        super().__init__(f"Wanted {wanted} byte(s), {available} left", offset)


class DuplicatePlayer(MalformedServerInfo):
    def __init__(self, persona_id: int, team_index: int, offset: Optional[int] = None):
        self.persona_id = persona_id
        self.team_index = team_index
        super().__init__(f"Persona {persona_id} listed twice in team {team_index}", offset)
