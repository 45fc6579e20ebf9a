# src/services/stomp.py

"""Minimal STOMP 1.2 frame codec for the push channel.

Only the client side needed here is covered: CONNECT, SUBSCRIBE and
DISCONNECT out; CONNECTED, MESSAGE, RECEIPT and ERROR in.
"""

from dataclasses import dataclass, field

NULL = "\x00"
EOL = "\n"

_ESCAPES = {"\\": "\\\\", "\r": "\\r", "\n": "\\n", ":": "\\c"}
_UNESCAPES = {"\\": "\\", "r": "\r", "n": "\n", "c": ":"}

# Commands whose headers are sent and read verbatim in STOMP 1.2
_RAW_HEADER_COMMANDS = frozenset({"CONNECT", "CONNECTED"})


class StompError(ValueError):
    """A frame could not be decoded."""


@dataclass(frozen=True)
class StompFrame:
    """A single STOMP frame."""

    command: str
    headers: dict[str, str] = field(default_factory=lambda: dict[str, str]())
    body: str = ""

    def encode(self) -> str:
        """Serialise to wire text, NUL-terminated."""
        raw = self.command in _RAW_HEADER_COMMANDS
        lines = [self.command]
        for name, value in self.headers.items():
            if raw:
                lines.append(f"{name}:{value}")
            else:
                lines.append(f"{_escape(name)}:{_escape(value)}")
        return EOL.join(lines) + EOL + EOL + self.body + NULL


def _escape(text: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def _unescape(text: str) -> str:
    out: list[str] = []
    chars = iter(text)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, "")
        if nxt not in _UNESCAPES:
            raise StompError(f"Invalid header escape '\\{nxt}'")
        out.append(_UNESCAPES[nxt])
    return "".join(out)


def decode_frame(chunk: str) -> StompFrame:
    """Decode one frame (without its trailing NUL)."""
    head, sep, body = chunk.partition(EOL + EOL)
    if not sep:
        # CRLF line endings are also allowed
        head, sep, body = chunk.partition("\r\n\r\n")
    if not sep:
        raise StompError("Frame has no header terminator")

    lines = head.replace("\r\n", EOL).split(EOL)
    command = lines[0].strip()
    if not command:
        raise StompError("Frame has no command")

    raw = command in _RAW_HEADER_COMMANDS
    headers: dict[str, str] = {}
    for line in lines[1:]:
        if not line:
            continue
        name, colon, value = line.partition(":")
        if not colon:
            raise StompError(f"Malformed header line {line!r}")
        if not raw:
            name, value = _unescape(name), _unescape(value)
        # Repeated headers: the first occurrence wins
        headers.setdefault(name, value)

    if "content-length" in headers:
        try:
            length = int(headers["content-length"])
        except ValueError as exc:
            raise StompError("Invalid content-length") from exc
        encoded = body.encode("utf-8")
        body = encoded[:length].decode("utf-8", errors="replace")
    return StompFrame(command=command, headers=headers, body=body)


def split_frames(data: str) -> list[str]:
    """Split wire text on NUL into raw frame chunks, dropping heart-beat EOLs."""
    chunks: list[str] = []
    for chunk in data.split(NULL):
        chunk = chunk.lstrip("\r\n")
        if chunk:
            chunks.append(chunk)
    return chunks


def decode_frames(data: str) -> list[StompFrame]:
    """Split wire text into frames, skipping heart-beat EOLs."""
    return [decode_frame(chunk) for chunk in split_frames(data)]


def connect_frame(host: str) -> StompFrame:
    """CONNECT without heart-beating; liveness comes from the socket."""
    return StompFrame(
        "CONNECT",
        {
            "accept-version": "1.2,1.1,1.0",
            "host": host,
            "heart-beat": "0,0",
        },
    )


def subscribe_frame(destination: str, subscription_id: str = "sub-0") -> StompFrame:
    return StompFrame(
        "SUBSCRIBE",
        {"id": subscription_id, "destination": destination, "ack": "auto"},
    )


def disconnect_frame() -> StompFrame:
    return StompFrame("DISCONNECT", {"receipt": "disconnect-0"})
