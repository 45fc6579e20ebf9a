# tests/test_stomp.py

"""Tests for the STOMP frame codec."""

import unittest

from src.services.stomp import (
    StompError,
    StompFrame,
    connect_frame,
    decode_frame,
    decode_frames,
    split_frames,
    subscribe_frame,
)


class TestEncode(unittest.TestCase):
    """Outbound frames."""

    def test_connect_frame(self) -> None:
        """CONNECT carries versions, host and disabled heart-beats."""
        text = connect_frame("shop.example").encode()
        self.assertTrue(text.startswith("CONNECT\n"))
        self.assertIn("accept-version:1.2,1.1,1.0\n", text)
        self.assertIn("host:shop.example\n", text)
        self.assertIn("heart-beat:0,0\n", text)
        self.assertTrue(text.endswith("\n\n\x00"))

    def test_subscribe_frame(self) -> None:
        """SUBSCRIBE names the topic and a subscription id."""
        text = subscribe_frame("/topic/productos").encode()
        self.assertIn("destination:/topic/productos", text)
        self.assertIn("id:sub-0", text)

    def test_header_escaping(self) -> None:
        """Colons and newlines in header values are escaped."""
        text = StompFrame("SEND", {"x": "a:b\nc"}).encode()
        self.assertIn("x:a\\cb\\nc\n", text)


class TestDecode(unittest.TestCase):
    """Inbound frames."""

    def test_message_frame(self) -> None:
        """Headers and body are split correctly."""
        frame = decode_frame(
            'MESSAGE\ndestination:/topic/productos\nmessage-id:1\n\n{"a":1}'
        )
        self.assertEqual(frame.command, "MESSAGE")
        self.assertEqual(frame.headers["destination"], "/topic/productos")
        self.assertEqual(frame.body, '{"a":1}')

    def test_unescapes_headers(self) -> None:
        """Escaped header values are restored."""
        frame = decode_frame("ERROR\nmessage:bad\\cthing\n\n")
        self.assertEqual(frame.headers["message"], "bad:thing")

    def test_connected_headers_raw(self) -> None:
        """CONNECTED headers are not unescaped."""
        frame = decode_frame("CONNECTED\nserver:a\\cb\n\n")
        self.assertEqual(frame.headers["server"], "a\\cb")

    def test_content_length(self) -> None:
        """content-length bounds the body."""
        frame = decode_frame("MESSAGE\ncontent-length:2\n\nhi there")
        self.assertEqual(frame.body, "hi")

    def test_repeated_header_first_wins(self) -> None:
        frame = decode_frame("MESSAGE\nx:1\nx:2\n\n")
        self.assertEqual(frame.headers["x"], "1")

    def test_round_trip(self) -> None:
        """encode() output decodes back to the same frame."""
        original = StompFrame(
            "MESSAGE", {"destination": "/topic/productos"}, '{"type":"X"}'
        )
        self.assertEqual(decode_frames(original.encode()), [original])

    def test_multiple_frames_and_heartbeats(self) -> None:
        """Several frames in one payload, heart-beats skipped."""
        data = "\nCONNECTED\nversion:1.2\n\n\x00\n\nMESSAGE\n\nbody\x00\n"
        frames = decode_frames(data)
        self.assertEqual([f.command for f in frames], ["CONNECTED", "MESSAGE"])
        self.assertEqual(frames[1].body, "body")

    def test_heartbeat_only(self) -> None:
        self.assertEqual(decode_frames("\n"), [])

    def test_split_keeps_undecodable_chunks_separate(self) -> None:
        """split_frames isolates each chunk so one bad frame can be dropped."""
        data = "MESSAGE\nx:a\\tb\n\n\x00\nMESSAGE\n\nok\x00"
        chunks = split_frames(data)
        self.assertEqual(len(chunks), 2)
        with self.assertRaises(StompError):
            decode_frame(chunks[0])
        self.assertEqual(decode_frame(chunks[1]).body, "ok")

    def test_crlf_frames(self) -> None:
        """CRLF line endings are accepted."""
        frame = decode_frame("MESSAGE\r\ndestination:/t\r\n\r\nbody")
        self.assertEqual(frame.headers["destination"], "/t")
        self.assertEqual(frame.body, "body")

    def test_malformed(self) -> None:
        """Frames without a blank line or with bad headers raise."""
        for data in ("MESSAGE\ndestination:/t", "MESSAGE\nbadheader\n\n", "\n\n"):
            with self.subTest(data=data):
                with self.assertRaises(StompError):
                    decode_frame(data)


if __name__ == "__main__":
    unittest.main()
