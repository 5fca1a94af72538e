import unittest

from pinspect import codec
from pinspect.errors import FormatError


class TestCodec(unittest.TestCase):
    def test_format_ip_port(self):
        self.assertEqual(codec.format_ip_port(0x7F000001, 8080), "127.0.0.1:8080")
        self.assertEqual(codec.format_ip_port(0, 22), "0.0.0.0:22")
        self.assertEqual(codec.format_ip_port(0xC0A80101, 443), "192.168.1.1:443")

    def test_format_ip_port_truncates_like_a_buffer(self):
        self.assertEqual(codec.format_ip_port(0x7F000001, 8080, maxlen=22), "127.0.0.1:8080")
        self.assertEqual(codec.format_ip_port(0x7F000001, 8080, maxlen=6), "127.0")
        self.assertEqual(codec.format_ip_port(0x7F000001, 8080, maxlen=1), "")
        self.assertEqual(codec.format_ip_port(0, 22, maxlen=0), "?")
        self.assertEqual(codec.format_ip_port(0, 22, maxlen=-5), "?")

    def test_decode_little_endian_host(self):
        addr, port = codec.decode_address_token("0100007F:1F90", byteorder="little")
        self.assertEqual(addr, 0x7F000001)
        self.assertEqual(port, 8080)
        self.assertEqual(codec.format_ip_port(addr, port), "127.0.0.1:8080")

    def test_decode_big_endian_host(self):
        addr, port = codec.decode_address_token("7F000001:0016", byteorder="big")
        self.assertEqual(codec.format_ip_port(addr, port), "127.0.0.1:22")

    def test_decode_lowercase_hex(self):
        addr, port = codec.decode_address_token("0101a8c0:01bb", byteorder="little")
        self.assertEqual(codec.format_ip_port(addr, port), "192.168.1.1:443")

    def test_decode_rejects_malformed(self):
        for bad in (None, 42, "", "0100007F", "0100007F:1F90:00", "0100007G:1F90",
                    "100007F:1F90", "0100007F:1F9", "0100007F:+F90"):
            with self.subTest(token=bad):
                with self.assertRaises(FormatError):
                    codec.decode_address_token(bad)

    def test_format_error_is_value_error(self):
        with self.assertRaises(ValueError):
            codec.decode_address_token("nope")

    def test_parse_socket_inode(self):
        self.assertEqual(codec.parse_socket_inode("socket:[12345]"), 12345)
        for target in ("pipe:[12345]", "/dev/null", "anon_inode:[eventfd]", "socket:[]",
                       "socket:[12a]", "socket:[12345] (deleted)", "", None):
            with self.subTest(target=target):
                self.assertIsNone(codec.parse_socket_inode(target))

    def test_tcp_state_labels(self):
        self.assertEqual(codec.tcp_state_label(0x01), "ESTABLISHED")
        self.assertEqual(codec.tcp_state_label(0x0A), "LISTEN")
        self.assertEqual(codec.tcp_state_label(0x0B), "CLOSING")
        self.assertEqual(len(codec.TCP_STATE), 11)

    def test_unknown_state_label(self):
        self.assertEqual(codec.tcp_state_label(0), "UNKNOWN")
        self.assertEqual(codec.tcp_state_label(99), "UNKNOWN")
        self.assertEqual(codec.state_label(codec.UDP, 0x07), "UNKNOWN")
        self.assertEqual(codec.state_label(codec.TCP, 0x07), "CLOSE")


if __name__ == "__main__":
    unittest.main()
