from mimecodec.mailutils import MimeDecodeError
from mimecodec.mailutils.base64mime import (b64encode, b64decode,
                                            base64_encode, base64_decode)
from mimecodec.tests import MimeCodecUnittest, sample_text


class TestBase64Primitive(MimeCodecUnittest):
    def test_encode(self):
        self.assertEqual(b64encode('tere ÕÄÖÕ'), 'dGVyZSDDlcOEw5bDlQ==')
        self.assertEqual(b64encode(b'\xbd\xc5'), 'vcU=')
        self.assertEqual(b64encode(''), '')
        self.assertEqual(b64encode(None), '')

    def test_decode(self):
        self.assertEqual(b64decode('dGVyZSDDlcOEw5bDlQ=='),
                         'tere ÕÄÖÕ'.encode('utf-8'))
        self.assertEqual(b64decode('dGVyZSDDlcOEw5bDlQ==', 'string'),
                         'tere ÕÄÖÕ')

    def test_decode_ignores_whitespace(self):
        self.assertEqual(b64decode(' dGVy\r\nZSDD\tlcOE w5bDlQ==\r\n'),
                         'tere ÕÄÖÕ'.encode('utf-8'))

    def test_decode_missing_padding(self):
        self.assertEqual(b64decode('dGVyZSDDlcOEw5bDlQ'),
                         'tere ÕÄÖÕ'.encode('utf-8'))
        self.assertEqual(b64decode('YQ'), b'a')

    def test_decode_nothing(self):
        self.assertEqual(b64decode(''), b'')
        self.assertEqual(b64decode(None), b'')

    def test_decode_invalid(self):
        self.assertRaises(MimeDecodeError, b64decode, 'dGVy*ZSA=')
        self.assertRaises(MimeDecodeError, b64decode, 'Q')
        self.assertRaises(ValueError, b64decode, '!!!!')

    def test_error_carries_data(self):
        try:
            b64decode('a*b=')
        except MimeDecodeError as e:
            self.assertEqual(e.data, 'a*b=')
            self.assertTrue(str(e).startswith('Invalid base64 data'))
        else:
            self.fail('MimeDecodeError not raised')


class TestBase64Encode(MimeCodecUnittest):
    def test_encode_utf8(self):
        self.assertEqual(base64_encode('tere ÕÄÖÕ'), 'dGVyZSDDlcOEw5bDlQ==')

    def test_encode_from_charset(self):
        self.assertEqual(base64_encode(b'\xbd\xc5', 'ks_c_5601-1987'),
                         '7Iug')

    def test_encode_binary(self):
        self.assertEqual(base64_encode(b'\xbd\xc5', 'binary'), 'vcU=')
        self.assertEqual(base64_encode('\xbd', 'binary'), 'wr0=')

    def test_line_length(self):
        encoded = base64_encode(sample_text(500))
        lines = encoded.split('\r\n')
        self.assertTrue(len(lines) > 1)
        for line in lines[:-1]:
            self.assertEqual(len(line), 76)
        self.assertLinesWithin(encoded)
        self.assertFalse(encoded.endswith('\r\n'))

    def test_exact_line(self):
        # 57 bytes encode to exactly one line of 76 characters
        encoded = base64_encode('a' * 57)
        self.assertEqual(len(encoded), 76)
        self.assertFalse('\r\n' in encoded)


class TestBase64Decode(MimeCodecUnittest):
    def test_decode_utf8(self):
        self.assertEqual(base64_decode('dGVyZSDDlcOEw5bDlQ=='), 'tere ÕÄÖÕ')

    def test_decode_to_charset(self):
        self.assertEqual(base64_decode('vcU=', 'ks_c_5601-1987'), '신')

    def test_decode_binary(self):
        self.assertEqual(base64_decode('vcU=', 'binary'), '\xbd\xc5')

    def test_round_trip(self):
        text = sample_text(300)
        self.assertEqual(base64_decode(base64_encode(text)), text)

    def test_decode_invalid(self):
        self.assertRaises(MimeDecodeError, base64_decode, '@@@@')
