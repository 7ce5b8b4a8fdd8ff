import pytest

from core.exceptions import PayloadDecodeError, PayloadEncodeError, ThumbnailDecodeError
from core.storage.codec import decode_drawing, decode_thumbnail, encode_drawing

PNG_1X1 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="


@pytest.mark.parametrize(
    "payload",
    [
        {},
        [],
        None,
        {"elements": [], "appState": {}},
        {"text": "héllo wörld ✏️ 你好", "nested": {"a": [1, [2, [3, None]]]}},
        {"text": "\ud83d lone surrogate"},
        {"big": 2**53 + 1, "small": -0.000123456789, "pi": 3.141592653589793, "exp": 1e-300},
    ],
)
def test_drawing_payload_round_trips(payload):
    assert decode_drawing(encode_drawing(payload)) == payload


def test_encode_is_compact_ascii_json():
    raw = encode_drawing({"name": "ä", "n": [1, 2]})
    assert raw == b'{"name":"\\u00e4","n":[1,2]}'


def test_encode_passes_bytes_through():
    raw = b'{"already":"encoded"}'
    assert encode_drawing(raw) == raw
    assert encode_drawing(bytearray(raw)) == raw


@pytest.mark.parametrize("payload", [{1, 2}, float("nan"), {"when": object()}])
def test_encode_rejects_non_json_values(payload):
    with pytest.raises(PayloadEncodeError):
        encode_drawing(payload)


def test_decode_rejects_invalid_json():
    with pytest.raises(PayloadDecodeError) as excinfo:
        decode_drawing(b"{not json", key="drawings/x/data.json")
    assert excinfo.value.details == {"key": "drawings/x/data.json"}


def test_decode_rejects_invalid_utf8():
    with pytest.raises(PayloadDecodeError):
        decode_drawing(b"\xff\xfe")


def test_thumbnail_bytes_are_used_as_is():
    data = bytes([0x89, 0x50, 0x4E, 0x47])
    assert decode_thumbnail(data) == data
    assert decode_thumbnail(bytearray(data)) == data
    assert decode_thumbnail(memoryview(data)) == data


@pytest.mark.parametrize("fmt", ["png", "jpg", "jpeg", "gif", "webp"])
def test_thumbnail_data_url_prefix_is_stripped(fmt):
    decoded = decode_thumbnail(f"data:image/{fmt};base64,{PNG_1X1}")
    assert decoded == decode_thumbnail(PNG_1X1)
    assert decoded[:4] == bytes([0x89, 0x50, 0x4E, 0x47])


def test_thumbnail_without_padding_decodes():
    assert decode_thumbnail(PNG_1X1.rstrip("=")) == decode_thumbnail(PNG_1X1)


def test_thumbnail_invalid_base64_raises():
    with pytest.raises(ThumbnailDecodeError):
        decode_thumbnail("abcde")


def test_thumbnail_rejects_other_types():
    with pytest.raises(ThumbnailDecodeError):
        decode_thumbnail(123)  # type: ignore[arg-type]
