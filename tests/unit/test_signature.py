# tests/unit/test_signature.py
import pytest

from ctph.domain.errors import SignatureFormatError
from ctph.domain.signature import Signature


def test_parse_and_str_round_trip():
    text = "96:ab+/CDef:xyZ9"
    sig = Signature.parse(text)
    assert sig == Signature(96, "ab+/CDef", "xyZ9")
    assert str(sig) == text


def test_parse_empty_parts():
    assert Signature.parse("3::") == Signature(3, "", "")


def test_parse_drops_ssdeep_filename_column():
    sig = Signature.parse('48:abcdef:ghi,"/tmp/some file.bin"')
    assert sig == Signature(48, "abcdef", "ghi")


@pytest.mark.parametrize("text", ["", None, "3", "3:abc", "x:abc:def", "-3:a:b", " :a:b"])
def test_parse_rejects_malformed(text):
    with pytest.raises(SignatureFormatError):
        Signature.parse(text)


def test_format_error_is_a_value_error():
    with pytest.raises(ValueError):
        Signature.parse("nonsense")


def test_rejects_symbols_outside_alphabet():
    with pytest.raises(SignatureFormatError):
        Signature(3, "abc!", "")


def test_rejects_bad_block_size():
    with pytest.raises(SignatureFormatError):
        Signature(-1, "", "")
    with pytest.raises(SignatureFormatError):
        Signature("3", "", "")  # type: ignore[arg-type]


def test_equality_is_field_by_field():
    assert Signature(3, "abc", "de") != Signature(6, "abc", "de")
    assert Signature(3, "abc", "de") != Signature(3, "abd", "de")
    assert Signature(3, "abc", "de") == Signature(3, "abc", "de")


def test_signature_is_immutable():
    sig = Signature(3, "abc", "de")
    with pytest.raises(AttributeError):
        sig.part1 = "zzz"  # type: ignore[misc]
