#
# Tagview - Tagged Word Tests
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from tagview.words import (
    FALSE,
    IMMEDIATE_MAX,
    IMMEDIATE_MIN,
    TRUE,
    VOID,
    WORD_MASK,
    Constant,
    Kind,
    ShortKind,
    classify,
    encode_char,
    encode_int,
    encode_pointer,
    encode_short,
)


# Tests ----------------------------------------------------------------------------------------------------------------
class TestClassify:
    @pytest.mark.parametrize(
        "n",
        [
            pytest.param(0, id="zero"),
            pytest.param(5, id="small"),
            pytest.param(-3, id="negative"),
            pytest.param(IMMEDIATE_MAX, id="max"),
            pytest.param(IMMEDIATE_MIN, id="min"),
        ],
    )
    def test_immediate(self, n):
        decoded = classify(encode_int(n))
        assert decoded.kind is Kind.IMMEDIATE
        assert decoded.number == n

    @pytest.mark.parametrize(
        "word, constant",
        [
            pytest.param(TRUE, Constant.TRUE, id="true"),
            pytest.param(FALSE, Constant.FALSE, id="false"),
            pytest.param(VOID, Constant.VOID, id="void"),
        ],
    )
    def test_constants(self, word, constant):
        decoded = classify(word)
        assert decoded.kind is Kind.CONSTANT
        assert decoded.constant is constant

    def test_unknown_constant(self):
        """Constant tag bits with an unrecognized sentinel."""
        decoded = classify(0x42)
        assert decoded.kind is Kind.CONSTANT
        assert decoded.constant is None

    @pytest.mark.parametrize(
        "kind, n",
        [
            pytest.param(ShortKind.INT8, -128, id="int8_min"),
            pytest.param(ShortKind.INT8, 127, id="int8_max"),
            pytest.param(ShortKind.INT16, -300, id="int16"),
            pytest.param(ShortKind.UINT8, 255, id="uint8"),
            pytest.param(ShortKind.UINT16, 65535, id="uint16"),
            pytest.param(ShortKind.CHAR, ord("λ"), id="char"),
        ],
    )
    def test_short(self, kind, n):
        decoded = classify(encode_short(kind, n))
        assert decoded.kind is Kind.SHORT
        assert decoded.short_kind is kind
        assert decoded.number == n

    def test_unknown_short_subtag(self):
        word = (7 << 32) | (31 << 3) | 0b110
        decoded = classify(word)
        assert decoded.kind is Kind.SHORT
        assert decoded.short_kind is None

    def test_pointer(self):
        decoded = classify(encode_pointer(0x1000))
        assert decoded.kind is Kind.HEAP
        assert decoded.address == 0x1000

    @pytest.mark.parametrize(
        "word",
        [
            pytest.param(0, id="null"),
            pytest.param(0b100, id="reserved"),
            pytest.param(0xFF00 | 0b100, id="reserved_high"),
        ],
    )
    def test_unknown(self, word):
        assert classify(word).kind is Kind.UNKNOWN

    def test_total_over_masked_words(self):
        """Out-of-range ints are masked, never rejected."""
        assert classify(encode_int(-1) + (1 << 64)).number == -1
        assert classify(-1).word == WORD_MASK


class TestEncode:
    def test_char(self):
        assert classify(encode_char("a")).number == ord("a")

    @pytest.mark.parametrize(
        "kind, n",
        [
            pytest.param(ShortKind.INT8, 128, id="int8_over"),
            pytest.param(ShortKind.UINT8, -1, id="uint8_neg"),
            pytest.param(ShortKind.UINT16, 65536, id="uint16_over"),
            pytest.param(ShortKind.CHAR, 0x110000, id="char_over"),
        ],
    )
    def test_short_out_of_range(self, kind, n):
        with pytest.raises(ValueError, match="out of range"):
            encode_short(kind, n)

    def test_int_out_of_range(self):
        with pytest.raises(ValueError, match="out of range"):
            encode_int(IMMEDIATE_MAX + 1)

    def test_int_rejects_bool(self):
        with pytest.raises(TypeError):
            encode_int(True)

    def test_char_rejects_long_text(self):
        with pytest.raises(TypeError):
            encode_char("ab")

    @pytest.mark.parametrize(
        "address",
        [
            pytest.param(0, id="null"),
            pytest.param(0x1001, id="unaligned"),
            pytest.param(-8, id="negative"),
        ],
    )
    def test_pointer_invalid(self, address):
        with pytest.raises(ValueError):
            encode_pointer(address)
