"""Tests for the TOON encoder."""

from __future__ import annotations

from contextcrumb.models import RankedFile, Signature, SymbolKind
from contextcrumb.toon import _encode_value, encode


def _sig(file: str, line: int, text: str, refs: int = 0) -> Signature:
    return Signature(
        file=file,
        line=line,
        text=text,
        type=SymbolKind.FUNCTION,
        name=text,
        refs=refs,
    )


class TestEncodeValue:
    """Tests for _encode_value."""

    def test_plain_string_unquoted(self) -> None:
        assert _encode_value("hello") == "hello"

    def test_spaces_and_parens_unquoted(self) -> None:
        assert _encode_value("function getData()") == "function getData()"

    def test_string_with_comma_quoted(self) -> None:
        assert _encode_value("a,b") == '"a,b"'

    def test_string_with_colon_quoted(self) -> None:
        assert _encode_value("a:b") == '"a:b"'

    def test_number_unquoted(self) -> None:
        assert _encode_value("42") == "42"
        assert _encode_value("3.14") == "3.14"

    def test_empty_string_quoted(self) -> None:
        assert _encode_value("") == '""'

    def test_boolean_keywords_quoted(self) -> None:
        assert _encode_value("true") == '"true"'
        assert _encode_value("false") == '"false"'
        assert _encode_value("null") == '"null"'

    def test_leading_whitespace_quoted(self) -> None:
        assert _encode_value(" hello") == '" hello"'

    def test_string_with_quotes_escaped(self) -> None:
        assert _encode_value('say "hi"') == '"say \\"hi\\""'

    def test_dash_prefix_quoted(self) -> None:
        assert _encode_value("-flag") == '"-flag"'

    def test_control_characters_escaped(self) -> None:
        assert _encode_value("hello\nworld") == '"hello\\nworld"'
        assert _encode_value("hello\rworld") == '"hello\\rworld"'
        assert _encode_value("hello\tworld") == '"hello\\tworld"'


class TestEncode:
    """Tests for encode."""

    def test_files_and_signatures_tables(self) -> None:
        ranked = [
            RankedFile("src/booking.py", 0.6, def_count=2, ref_count=3),
            RankedFile("src/main.py", 0.4, def_count=1, ref_count=0),
        ]
        signatures = {
            "src/booking.py": [
                _sig("src/booking.py", 4, "function create_booking()", refs=2),
                _sig("src/booking.py", 9, "class Booking", refs=1),
            ]
        }
        assert encode(ranked, signatures) == (
            "files[2]{path,defs,refs}:\n"
            "  src/booking.py,2,3\n"
            "  src/main.py,1,0\n"
            "signatures[2]{file,line,text,refs}:\n"
            "  src/booking.py,4,function create_booking(),2\n"
            "  src/booking.py,9,class Booking,1"
        )

    def test_show_scores_adds_rank_column(self) -> None:
        result = encode([RankedFile("a.py", 0.123456)], {}, show_scores=True)
        assert result.startswith("files[1]{path,defs,refs,rank}:\n  a.py,0,0,0.1235")

    def test_signatures_follow_file_order(self) -> None:
        ranked = [RankedFile("b.py", 0.6), RankedFile("a.py", 0.4)]
        signatures = {
            "a.py": [_sig("a.py", 1, "alpha")],
            "b.py": [_sig("b.py", 1, "beta")],
        }
        lines = encode(ranked, signatures).split("\n")
        assert lines[-2:] == ["  b.py,1,beta,0", "  a.py,1,alpha,0"]

    def test_signature_cap_per_file(self) -> None:
        signatures = {"a.py": [_sig("a.py", i, f"f{i}") for i in range(1, 8)]}
        result = encode(
            [RankedFile("a.py", 1.0)], signatures, max_signatures_per_file=3
        )
        assert "signatures[3]{file,line,text,refs}:" in result

    def test_signatures_for_unlisted_files_ignored(self) -> None:
        signatures = {"other.py": [_sig("other.py", 1, "alpha")]}
        result = encode([RankedFile("a.py", 1.0)], signatures)
        assert "signatures[0]{file,line,text,refs}:" in result
        assert "other.py" not in result

    def test_special_characters_quoted(self) -> None:
        signatures = {"a.py": [_sig("a.py", 1, "type Map[str, int]")]}
        result = encode([RankedFile("a.py", 1.0)], signatures)
        assert '"type Map[str, int]"' in result

    def test_empty(self) -> None:
        assert encode([], {}) == (
            "files[0]{path,defs,refs}:\nsignatures[0]{file,line,text,refs}:"
        )

    def test_no_trailing_newline(self) -> None:
        result = encode([RankedFile("a.py", 1.0)], {})
        assert not result.endswith("\n")
