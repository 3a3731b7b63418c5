from __future__ import annotations

from apex_engine.buffer import GapBuffer, ResultCode
from apex_engine.expressions import (
    EndRelativeLocation,
    PatternRange,
    PatternRangeExpr,
    Range,
    StartRelativeLocation,
    evaluate,
    span_range,
    validate,
    whole_buffer,
)

LINES = "1abcdedgh\n2ijklmnop\n3qrstuvwx\n4yz abcde\n5fghijklm\n6nopqrstu\n"


def make_buffer(text: str = LINES) -> GapBuffer:
    return GapBuffer.from_text(text)


def test_start_relative_location_is_fixed() -> None:
    buffer = make_buffer()
    location = StartRelativeLocation(buffer, 30)

    buffer.insert_string_at(0, "xyz")

    assert location.get_absolute() == 30


def test_end_relative_location_follows_buffer_length() -> None:
    buffer = make_buffer()
    location = EndRelativeLocation(buffer, 10)
    assert location.get_absolute() == 50

    buffer.insert_string_at(0, "xyz")

    assert location.get_absolute() == 53


def test_location_conversions_snapshot_current_length() -> None:
    buffer = make_buffer()
    start = StartRelativeLocation(buffer, 42)

    end = start.as_end_relative()
    assert end.offset == 18
    assert end.as_start_relative().offset == 42
    assert start.as_start_relative() is start
    assert end.as_end_relative() is end


def test_validate_location_bounds() -> None:
    buffer = make_buffer()

    assert validate(StartRelativeLocation(buffer, 60)).ok
    assert validate(StartRelativeLocation(buffer, 61)).code == ResultCode.PAST_END
    assert validate(StartRelativeLocation(buffer, -1)).code == ResultCode.BEFORE_START
    assert validate(EndRelativeLocation(buffer, 61)).code == ResultCode.BEFORE_START


def test_range_validation() -> None:
    buffer = make_buffer()

    assert span_range(buffer, 30, 50).validate().ok
    assert span_range(buffer, 50, 30).validate().code == ResultCode.INVALID_RANGE
    assert span_range(buffer, 30, 500).validate().code == ResultCode.PAST_END
    assert span_range(buffer, 300, 500).validate().code == ResultCode.PAST_END


def test_range_contents() -> None:
    buffer = make_buffer()

    contents, status = span_range(buffer, 30, 50).get_contents()

    assert status.ok
    assert contents == b"4yz abcde\n5fghijklm\n"
    assert span_range(buffer, 30, 50).length == 20
    assert span_range(buffer, 50, 30).get_contents()[1].code == ResultCode.INVALID_RANGE


def test_normalized_start_ignores_insertions_after_it() -> None:
    buffer = make_buffer()
    normalized = span_range(buffer, 30, 50).normalize()

    buffer.insert_string_at(40, "!!!!")

    assert normalized.bounds() == (30, 54)
    assert normalized.get_contents()[0] == b"4yz abcde\n!!!!5fghijklm\n"


def test_normalized_end_tracks_its_byte() -> None:
    buffer = make_buffer()
    normalized = span_range(buffer, 30, 50).normalize()

    buffer.insert_string_at(5, "ab")
    assert normalized.bounds() == (30, 52)

    buffer.delete_range(0, 5)
    assert normalized.bounds() == (30, 47)
    assert normalized.end.get_absolute() == buffer.to_bytes().index(b"6nop")


def test_normalized_range_is_stable_under_insert_at_end() -> None:
    buffer = make_buffer()
    normalized = span_range(buffer, 30, 50).normalize()

    buffer.insert_string_at(60, "tail\n")

    assert normalized.bounds() == (30, 55)


def test_normalize_keeps_bounds_and_type() -> None:
    buffer = make_buffer()
    original = span_range(buffer, 10, 20)

    normalized = original.normalize()

    assert isinstance(normalized, Range)
    assert isinstance(normalized.start, StartRelativeLocation)
    assert isinstance(normalized.end, EndRelativeLocation)
    assert normalized.bounds() == original.bounds()


def test_whole_buffer_grows_with_edits() -> None:
    buffer = make_buffer("abc")
    everything = whole_buffer(buffer)

    buffer.insert_string_at(3, "def")

    assert everything.get_contents()[0] == b"abcdef"


def make_pattern_range(text: str, pattern: str) -> PatternRange:
    buffer = make_buffer(text)
    found, status = evaluate(PatternRangeExpr(pattern), whole_buffer(buffer))
    assert status.ok and isinstance(found, PatternRange)
    return found


def test_pattern_range_exposes_groups() -> None:
    found = make_pattern_range("x89-#@$%$y", r"(\d+)-(\S+)y")

    assert found.bounds() == (1, 10)
    assert found.get_number_of_matches() == 2
    assert found.get_match(0) == b"89-#@$%$y"
    assert found.get_match(1) == b"89"
    assert found.get_match(2) == b"#@$%$"
    assert found.get_match(3) == b""


def test_template_substitutes_groups() -> None:
    found = make_pattern_range("x89-#@$%$y", r"(\d+)-(\S+)y")

    text, status = found.instantiate_template("($1)($2)")

    assert status.ok
    assert text == b"(89)(#@$%$)"


def test_template_with_unknown_group_fails() -> None:
    found = make_pattern_range("x89-#@$%$y", r"(\d+)-(\S+)y")

    text, status = found.instantiate_template("($1)($3)")

    assert status.code == ResultCode.INVALID_REPLACEMENT
    assert text == b""


def test_template_leaves_other_dollars_alone() -> None:
    found = make_pattern_range("price 12", r"(\d+)")

    text, status = found.instantiate_template("$x costs $$1$")

    assert status.ok
    assert text == b"$x costs $12$"


def test_normalize_keeps_captures() -> None:
    found = make_pattern_range("x89-#@$%$y", r"(\d+)-(\S+)y")

    normalized = found.normalize()

    assert type(normalized) is type(found)
    assert normalized.get_match(1) == b"89"
    assert normalized.instantiate_template("$2")[0] == b"#@$%$"
