import re

import pytest

from power.power_array import PowerArray
from power.power_datatypes import Ref
from power.power_errors import PatternSyntaxError
from power.power_regex import OFFSET_CAPTURE, SET_ORDER, UNMATCHED_AS_NULL
from power.power_string import PowerString


def S(text):
    return PowerString.of(text)


# --- Construction ---

def test_of_holds_an_independent_copy():
    src = "abc"
    box = PowerString.of(src)
    box.append("d")
    assert src == "abc"
    assert box.S == "abcd"
    assert PowerString.of().S == ""
    assert PowerString.of(S("x")).S == "x"


def test_of_copies_the_value_of_a_ref():
    r = Ref("abc")
    box = PowerString.of(r)
    box.append("!")
    assert r.value == "abc"
    assert box.S == "abc!"


def test_on_returns_a_shared_instance_bound_to_the_latest_ref():
    first = Ref("one")
    second = Ref("two")
    a = PowerString.on(first)
    b = PowerString.on(second)
    assert a is b
    b.append("!").to_upper_case()
    assert second.value == "TWO!"
    assert first.value == "one"


def test_on_writes_through_to_the_ref():
    r = Ref("  padded  ")
    PowerString.on(r).trim()
    assert r.value == "padded"


def test_on_with_plain_string_does_not_alias():
    box = PowerString.on("text")
    box.append("!")
    assert box.S == "text!"


def test_cast_replaces_the_ref_value_with_the_box():
    r = Ref("hi")
    box = PowerString.cast(r)
    assert r.value is box
    assert box.S == "hi"
    box.append("!")
    assert r.value.S == "hi!"
    other = PowerString.cast(Ref("hi"))
    assert other is not box


def test_cast_with_plain_string_returns_new_box():
    box = PowerString.cast("x")
    assert isinstance(box, PowerString)
    assert box.S == "x"


def test_from_char_code():
    assert PowerString.from_char_code(233) == "é"
    assert PowerString.fromCharCode(65) == "A"


# --- Conversion ---

def test_string_conversion_and_equality():
    box = S("abc")
    assert str(box) == "abc"
    assert box.to_string() == "abc"
    assert box == "abc"
    assert box == S("abc")
    assert box != "abd"
    assert repr(box) == "PowerString('abc')"


# --- Queries ---

def test_length_counts_code_points():
    assert S("héllo").length() == 5
    assert len(S("a😀b")) == 3
    assert S("héllo").count() == 5


def test_char_at_and_char_code_at():
    box = S("a😀b")
    assert box.char_at(1) == "😀"
    assert box.charAt(2) == "b"
    assert box.char_code_at(1) == 0x1F600
    assert box[0] == "a"


def test_out_of_range_reads_return_sentinels():
    box = S("test")
    assert box.charAt(10) == ""
    assert box.charCodeAt(10) == 0
    assert box[99] == ""
    assert S("").char_at(0) == ""


def test_negative_char_index_counts_from_end():
    assert S("test").char_at(-1) == "t"
    assert S("test").char_at(-10) == "t"


def test_index_of():
    box = S("abcabc")
    assert box.index_of("c") == 2
    assert box.indexOf("c", 3) == 5
    assert box.index_of("c", -2) == 5
    assert box.index_of("z") == -1
    assert box.index_of("a", 10) == -1
    assert S("héllo").index_of("l") == 2


def test_last_index_of():
    box = S("abcabc")
    assert box.last_index_of("c") == 5
    assert box.last_index_of("a", 1) == 3
    assert box.lastIndexOf("c", -2) == 2
    assert box.last_index_of("bc", -1) == 4
    assert box.last_index_of("z") == -1
    assert box.last_index_of("a", 10) == -1


def test_includes():
    assert S("héllo").includes("él")
    assert not S("héllo").includes("h", 1)
    assert "ll" in S("héllo")


def test_starts_with():
    box = S("abc")
    assert box.starts_with("ab")
    assert box.startsWith("bc", 1)
    assert not box.starts_with("x")
    assert S("éa").starts_with("é")


def test_ends_with():
    box = S("abc")
    assert box.ends_with("bc")
    assert box.endsWith("c")
    assert not box.ends_with("ab")
    # a non-zero pos shifts the start of the compared tail
    assert box.ends_with("c", 3)
    assert not box.ends_with("b", 2)
    assert S("añ").ends_with("ñ")


def test_match_first():
    box = S("a1b22")
    assert box.match(r"/\d+/") == ["1"]
    assert box.match(r"/(\w)(\d)/") == ["a1", "a", "1"]
    assert box.match(r"/z/") is None
    assert S("ABC").match("/b/i") == ["B"]


def test_match_all_with_pseudo_flag():
    box = S("a1b22")
    assert box.match(r"/\d+/a") == [["1", "22"]]
    assert box.match(r"/(\w)(\d)/a") == [["a1", "b2"], ["a", "b"], ["1", "2"]]
    assert box.match(r"/(\d)/a", SET_ORDER) == [["1", "1"], ["2", "2"], ["2", "2"]]
    assert box.match(r"/x/a") is None


def test_match_offsets_are_code_points():
    assert S("héllo wörld").match("/w/", OFFSET_CAPTURE) == [("w", 6)]
    assert S("aXbX").match("/X/", OFFSET_CAPTURE, 2) == [("X", 3)]
    assert S("aXbX").match("/X/a", OFFSET_CAPTURE) == [[("X", 1), ("X", 3)]]


def test_match_unmatched_groups():
    assert S("b").match("/(a)?(b)/") == ["b", "", "b"]
    assert S("b").match("/(a)?b/") == ["b"]
    assert S("a").match("/(a)(b)?/") == ["a", "a"]
    assert S("a").match("/(a)(b)?/", OFFSET_CAPTURE) == [("a", 0), ("a", 0)]
    assert S("a").match("/(a)(b)?/", UNMATCHED_AS_NULL) == ["a", "a", None]
    assert S("b").match("/(a)?b/", UNMATCHED_AS_NULL) == ["b", None]


def test_search():
    assert S("héllo wörld").search(r"/w\w+/") == (6, "wörld")
    assert S("abab").search("/b/", 2) == (3, "b")
    assert S("abab").search("/z/") == (-1, None)
    assert S("abab").search("/a/", 10) == (-1, None)


def test_index_of_pattern():
    assert S("xxé1").index_of_pattern(r"/\d/") == 3
    assert S("xxé1").indexOfPattern("/q/") == -1


def test_has_index():
    box = S("héllo")
    assert box.has_index(0)
    assert box.has_index(4)
    assert not box.has_index(5)
    assert not box.has_index(-1)


def test_iteration_uses_own_code_points():
    assert list(S("héllo")) == ["h", "é", "l", "l", "o"]
    assert list(S("")) == []


# --- Mutators ---

def test_append_prepend_chain():
    box = S("b")
    assert box.append("c").prepend("a") is box
    assert box.S == "abc"


def test_concat_mutates_but_does_not_chain():
    box = S("a")
    assert box.concat("b", S("c"), 1) is None
    assert box.S == "abc1"


def test_repeat():
    assert S("ab").repeat(3).S == "ababab"
    assert S("ab").repeat(0).S == ""


def test_trim_family():
    assert S("  x  ").trim().S == "x"
    assert S("  x  ").trim_left().S == "x  "
    assert S("  x  ").trimRight().S == "  x"
    assert S("\u3000x\u00a0\n").trim().S == "x"
    assert S("").trim().S == ""


def test_case_conversion():
    assert S("Straße").to_upper_case().S == "STRASSE"
    assert S("ÀB").toLowerCase().S == "àb"


def test_normalize():
    assert S("e\u0301").normalize().S == "\u00e9"
    assert S("\u00e9").normalize("NFD").S == "e\u0301"
    with pytest.raises(ValueError):
        S("x").normalize("bogus")


def test_slice():
    assert S("abc").slice(1).S == "bc"
    assert S("abc").slice(0, -1).S == "ab"
    assert S("abc").slice(-2).S == "bc"
    assert S("héllo").slice(1, 3).S == "él"
    assert S("abc").slice(5).S == ""


def test_substr():
    assert S("abcdef").substr(1, 3).S == "bcd"
    assert S("abcdef").substr(-2).S == "ef"
    assert S("abcdef").substr(1, -1).S == "bcde"
    assert S("abcdef").substr(10).S == ""


def test_substring_clamps_and_swaps():
    assert S("abcdef").substring(4, 1).S == "bcd"
    assert S("abcdef").substring(-3, 2).S == "ab"
    assert S("abcdef").substring(2).S == "cdef"
    assert S("abcdef").substring(2, 100).S == "cdef"
    assert S("abcdef").substring(-5, -1).S == ""


def test_replace_first_or_all():
    assert S("abcabc").replace("/a/a", "Z").S == "ZbcZbc"
    assert S("abcabc").replace("/a/", "Z").S == "Zbcabc"
    assert S("héllo").replace("/é/", "e").S == "hello"


def test_replace_backreferences():
    assert S("john smith").replace(r"/(\w+) (\w+)/", "$2, $1").S == "smith, john"
    assert S("john smith").replace(r"/(\w+) (\w+)/", "${2}_${1}").S == "smith_john"
    assert S("john smith").replace(r"/(\w+) (\w+)/", r"\2 \1").S == "smith john"
    assert S("ab").replace("/b/", "[$0]").S == "a[b]"
    assert S("ab").replace("/b/", "$9").S == "a"


def test_replace_with_callable():
    box = S("a1b2").replace(r"/\d/a", lambda m: int(m.group(0)) * 2)
    assert box.S == "a2b4"


def test_replace_with_precompiled_pattern():
    assert S("hello").replace(re.compile("l"), "L").S == "heLlo"


@pytest.mark.parametrize("pattern", ["/abc", "abc/", "/(/", "/a/q", ""])
def test_malformed_patterns_raise(pattern):
    with pytest.raises(PatternSyntaxError):
        S("abc").replace(pattern, "x")


def test_index_assignment_and_deletion():
    box = S("héllo")
    box[1] = "EE"
    assert box.S == "hEEllo"
    del box[0]
    assert box.S == "EEllo"
    box[10] = "!"
    assert box.S == "EEllo!"


# --- Splitting ---

def test_split_literal():
    parts = S("a,b,c").split(",")
    assert isinstance(parts, PowerArray)
    assert parts == ["a", "b", "c"]
    assert S("a,b,c").split(",", 2) == ["a", "b,c"]
    assert S("a,b,c").split(",", -1) == ["a", "b"]
    assert S("a,b,c").split(",", 0) == ["a,b,c"]
    assert S("a,b").split(";") == ["a,b"]


def test_split_with_empty_separator_yields_code_points():
    assert S("hé").split("") == ["h", "é"]


def test_split_by_pattern():
    assert S("a1b22c").split_by_pattern(r"/\d+/") == ["a", "b", "c"]
    assert S("a1b22c").splitByPattern(r"/\d+/", 2) == ["a", "b22c"]
    assert S("a, b,c").split_by_pattern(r"/\s*,\s*/") == ["a", "b", "c"]
    assert S("a1b").split_by_pattern(r"/(\d)/") == ["a", "b"]


def test_split_by_empty_pattern():
    assert S("abc").split_by_pattern("//") == ["", "a", "b", "c", ""]
    assert S("abc").split_by_pattern("//", no_empty=True) == ["a", "b", "c"]
