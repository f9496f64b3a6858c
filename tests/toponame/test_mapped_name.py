from __future__ import annotations

import copy

import pytest

from toponame.indexed_name import IndexedName
from toponame.mapped_name import MappedName
from toponame.string_id import StringIDRef


def test_default_name_is_empty() -> None:
    name = MappedName()

    assert name.empty()
    assert not name
    assert len(name) == 0
    assert name.postfix_start == 0
    assert name.to_string() == ""


def test_text_construction_sets_whole_base() -> None:
    name = MappedName("TEST")

    assert name.name() == "TEST"
    assert name.postfix() == ""
    assert name.postfix_start == 4
    assert str(name) == "TEST"


def test_element_map_prefix_is_stripped_once() -> None:
    assert MappedName(";X").to_string() == MappedName("X").to_string()
    assert MappedName(";;X").to_string() == ";X"
    assert MappedName(b";Face1").to_string() == "Face1"


@pytest.mark.parametrize(
    "element, expected",
    [
        (IndexedName("Face", 3), "Face3"),
        (IndexedName("Edge", 12), "Edge12"),
        (IndexedName("Vertex"), "Vertex"),
    ],
)
def test_indexed_name_construction(element: IndexedName, expected: str) -> None:
    name = MappedName(element)

    assert name.to_string() == expected
    assert name.postfix_start == len(expected)
    assert name.postfix() == ""


@pytest.mark.parametrize(
    "element",
    [IndexedName("Face", 1), IndexedName("Edge", 42), IndexedName("Vertex", 0), IndexedName("_Wire", 7)],
)
def test_indexed_name_round_trip(element: IndexedName) -> None:
    assert MappedName(element).to_indexed_name() == element


def test_to_indexed_name_rejects_postfix() -> None:
    name = MappedName(IndexedName("Face", 6)) + ";:M2"

    assert name.postfix() == ";:M2"
    assert name.to_indexed_name() is None


@pytest.mark.parametrize("text", ["", "Face1;:H1,F", "12Face", "Face-1", "Fa ce"])
def test_to_indexed_name_rejects_non_keys(text: str) -> None:
    assert MappedName(text).to_indexed_name() is None


def test_string_id_construction() -> None:
    name = MappedName(StringIDRef(0x94))

    assert name.to_string() == "#94"
    assert name.postfix_start == 3


def test_postfix_construction() -> None:
    base = MappedName("Face6")
    name = MappedName(base, postfix=";:M2;FUS")

    assert name.to_string() == "Face6;:M2;FUS"
    assert name.name() == "Face6"
    assert name.postfix() == ";:M2;FUS"
    assert MappedName.with_postfix(base, ";:G0") == MappedName("Face6;:G0")


def test_slice_construction_tracks_postfix() -> None:
    source = MappedName(MappedName("Face6"), postfix=";:M2;FUS")

    tail = MappedName(source, 2)
    assert tail.to_string() == "ce6;:M2;FUS"
    assert tail.name() == "ce6"
    assert tail.postfix() == ";:M2;FUS"

    head = MappedName.slice_of(source, 0, 5)
    assert head.to_string() == "Face6"
    assert head.postfix_start == 5
    assert head.to_indexed_name() == IndexedName("Face", 6)

    inner = MappedName(source, 7, 2)
    assert inner.to_string() == "M2"
    assert inner.postfix_start == 0


def test_slice_with_index_syntax() -> None:
    name = MappedName("Face6;:M2")

    assert name[0:5] == MappedName("Face6")
    assert name[5:].to_string() == ";:M2"
    assert name[1] == "a"
    assert name[-1] == "2"


def test_append_to_empty_name_recomputes_split() -> None:
    name = MappedName()
    name.append("Face6")
    name.append(";:M2")

    assert name.name() == "Face6"
    assert name.postfix() == ";:M2"


def test_append_name_to_empty_uses_source_split() -> None:
    source = MappedName(MappedName("Edge1"), postfix=";:G0")
    name = MappedName()
    name.append(source)

    assert name.postfix_start == 5
    assert name.postfix() == ";:G0"


def test_append_text_window() -> None:
    name = MappedName("Face")
    name.append("xx12yy", 2, 2)

    assert name.to_string() == "Face12"
    assert name.postfix_start == 4


def test_iadd_and_add() -> None:
    base = MappedName("Face6")
    combined = base + ";:M2"

    assert base.to_string() == "Face6"
    assert combined.to_string() == "Face6;:M2"
    assert combined.postfix() == ";:M2"

    combined += MappedName("X")
    assert combined.to_string() == "Face6;:M2X"


def test_assign_and_clear() -> None:
    name = MappedName("Face1")
    name.assign(";Edge2")

    assert name.to_string() == "Edge2"
    assert name.postfix_start == 5

    name.clear()
    assert name.empty()
    assert name.postfix_start == 0


def test_copy_on_write_between_names() -> None:
    a = MappedName("Face6")
    b = a.copy()

    assert not a.is_unshared()
    assert not b.is_unshared()

    b += ";:M2"

    assert a.to_string() == "Face6"
    assert b.to_string() == "Face6;:M2"
    assert a.is_unshared()
    assert b.is_unshared()


def test_copy_module_shares_and_deepcopy_detaches() -> None:
    a = MappedName("Face6")

    shallow = copy.copy(a)
    deep = copy.deepcopy(a)

    assert not a.is_unshared()
    assert deep.is_unshared()
    assert shallow == deep == a


def test_clear_does_not_touch_shared_copy() -> None:
    a = MappedName("Face6")
    b = a.copy()

    a.clear()

    assert b.to_string() == "Face6"
    assert b.is_unshared()


@pytest.mark.parametrize(
    "left, right, expected",
    [
        ("Face1", "Face1", 0),
        ("Face1", "Face2", -1),
        ("Face2", "Face1", 1),
        ("Face", "Face1", -1),
        ("Face1;:H1,F", "Face1", 1),
        ("Edge9", "Face1", -1),
    ],
)
def test_compare_is_bytewise(left: str, right: str, expected: int) -> None:
    a = MappedName(left)
    b = MappedName(right)

    assert a.compare(b) == expected
    assert b.compare(a) == -expected
    assert (a < b) == (expected < 0)
    assert (a == b) == (expected == 0)


def test_compare_ignores_postfix_split() -> None:
    split = MappedName(MappedName("Face6"), postfix=";:M2")
    whole = MappedName("Face6;:M2")

    assert split == whole
    assert hash(split) == hash(whole)


def test_copied_key_is_detached_from_later_edits() -> None:
    key = MappedName("Face1")
    names = {key.copy(): 1}

    key += ";:M2"

    assert MappedName("Face1") in names
    assert key not in names
    assert names[MappedName("Face1")] == 1


def test_sorting_names() -> None:
    names = [MappedName(text) for text in ["Face10", "Edge1", "Face1", "Face"]]

    assert [str(name) for name in sorted(names)] == ["Edge1", "Face", "Face1", "Face10"]


def test_equality_with_other_types() -> None:
    assert MappedName("Face1") != "Face1"


def test_find_and_rfind() -> None:
    name = MappedName("Face6;:M2;FUS;:H1:8,F")

    assert name.find(";") == 5
    assert name.find(";", 6) == 9
    assert name.find("missing") == -1
    assert name.rfind(";") == 13
    assert name.rfind(";", 12) == 9
    assert name.rfind(";:H") == 13
    assert name.rfind(";:T") == -1


def test_starts_and_ends_with() -> None:
    name = MappedName("Face6;:M2")

    assert name.starts_with("Face")
    assert name.starts_with(";:M", 5)
    assert not name.starts_with("Edge")
    assert name.ends_with(":M2")
    assert not name.ends_with("Face")


def test_invalid_arguments() -> None:
    with pytest.raises(TypeError):
        MappedName("Face1", 2)
    with pytest.raises(TypeError):
        MappedName(3.5)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        MappedName(MappedName("Face1"), 0, -1)
    with pytest.raises(TypeError):
        MappedName(MappedName("Face1"), 2, postfix=";:M2")
    with pytest.raises(TypeError):
        MappedName(MappedName("Face1"), size=3, postfix=";:M2")


def test_find_tag_delegates_to_codec() -> None:
    info = MappedName("Face6;:M2;FUS;:H1:8,F").find_tag_in_element_name()

    assert info is not None
    assert info.tag == 1
    assert info.length == 5
