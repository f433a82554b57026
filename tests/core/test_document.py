import pytest

from side_tree.core.document import ChangeEvent, Document, kind_for_path


# ---------------------------
# Stable positions
# ---------------------------

def test_position_shifts_when_text_inserted_before_it():
    doc = Document("hello world")
    pos = doc.create_position(6)
    doc.insert(0, ">> ")
    assert pos.offset == 9
    assert doc.text[pos.offset:] == "world"


def test_position_ignores_edits_after_it():
    doc = Document("hello world")
    pos = doc.create_position(5)
    doc.insert(8, "XYZ")
    doc.delete(9, 11)
    assert pos.offset == 5


def test_insertion_at_position_respects_insertion_type():
    doc = Document("abc")
    stay = doc.create_position(1)
    advance = doc.create_position(1, insertion_type=True)
    doc.insert(1, "__")
    assert stay.offset == 1
    assert advance.offset == 3


def test_position_inside_deleted_span_collapses_to_start():
    doc = Document("0123456789")
    pos = doc.create_position(5)
    doc.delete(3, 8)
    assert pos.offset == 3
    assert doc.text == "01289"


def test_position_at_end_of_replaced_span_follows_following_text():
    doc = Document("aaaBBB")
    pos = doc.create_position(3)
    doc.replace(0, 3, "x")
    assert pos.offset == 1
    assert doc.text[pos.offset:] == "BBB"


def test_set_text_replaces_only_the_changed_span():
    doc = Document("hello world")
    pos = doc.create_position(7)  # the 'o' of "world"
    event = doc.set_text("hello big world")
    assert event == ChangeEvent(start=6, old_end=6, new_end=10)
    assert pos.offset == 11
    assert doc.text[pos.offset] == "o"


def test_set_text_with_identical_content_is_a_no_op():
    doc = Document("same")
    seen = []
    doc.add_change_observer(lambda d, e: seen.append(e))
    assert doc.set_text("same") is None
    assert seen == []


# ---------------------------
# Point, narrowing and folding
# ---------------------------

def test_point_is_clamped_to_the_accessible_region():
    doc = Document("0123456789")
    doc.narrow(2, 6)
    doc.point = 9
    assert doc.point == 6
    doc.point = 0
    assert doc.point == 2
    assert doc.accessible_text == "2345"
    assert doc.text == "0123456789"


def test_narrow_moves_point_inside_and_widen_restores():
    doc = Document("0123456789")
    doc.point = 8
    doc.narrow(6, 2)
    assert (doc.accessible_start, doc.accessible_end) == (2, 6)
    assert doc.point == 6
    doc.widen()
    assert not doc.is_narrowed
    assert doc.accessible_end == 10


def test_narrow_that_moves_point_notifies_point():
    doc = Document("0123456789")
    doc.point = 8
    seen = []
    doc.add_state_observer(lambda d, what: seen.append((what, d.point)))
    doc.narrow(2, 6)
    assert seen == [("point", 6), ("restriction", 6)]

    seen.clear()
    doc.narrow(3, 7)
    assert seen == [("restriction", 6)]


def test_restriction_follows_edits():
    doc = Document("aa\nbb\ncc\n")
    doc.narrow(3, 6)
    doc.insert(0, "zz\n")
    assert doc.accessible_text == "bb\n"
    doc.insert(doc.accessible_end, "more\n")
    assert doc.accessible_text == "bb\nmore\n"


def test_state_observers_are_told_what_changed():
    doc = Document("0123456789")
    seen = []
    doc.add_state_observer(lambda d, what: seen.append(what))
    doc.point = 3
    doc.point = 3
    doc.narrow(0, 5)
    doc.hide_region(1, 2)
    doc.show_all()
    doc.widen()
    assert seen == ["point", "restriction", "visibility", "visibility", "restriction"]


def test_hidden_regions_and_reveal():
    doc = Document("0123456789")
    doc.hide_region(2, 5)
    doc.hide_region(7, 9)
    assert doc.hidden_regions() == [(2, 5), (7, 9)]
    assert doc.is_hidden(4)
    assert not doc.is_hidden(5)
    assert doc.reveal_region(3, 4) is True
    assert doc.hidden_regions() == [(7, 9)]
    assert doc.reveal_region(0, 1) is False


def test_hidden_region_deleted_entirely_is_dropped():
    doc = Document("0123456789")
    doc.hide_region(2, 5)
    doc.delete(1, 6)
    assert doc.hidden_regions() == []


# ---------------------------
# Lines
# ---------------------------

def test_line_helpers():
    doc = Document("one\ntwo\nthree")
    assert doc.line_start(5) == 4
    assert doc.line_end(5) == 7
    assert doc.line_end(10) == len(doc)
    assert doc.line_number(0) == 1
    assert doc.line_number(9) == 3


# ---------------------------
# Observers and lifecycle
# ---------------------------

def test_change_observer_receives_event():
    doc = Document("abc")
    events = []
    observer = lambda d, e: events.append((d, e))  # noqa: E731
    doc.add_change_observer(observer)
    doc.add_change_observer(observer)
    doc.replace(1, 2, "XY")
    assert events == [(doc, ChangeEvent(1, 2, 3))]
    assert events[0][1].deleted_length == 1
    assert events[0][1].inserted_length == 2
    doc.remove_change_observer(observer)
    doc.remove_change_observer(observer)
    doc.insert(0, "z")
    assert len(events) == 1


def test_close_detaches_positions_and_notifies_once():
    doc = Document("* A\n")
    pos = doc.create_position(2)
    closed = []
    doc.add_close_observer(closed.append)
    doc.close()
    doc.close()
    assert closed == [doc]
    assert not doc.is_live
    assert pos.offset is None
    assert pos.document is None
    assert not pos.is_live


def test_edits_on_closed_document_raise():
    doc = Document("text")
    doc.close()
    with pytest.raises(ValueError):
        doc.insert(0, "x")
    with pytest.raises(ValueError):
        doc.create_position(0)


# ---------------------------
# Files
# ---------------------------

@pytest.mark.parametrize("name, kind", [
    ("notes.org", "org"),
    ("README.md", "markdown"),
    ("guide.MARKDOWN", "markdown"),
    ("plain.txt", "text"),
])
def test_kind_for_path(name, kind):
    assert kind_for_path(name) == kind


def test_from_file_and_save(tmp_path):
    source = tmp_path / "plan.md"
    source.write_text("# Plan\nsteps\n", encoding="utf-8")
    doc = Document.from_file(source)
    assert doc.kind == "markdown"
    assert doc.name == "plan.md"
    doc.insert(len(doc), "# Done\n")
    doc.save()
    assert source.read_text(encoding="utf-8") == "# Plan\nsteps\n# Done\n"

    copy = tmp_path / "copy.md"
    assert doc.save(copy) == copy
    assert doc.path == copy


def test_save_without_path_raises():
    with pytest.raises(ValueError):
        Document("* A\n").save()
