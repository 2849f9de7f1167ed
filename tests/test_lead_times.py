from __future__ import annotations

from batchslack.core.lead_times import LeadTimeIndex
from batchslack.core.models import LeadTimeEntry


def test_empty_index_finds_nothing():
    index = LeadTimeIndex.build([])
    assert len(index) == 0
    assert index.lookup("A", "100", "L1") == (0.0, False)


def test_full_key_lookup():
    index = LeadTimeIndex.build([LeadTimeEntry("A", "100", "L1", 2.5)])
    assert index.lookup("A", "100", "L1") == (2.5, True)
    # different line is a different full key
    assert index.lookup("A", "100", "L2") == (0.0, False)


def test_every_entry_registers_full_and_short_key():
    index = LeadTimeIndex.build([LeadTimeEntry("A", "100", "L1", 2.0)])
    assert "A100L1" in index
    assert "A100" in index
    assert len(index) == 2


def test_first_inserted_value_wins_for_duplicate_full_key():
    index = LeadTimeIndex.build(
        [
            LeadTimeEntry("A", "100", "L1", 2.0),
            LeadTimeEntry("A", "100", "L1", 7.0),
        ]
    )
    assert index.lookup("A", "100", "L1") == (2.0, True)


def test_first_inserted_value_wins_for_duplicate_short_key():
    index = LeadTimeIndex.build(
        [
            LeadTimeEntry("U1", "200", "L1", 1.0),
            LeadTimeEntry("U1", "200", "L2", 4.0),
        ]
    )
    # line-independent lookup sees the first row only
    assert index.lookup("U1", "200", "L2") == (1.0, True)
    # the second row still owns its own full key
    assert index.as_mapping()["U1200L2"] == 4.0


def test_routing_agnostic_type_ignores_line():
    index = LeadTimeIndex.build(
        [
            LeadTimeEntry("U1", "300", "", 1.5),
            LeadTimeEntry("U1", "300", "L9", 6.0),
        ]
    )
    assert index.lookup("U1", "300", "L9") == (1.5, True)
    assert index.lookup("U1", "300", "ANY") == (1.5, True)


def test_short_key_used_for_each_marker():
    entries = [
        LeadTimeEntry("U", "1", "X", 1.0),
        LeadTimeEntry("_", "1", "X", 2.0),
        LeadTimeEntry("K2", "1", "X", 3.0),
    ]
    index = LeadTimeIndex.build(entries)
    assert index.lookup("U", "1", "other") == (1.0, True)
    assert index.lookup("_", "1", "other") == (2.0, True)
    assert index.lookup("K2", "1", "other") == (3.0, True)


def test_other_types_need_the_full_key():
    index = LeadTimeIndex.build([LeadTimeEntry("A", "1", "X", 1.0)])
    assert index.key_for("A", "1", "Y") == "A1Y"
    assert index.lookup("A", "1", "Y") == (0.0, False)


def test_empty_process_type_uses_full_key():
    index = LeadTimeIndex.build([LeadTimeEntry("", "5", "L1", 3.0)])
    assert index.key_for("", "5", "L1") == "5L1"
    assert index.lookup("", "5", "L1") == (3.0, True)


def test_custom_markers():
    index = LeadTimeIndex.build([LeadTimeEntry("Z1", "7", "", 2.0)], markers={"Z"})
    assert index.markers == frozenset({"Z"})
    assert index.lookup("Z1", "7", "L3") == (2.0, True)
    # U is no longer routing-agnostic
    assert index.key_for("U1", "7", "L3") == "U17L3"


def test_padding_is_part_of_the_key():
    index = LeadTimeIndex.build([LeadTimeEntry("A ", "10 ", "L1", 1.0)])
    assert index.lookup("A ", "10 ", "L1") == (1.0, True)
    assert index.lookup("A", "10", "L1") == (0.0, False)
