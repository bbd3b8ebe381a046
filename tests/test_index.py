import pytest

from src.sequencer.index import compute_next_index, next_index_for_folder
from src.sequencer.vault import LocalVault


def test_next_after_highest_matching_index():
    assert compute_next_index({"T0.png", "T2.jpg"}, "T") == 3


def test_empty_reference_set_starts_at_zero():
    assert compute_next_index(set(), "T") == 0


def test_no_matching_names_starts_at_zero():
    assert compute_next_index({"cat.png", "Tx.png", "T1", "t5.png"}, "T") == 0


def test_bare_prefix_counts_as_index_zero():
    assert compute_next_index({"T.png"}, "T") == 1


def test_numeric_not_lexicographic_maximum():
    assert compute_next_index({"T9.png", "T10.png", "T2.png"}, "T") == 11


def test_multi_dot_names_do_not_match():
    assert compute_next_index({"T4.tar.gz", "T1.png"}, "T") == 2


def test_prefix_is_taken_literally():
    names = {"a.b3.png", "axb7.png", "a+1.png"}
    assert compute_next_index(names, "a.b") == 4
    assert compute_next_index(names, "a+") == 2


def test_prefix_is_case_sensitive():
    assert compute_next_index({"img5.png"}, "IMG") == 0


def test_empty_prefix_rejected():
    with pytest.raises(ValueError):
        compute_next_index({"1.png"}, "")


def test_next_index_for_folder_ignores_subfolders(make_vault):
    root = make_vault({"att/T1.png": b"x", "att/T7/T9.png": b"x", "T20.png": b"x"})
    vault = LocalVault(root)
    assert next_index_for_folder(vault, vault.get_folder("att"), "T") == 2


def test_trailing_newline_does_not_match():
    assert compute_next_index({"T8.png\n", "T2.png"}, "T") == 3
