from config import Settings
from src.sequencer.collect import (
    CandidateSet,
    collect,
    collect_from_note,
    collect_from_vault_root,
)
from src.sequencer.vault import LocalVault, VaultFile


def paths(files):
    return sorted(f.path for f in files)


def test_note_scope_takes_embedded_and_linked_images(make_vault):
    root = make_vault(
        {
            "notes/trip.md": "![[cat.png]] [[dog.jpg|caption]] [[todo.md]] [[gone.png]] [[notes.pdf]]",
            "att/cat.png": b"x",
            "att/dog.jpg": b"x",
            "att/bird.png": b"x",
            "todo.md": "",
            "notes.pdf": b"x",
        }
    )
    vault = LocalVault(root)
    settings = Settings(image_prefix="T", target_directory="att")
    found = collect(vault, settings, vault.get_folder("att"), vault.get_note("notes/trip"))
    assert paths(found) == ["att/cat.png", "att/dog.jpg"]


def test_note_scope_deduplicates_by_path(make_vault):
    root = make_vault({"n.md": "![[a.png]] [[a.png]] ![x](a.png)", "a.png": b"x"})
    vault = LocalVault(root)
    candidates = CandidateSet("T")
    collect_from_note(vault, vault.get_note("n"), candidates)
    assert len(candidates) == 1


def test_folder_scope_is_not_recursive(make_vault):
    root = make_vault(
        {"att/a.png": b"x", "att/B.JPEG": b"x", "att/deep/c.png": b"x", "att/d.txt": "x", "e.png": b"x"}
    )
    vault = LocalVault(root)
    settings = Settings(image_prefix="T", target_directory="att")
    assert paths(collect(vault, settings, vault.get_folder("att"))) == ["att/B.JPEG", "att/a.png"]


def test_vault_root_fallback(make_vault):
    root = make_vault({"att/a.png": b"x", "e.png": b"x", "f.gif": b"x", "sub/g.png": b"x"})
    vault = LocalVault(root)
    settings = Settings(image_prefix="T", target_directory="att", scoop_vault_root=True)
    assert paths(collect(vault, settings, vault.get_folder("att"))) == [
        "att/a.png",
        "e.png",
        "f.gif",
    ]


def test_root_fallback_ignored_when_note_targeted(make_vault):
    root = make_vault({"n.md": "![[a.png]]", "att/a.png": b"x", "e.png": b"x"})
    vault = LocalVault(root)
    settings = Settings(image_prefix="T", target_directory="att", scoop_vault_root=True)
    found = collect(vault, settings, vault.get_folder("att"), vault.get_note("n"))
    assert paths(found) == ["att/a.png"]


def test_prefixed_names_are_excluded(make_vault):
    root = make_vault({"T3.png": b"x", "Tiger.png": b"x", "t.png": b"x"})
    vault = LocalVault(root)
    candidates = CandidateSet("T")
    collect_from_vault_root(vault, candidates)
    assert paths(candidates) == ["t.png"]


def test_same_name_different_paths_both_kept():
    candidates = CandidateSet("T")
    assert candidates.add(VaultFile("a/x.png"))
    assert candidates.add(VaultFile("b/x.png"))
    assert not candidates.add(VaultFile("a/x.png"))
    assert "a/x.png" in candidates
