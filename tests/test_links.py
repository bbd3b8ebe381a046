from src.sequencer.links import (
    extract_link_targets,
    extract_links,
    retarget_links,
    split_link_target,
)


NOTE = """# Trip

![[cat.png]] and [[dog.jpg|caption]]
See [[Other note#Plans]] and ![map](maps/city%20map.png "City").
External [site](https://example.com) and [top](#trip).

```
![[ignored.png]]
```

Inline <img> [[table\\|alias]]
"""


def test_extracts_in_document_order():
    assert extract_link_targets(NOTE) == [
        "cat.png",
        "dog.jpg",
        "Other note#Plans",
        "maps/city map.png",
        "table",
    ]


def test_embed_and_wiki_flags():
    links = extract_links("![[a.png]] [[b.png]] ![x](c.png) [y](d.png)")
    assert [(l.target, l.embed, l.wiki) for l in links] == [
        ("a.png", True, True),
        ("b.png", False, True),
        ("c.png", True, False),
        ("d.png", False, False),
    ]


def test_unclosed_fence_hides_rest():
    assert extract_link_targets("[[a.png]]\n~~~\n[[b.png]]\n") == ["a.png"]


def test_angle_bracket_markdown_target():
    assert extract_link_targets("![x](<my pics/a b.png>)") == ["my pics/a b.png"]


def test_split_link_target():
    assert split_link_target("a.png|cap") == "a.png"
    assert split_link_target("note#Heading") == "note"
    assert split_link_target("note^block") == "note"
    assert split_link_target(" dir/a.png ") == "dir/a.png"


def test_retarget_keeps_alias_and_embed():
    text = "![[cat.png]] [[cat.png|Cat]] [[dog.png]]"
    assert retarget_links(text, "cat.png", "T0.png") == (
        "![[T0.png]] [[T0.png|Cat]] [[dog.png]]"
    )


def test_retarget_markdown_keeps_label_and_title():
    text = '![A cat](img/cat.png "hi") [file](img/cat.png)'
    assert retarget_links(text, "img/cat.png", "att/T 0.png") == (
        '![A cat](att/T%200.png "hi") [file](att/T%200.png)'
    )


def test_retarget_angle_brackets_stay():
    assert retarget_links("![](<a b.png>)", "a b.png", "T1.png") == "![](<T1.png>)"


def test_retarget_leaves_code_blocks():
    text = "[[a.png]]\n```\n[[a.png]]\n```\n"
    assert retarget_links(text, "a.png", "T0.png") == "[[T0.png]]\n```\n[[a.png]]\n```\n"


def test_retarget_matches_file_part_only():
    text = "[[a.png#x|cap]] [[a.pngx]]"
    assert retarget_links(text, "a.png", "T3.png") == "[[T3.png#x|cap]] [[a.pngx]]"


def test_inline_code_spans_are_skipped():
    text = "`![[a.png]]` ![[b.png]] ``[x](c.png)`` [y](d.png)"
    assert extract_link_targets(text) == ["b.png", "d.png"]


def test_retarget_leaves_inline_code():
    text = "Use `![[a.png]]` to embed: ![[a.png]]"
    assert retarget_links(text, "a.png", "T0.png") == "Use `![[a.png]]` to embed: ![[T0.png]]"
