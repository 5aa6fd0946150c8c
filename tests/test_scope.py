from scopelog.fields import Field, stash
from scopelog.scope import EMPTY, ChainNode, Scope


def test_derive_leaves_parent_untouched():
    root = Scope()
    child = root.derive("k", 1)

    assert child.get("k") == 1
    assert root.get("k") is None
    assert "k" in child and "k" not in root


def test_get_default():
    assert EMPTY.get("missing", "d") == "d"


def test_walk_goes_leaf_to_root():
    root = ChainNode(None, (Field("a", 1),))
    mid = root.extend((Field("b", 2),))
    leaf = mid.extend((Field("c", 3),))

    assert list(leaf.walk()) == [leaf, mid, root]


def test_siblings_share_ancestor():
    parent = ChainNode(None, (Field("a", 1),))
    left = parent.extend((Field("b", 2),))
    right = parent.extend((Field("c", 3),))

    assert left.previous is right.previous is parent
    assert [f.key for n in left.walk() for f in n.fields] == ["b", "a"]
    assert [f.key for n in right.walk() for f in n.fields] == ["c", "a"]


def test_lookup_finds_stashed_value_closest_to_leaf():
    root = ChainNode(None, (stash(1), stash("outer")))
    leaf = root.extend((Field("x", "not stashed"), stash("inner")))

    assert leaf.lookup(str) == "inner"
    assert leaf.lookup(int) == 1
    assert leaf.lookup(float) is None


def test_lookup_ignores_keyed_fields():
    node = ChainNode(None, (Field("x", 3.5),))
    assert node.lookup(float) is None
