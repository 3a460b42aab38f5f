"""Tests for PathTrie: touch, diff and dirty/subscription search."""

from reactree._trie import PathTrie


def subscriptions(**paths):
    """Build a subscription trie from dotted paths: subscriptions(a_b={"x"})."""
    trie = PathTrie(set)
    for dotted, bindings in paths.items():
        trie.touch(dotted.split("_")).update(bindings)
    return trie


def dirty(*dotted):
    trie = PathTrie()
    for path in dotted:
        trie.touch(path.split("."))
    return trie


class TestTouch:
    def test_creates_value_once(self):
        trie = PathTrie(set)
        first = trie.touch(["a", "b"])
        first.add(1)
        assert trie.touch(("a", "b")) is first
        assert trie.touch(["a", "b"]) == {1}

    def test_node_can_hold_value_and_children(self):
        trie = PathTrie(set)
        trie.touch(["a"]).add("coarse")
        trie.touch(["a", "b"]).add("fine")
        node = trie.find(["a"])
        assert node.value == {"coarse"}
        assert "b" in node.children

    def test_empty_trie_is_falsy(self):
        trie = PathTrie()
        assert not trie
        trie.touch(["x"])
        assert trie

    def test_find_never_creates(self):
        trie = PathTrie()
        assert trie.find(["missing", "deep"]) is None
        assert not trie


class TestLeaves:
    def test_leaves_are_childless_nodes(self):
        trie = dirty("a.b", "a", "a.c.d", "e")
        assert sorted(trie.leaves()) == [("a", "b"), ("a", "c", "d"), ("e",)]

    def test_empty_root_has_no_leaves(self):
        assert list(PathTrie().leaves()) == []


class TestDiff:
    def test_first_recording_adds_everything(self):
        new = dirty("bar", "baz")
        added, removed = new.diff(PathTrie())
        assert sorted(added) == [("bar",), ("baz",)]
        assert removed == []

    def test_identical_tries_have_no_diff(self):
        assert dirty("a.b", "c").diff(dirty("a.b", "c")) == ([], [])

    def test_dropped_branch_is_removed(self):
        added, removed = dirty("a.b").diff(dirty("a.b", "a.c.d"))
        assert added == []
        assert removed == [("a", "c", "d")]

    def test_new_branch_is_added(self):
        added, removed = dirty("a.b", "x.y").diff(dirty("a.b"))
        assert added == [("x", "y")]
        assert removed == []

    def test_narrowing_to_coarser_path(self):
        added, removed = dirty("a.b").diff(dirty("a.b.x"))
        assert added == [("a", "b")]
        assert removed == [("a", "b", "x")]

    def test_widening_to_deeper_path(self):
        added, removed = dirty("a.b.x", "a.b.y").diff(dirty("a.b"))
        assert sorted(added) == [("a", "b", "x"), ("a", "b", "y")]
        assert removed == [("a", "b")]

    def test_everything_dropped(self):
        added, removed = PathTrie().diff(dirty("a.b", "c"))
        assert added == []
        assert sorted(removed) == [("a", "b"), ("c",)]


class TestDiscard:
    def test_prunes_emptied_nodes(self):
        trie = subscriptions(a_b_c={"x"})
        trie.discard(["a", "b", "c"], "x")
        assert trie.find(["a"]) is None
        assert not trie

    def test_keeps_nodes_still_in_use(self):
        trie = subscriptions(a_b={"x", "y"}, a_c={"z"})
        trie.discard(["a", "b"], "x")
        assert trie.find(["a", "b"]).value == {"y"}
        trie.discard(["a", "b"], "y")
        assert trie.find(["a", "b"]) is None
        assert trie.find(["a", "c"]).value == {"z"}

    def test_keeps_value_holding_ancestor(self):
        trie = subscriptions(a={"coarse"}, a_b={"fine"})
        trie.discard(["a", "b"], "fine")
        assert trie.find(["a"]).value == {"coarse"}
        assert trie.find(["a"]).children == {}

    def test_missing_path_is_noop(self):
        trie = subscriptions(a={"x"})
        trie.discard(["nope", "deeper"], "x")
        trie.discard(["a"], "not-there")
        assert trie.find(["a"]).value == {"x"}


class TestSearch:
    def test_exact_write_hits_exact_read(self):
        subs = subscriptions(a_b_c={"exact"})
        assert dirty("a.b.c").search(subs) == {"exact"}

    def test_deep_write_hits_coarser_reads(self):
        subs = subscriptions(a={"reads_a"}, a_b={"reads_ab"}, a_b_c={"reads_abc"})
        assert dirty("a.b.c").search(subs) == {"reads_a", "reads_ab", "reads_abc"}

    def test_write_invalidates_whole_subtree(self):
        subs = subscriptions(a_b={"reads_ab"}, a_b_x={"reads_abx"}, a_b_y_z={"reads_abyz"})
        assert dirty("a.b").search(subs) == {"reads_ab", "reads_abx", "reads_abyz"}

    def test_sibling_is_untouched(self):
        subs = subscriptions(a_b={"reads_ab"}, a_c={"reads_ac"})
        assert dirty("a.b").search(subs) == {"reads_ab"}

    def test_intermediate_node_without_value_does_not_fire(self):
        subs = subscriptions(corge_grault={"cond"}, corge_graply={"cond"})
        assert dirty("corge.waldo").search(subs) == set()

    def test_multiple_dirty_paths(self):
        subs = subscriptions(bar={"b1"}, baz={"b2"}, qux={"b3"})
        assert dirty("bar", "baz").search(subs) == {"b1", "b2"}
