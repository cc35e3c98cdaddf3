"""Tests for tag-based cache invalidation, run against every backend."""

from tagcache import CacheEngine


class TestSimpleTagInvalidation:
    """Tests for clearing exact tags."""

    def test_clear_single_tag(self, cache: CacheEngine) -> None:
        """Should delete entries with the specified tag."""
        cache.set("user/1", {"id": 1}, tags=["User"])
        cache.set("user/2", {"id": 2}, tags=["User", "User/2"])

        assert cache.clear("User") is cache

        assert not cache.has("user/1")
        assert not cache.has("user/2")

    def test_entries_without_tag_remain(self, cache: CacheEngine) -> None:
        """Should keep entries that don't have the cleared tag."""
        cache.set("user", "u", tags=["User"])
        cache.set("post", "p", tags=["Post"])
        cache.set("plain", "x")

        cache.clear("User")

        assert cache.get("post") == "p"
        assert cache.get("plain") == "x"

    def test_clear_several_tags(self, cache: CacheEngine) -> None:
        """Should accept a list of tags."""
        cache.set("a", 1, tags=["t1"])
        cache.set("b", 2, tags=["t2"])
        cache.set("c", 3, tags=["t3"])

        cache.clear(["t1", "t2"])

        assert not cache.has("a")
        assert not cache.has("b")
        assert cache.has("c")

    def test_clear_missing_tag(self, cache: CacheEngine) -> None:
        """Should be a no-op for unknown tags."""
        cache.set("a", 1, tags=["t1"])

        cache.clear("unknown")
        cache.clear("unknown", recursive=True)
        cache.clear([])

        assert cache.has("a")

    def test_clear_is_not_recursive_by_default(self, cache: CacheEngine) -> None:
        """Should leave entries of nested tags alone."""
        cache.set("a", 1, tags=["parent/child"])

        cache.clear("parent")

        assert cache.has("a")

    def test_empty_tag_is_a_tag(self, cache: CacheEngine) -> None:
        """Should treat the empty string as a distinct tag."""
        cache.set("a", 1, tags=[""])
        cache.set("b", 2, tags=["x"])

        cache.clear("")

        assert not cache.has("a")
        assert cache.has("b")

    def test_duplicate_tags(self, cache: CacheEngine) -> None:
        """Should associate a tag once however often it is given."""
        cache.set("a", 1, tags=["t", "t", "t"])

        assert cache.backend.keys_with_tag("t") == ["a"]

        cache.clear("t")
        assert not cache.has("a")

    def test_tags_and_keys_do_not_collide(self, cache: CacheEngine) -> None:
        """Should keep tags and keys in separate namespaces."""
        cache.set("shared", 1)
        cache.set("other", 2, tags=["shared"])

        cache.clear("shared")

        assert cache.has("shared")
        assert not cache.has("other")


class TestTagReconciliation:
    """Tests for keeping the tag index in step with entries."""

    def test_overwrite_replaces_tags(self, cache: CacheEngine) -> None:
        """Should drop old tags when a key is set again."""
        cache.set("k", "v1", tags=["t1"])
        cache.set("k", "v2", tags=["t2"])

        cache.clear("t1")
        assert cache.get("k") == "v2"

        cache.clear("t2")
        assert not cache.has("k")

    def test_overwrite_without_tags(self, cache: CacheEngine) -> None:
        """Should drop every tag when a key is set again untagged."""
        cache.set("k", "v1", tags=["t1", "t2"])
        cache.set("k", "v2")

        cache.clear(["t1", "t2"])

        assert cache.get("k") == "v2"
        assert cache.backend.keys_with_tag("t1") == []

    def test_delete_cleans_tags(self, cache: CacheEngine) -> None:
        """Should only affect remaining keys after a tagged key is deleted."""
        cache.set("k1", "v", tags=["t"])
        cache.set("k2", "v", tags=["t"])

        cache.delete("k1")
        assert cache.backend.keys_with_tag("t") == ["k2"]

        cache.clear("t")

        assert not cache.has("k1")
        assert not cache.has("k2")
        assert cache.backend.keys_with_tag("t") == []

    def test_set_after_clear_retags(self, cache: CacheEngine) -> None:
        """Should tag a key again after it was cleared."""
        cache.set("k", 1, tags=["t"])
        cache.clear("t")

        cache.set("k", 2, tags=["t"])
        cache.clear("t")

        assert not cache.has("k")

    def test_recursive_delete_cleans_tags(self, cache: CacheEngine) -> None:
        """Should drop tag rows of every key a recursive delete removes."""
        cache.set("p", 1, tags=["t"])
        cache.set("p/c", 2, tags=["t", "u"])
        cache.set("q", 3, tags=["t"])

        cache.delete("p", recursive=True)

        assert cache.backend.keys_with_tag("t") == ["q"]
        assert cache.backend.keys_with_tag("u") == []


class TestRecursiveTagInvalidation:
    """Tests for clearing tag hierarchies."""

    def test_recursive_clear(self, cache: CacheEngine) -> None:
        """Should clear the tag and every tag nested under it."""
        cache.set("a", 1, tags=["parent"])
        cache.set("b", 2, tags=["parent/child"])
        cache.set("c", 3, tags=["parent/child/grandchild"])
        cache.set("d", 4, tags=["other"])
        cache.set("e", 5, tags=["parentage"])

        cache.clear("parent", recursive=True)

        assert not cache.has("a")
        assert not cache.has("b")
        assert not cache.has("c")
        assert cache.has("d")
        assert cache.has("e")

    def test_recursive_clear_only_children(self, cache: CacheEngine) -> None:
        """Should clear nested tags even when the parent tag is unused."""
        cache.set("a", 1, tags=["root/x"])
        cache.set("b", 2, tags=["root/y/z"])

        cache.clear("root", recursive=True)

        assert not cache.has("a")
        assert not cache.has("b")

    def test_recursive_clear_is_independent_of_keys(self, cache: CacheEngine) -> None:
        """Should match on tags, not on key paths."""
        cache.set("parent/child", 1, tags=["unrelated"])
        cache.set("elsewhere", 2, tags=["parent/sub"])

        cache.clear("parent", recursive=True)

        assert cache.has("parent/child")
        assert not cache.has("elsewhere")

    def test_recursive_clear_is_case_sensitive(self, cache: CacheEngine) -> None:
        """Should not fold case when matching tag prefixes."""
        cache.set("a", 1, tags=["Parent/child"])
        cache.set("b", 2, tags=["parent/child"])

        cache.clear("parent", recursive=True)

        assert cache.has("a")
        assert not cache.has("b")

    def test_recursive_clear_treats_wildcards_literally(self, cache: CacheEngine) -> None:
        """Should not treat _ in tags as a pattern."""
        cache.set("a", 1, tags=["t_x/1"])
        cache.set("b", 2, tags=["tax/1"])

        cache.clear("t_x", recursive=True)

        assert not cache.has("a")
        assert cache.has("b")

    def test_recursive_clear_several_tags(self, cache: CacheEngine) -> None:
        """Should apply recursion to every tag given."""
        cache.set("a", 1, tags=["x/1"])
        cache.set("b", 2, tags=["y/2"])
        cache.set("c", 3, tags=["z/3"])

        cache.clear(["x", "y"], recursive=True)

        assert not cache.has("a")
        assert not cache.has("b")
        assert cache.has("c")
