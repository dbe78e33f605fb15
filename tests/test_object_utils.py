"""Tests for snapshotting and applying UI object graphs."""

from booru_sidebar.utils.object_utils import apply_to_object, is_node, to_plain_object


class Node:
    """Minimal stand-in for a UI object: named, with a parent and methods."""

    def __init__(self, name, parent=None, **props):
        self.objectName = name
        self.parent = parent
        self.children = []
        for key, value in props.items():
            setattr(self, key, value)

    def destroy(self):
        pass


def make_config():
    root = Node("config", provider="yandere", page_size=20, blacklist=["gore"])
    root.search = Node("search", parent=root, safe_mode=True, history={"last": "cat"})
    root.children.append(root.search)
    root.reloadableId = "cfg-1"
    return root


# =============================================================================
# to_plain_object
# =============================================================================


class TestToPlainObject:
    def test_primitives_pass_through(self):
        assert to_plain_object(None) is None
        assert to_plain_object(3) == 3
        assert to_plain_object("cat") == "cat"

    def test_lists(self):
        assert to_plain_object((1, [2, "x"])) == [1, [2, "x"]]

    def test_snapshot_skips_bookkeeping_and_methods(self):
        snapshot = to_plain_object(make_config())
        assert snapshot == {
            "blacklist": ["gore"],
            "page_size": 20,
            "provider": "yandere",
            "search": {"history": {"last": "cat"}, "safe_mode": True},
        }

    def test_dict_keys_are_filtered_too(self):
        assert to_plain_object({"objectName": "x", "parentId": 1, "value": 2}) == {"value": 2}

    def test_underscore_dict_keys_are_kept(self):
        assert to_plain_object({"_id": 7, "nested": {"__meta": "x"}}) == {"_id": 7, "nested": {"__meta": "x"}}

    def test_underscore_attributes_are_dropped(self):
        node = Node("cfg", theme="dark")
        node._cache = {"a": 1}
        assert to_plain_object(node) == {"theme": "dark"}


# =============================================================================
# apply_to_object
# =============================================================================


class TestApplyToObject:
    def test_assigns_known_keys_only(self):
        config = make_config()
        apply_to_object(config, {"provider": "danbooru", "unknown": 1})
        assert config.provider == "danbooru"
        assert not hasattr(config, "unknown")

    def test_recurses_into_child_nodes(self):
        config = make_config()
        search = config.search
        apply_to_object(config, {"search": {"safe_mode": False}})
        assert config.search is search
        assert search.safe_mode is False
        assert search.history == {"last": "cat"}

    def test_plain_values_are_replaced(self):
        config = make_config()
        apply_to_object(config, {"blacklist": ["gore", "spoilers"], "search": {"history": {}}})
        assert config.blacklist == ["gore", "spoilers"]
        assert config.search.history == {}

    def test_round_trip_restores_state(self):
        original = make_config()
        snapshot = to_plain_object(original)
        target = make_config()
        target.provider = "gelbooru"
        target.search.safe_mode = False
        apply_to_object(target, snapshot)
        assert to_plain_object(target) == snapshot

    def test_ignores_non_dict_values(self):
        config = make_config()
        apply_to_object(config, None)
        apply_to_object(config, ["provider"])
        apply_to_object(None, {"provider": "x"})
        assert config.provider == "yandere"

    def test_dict_node(self):
        target = {"a": 1, "b": 2}
        apply_to_object(target, {"a": 5, "c": 3})
        assert target == {"a": 5, "b": 2}

    def test_is_node(self):
        assert is_node(Node("x"))
        assert not is_node({"objectName": "x"})
        assert not is_node("objectName")
