"""
Unit tests for the tree walker and the mutation handlers it binds.
"""

import copy

from object_editor.editor_options import EditorOptions
from object_editor.events import MutationType
from object_editor.handlers import HandlerFactory
from object_editor.meta_model import TreeWalker
from object_editor.type_classifier import NodeKind
from object_editor.value_tree import ValueTree


def build(obj, **options):
    return TreeWalker(EditorOptions.model_validate(options)).build(obj)


class TestBucketing:
    """Test cases for routing root members."""

    def test_root_members_are_bucketed(self, tunnel):
        """Test that each top-level member lands in exactly one bucket."""
        tree = build(tunnel)

        assert [node.key for node in tree.root_scalars] == ["_id", "Tag", "MTU"]
        assert [node.key for node in tree.root_booleans] == ["EnableDefaultRoute"]
        assert [node.key for node in tree.root_arrays] == ["DNSServers", "Networks"]
        assert [node.key for node in tree.root_objects] == ["DNS"]

    def test_root_children_follow_bucket_order(self, tunnel):
        """Test that the root's children are scalars, booleans, arrays, objects."""
        tree = build(tunnel)
        assert [node.key for node in tree.root.children] == [
            "_id", "Tag", "MTU", "EnableDefaultRoute", "DNSServers", "Networks", "DNS"
        ]

    def test_array_root(self):
        """Test that an array root becomes the single root group."""
        tree = build(["a", "b"])
        assert tree.root_arrays == [tree.root]
        assert tree.root.identity == "root"
        assert [child.identity for child in tree.root.children] == ["root_0", "root_1"]

    def test_scalar_root(self):
        """Test that a scalar root becomes a single root scalar."""
        tree = build("just text")
        assert tree.root_scalars == [tree.root]
        assert tree.root.value == "just text"

    def test_null_member_is_a_string_leaf(self):
        """Test that null without a default is kept as a null leaf."""
        tree = build({"MTU": None})
        node = tree.root_scalars[0]
        assert node.kind == NodeKind.STRING
        assert node.is_null


class TestNamespacesAndIdentities:
    """Test cases for namespace and identity assignment."""

    def test_array_elements_share_namespace(self, tunnel):
        """Test that siblings share a namespace but not an identity."""
        tree = build(tunnel)
        first = tree.find("root_Networks_0_Tag")
        second = tree.find("root_Networks_1_Tag")

        assert first.namespace == second.namespace == "root_Networks_Tag"
        assert first.identity != second.identity

    def test_paths_and_depth(self, tunnel):
        """Test explicit paths and depth."""
        tree = build(tunnel)
        node = tree.find("root_DNS_Records_0_IP_0")

        assert node.path == ("DNS", "Records", 0, "IP", 0)
        assert node.namespace == "root_DNS_Records_IP"
        assert node.index == 0
        assert node.depth == 5
        assert node.parent.identity == "root_DNS_Records_0_IP"

    def test_identities_are_unique(self, tunnel):
        """Test that no two nodes share an identity."""
        tree = build(tunnel)
        identities = [node.identity for node in tree.iter_nodes()]
        assert len(identities) == len(set(identities))


class TestNesting:
    """Test cases for leaf groups versus nested groups."""

    def test_flat_array_is_not_nested(self, tunnel):
        """Test an array of scalars."""
        assert build(tunnel).find("root_DNSServers").nested is False

    def test_array_of_objects_is_nested(self, tunnel):
        """Test an array whose members are containers."""
        assert build(tunnel).find("root_Networks").nested is True

    def test_flat_object_element(self):
        """Test that an object of scalars is a leaf group."""
        tree = build({"Items": [{"Tag": "x"}]})
        assert tree.find("root_Items_0").nested is False

    def test_nested_object_orders_scalars_booleans_containers(self):
        """Test member order inside nested objects."""
        tree = build({"Net": {"Routes": [], "On": True, "Tag": "x"}})
        assert [child.key for child in tree.find("root_Net").children] == ["Tag", "On", "Routes"]

    def test_flat_object_keeps_insertion_order(self):
        """Test member order inside leaf groups."""
        tree = build({"Net": {"On": True, "Tag": "x"}})
        assert [child.key for child in tree.find("root_Net").children] == ["On", "Tag"]


class TestTitles:
    """Test cases for title resolution."""

    def test_leaf_title_is_key(self, tunnel):
        """Test that leaves are titled by their key."""
        assert build(tunnel).find("root_Tag").title == "Tag"

    def test_object_title_from_fields(self):
        """Test the Title > Tag > Name preference."""
        tree = build({"A": {"Name": "n", "Tag": "t"}, "B": {"Name": "n", "Tag": "", "Title": None},
                      "C": {"Value": 1}})
        assert tree.find("root_A").title == "t"
        assert tree.find("root_B").title == "n"
        assert tree.find("root_C").title == ""

    def test_override_wins(self):
        """Test that a configured title replaces the derived one."""
        tree = build({"A": {"Tag": "t"}}, titles={"root_A": "Custom"})
        assert tree.find("root_A").title == "Custom"

    def test_index_qualified_override(self, tunnel):
        """Test a title configured for a single array element."""
        tree = build(tunnel, titles={"root_Networks_1": "Backup", "root_Networks": "Network"})
        assert tree.find("root_Networks_0").title == "Network"
        assert tree.find("root_Networks_1").title == "Backup"

    def test_array_title_is_key(self, tunnel):
        """Test that arrays are titled by their key."""
        assert build(tunnel).find("root_DNSServers").title == "DNSServers"


class TestDefaults:
    """Test cases for default substitution."""

    def test_default_written_into_tree(self):
        """Test that a null member is replaced by its default before classification."""
        obj = {"MTU": None}
        tree = build(obj, defaults={"root_MTU": 1420})

        assert obj["MTU"] == 1420
        node = tree.root_scalars[0]
        assert node.kind == NodeKind.NUMBER
        assert node.is_null is False

    def test_default_container(self):
        """Test that a default can turn null into a group."""
        obj = {"Records": [{"Domain": "a", "IP": None}, {"Domain": "b", "IP": None}]}
        tree = build(obj, defaults={"root_Records_IP": []})

        assert tree.find("root_Records_0_IP").kind == NodeKind.ARRAY
        obj["Records"][0]["IP"].append("10.0.0.1")
        # Each element received its own copy
        assert obj["Records"][1]["IP"] == []

    def test_non_null_values_are_kept(self):
        """Test that defaults never overwrite values."""
        obj = {"MTU": 1280}
        build(obj, defaults={"root_MTU": 1420})
        assert obj["MTU"] == 1280

    def test_index_qualified_default(self):
        """Test a default configured for one element."""
        obj = {"Items": [None, None]}
        build(obj, defaults={"root_Items_1": "second"})
        assert obj["Items"] == [None, "second"]

    def test_array_default_not_applied_to_elements(self):
        """Test that a default meant for a null array leaves null elements alone."""
        obj = {"DNSServers": ["9.9.9.9", None]}
        tree = build(obj, defaults={"root_DNSServers": ["1.1.1.1"]})

        assert obj["DNSServers"] == ["9.9.9.9", None]
        assert tree.find("root_DNSServers_1").is_null

    def test_array_default_applied_to_null_array(self):
        """Test the same default on a null array."""
        obj = {"DNSServers": None}
        build(obj, defaults={"root_DNSServers": ["1.1.1.1"]})
        assert obj["DNSServers"] == ["1.1.1.1"]


class TestDeterminism:
    """Test cases for repeatable walks."""

    def test_same_input_same_tree(self, tunnel):
        """Test that two walks of equal input produce equal trees."""
        first = build(tunnel)
        second = build(copy.deepcopy(tunnel))
        assert first.signature() == second.signature()

    def test_walk_does_not_mutate_without_defaults(self, tunnel):
        """Test that walking alone leaves the object untouched."""
        before = copy.deepcopy(tunnel)
        build(tunnel)
        assert tunnel == before


class TestHandlers:
    """Test cases for handlers bound during the walk."""

    def test_setter_writes_and_notifies(self, tunnel, channel):
        """Test that a set writes in place before the event is emitted."""
        seen = []
        channel.subscribe(lambda event: seen.append(tunnel["Networks"][0]["Tag"]))
        options = EditorOptions()
        handlers = HandlerFactory(ValueTree(tunnel), options, channel)
        tree = TreeWalker(options, handlers).build(tunnel)

        setter = handlers.setter(tree.find("root_Networks_0_Tag"))
        setter("lan")

        assert tunnel["Networks"][0]["Tag"] == "lan"
        assert seen == ["lan"]
        assert channel.events[0].mutation == MutationType.SET
        assert channel.events[0].path == ("Networks", 0, "Tag")

    def test_element_delete_splices(self, tunnel):
        """Test the default element delete."""
        tree = build(tunnel)
        tree.find("root_DNSServers_0").delete_handler()
        assert tunnel["DNSServers"] == ["1.1.1.1"]

    def test_element_delete_handler_with_index(self, tunnel):
        """Test that a two-argument delButtons handler receives the array and index."""
        calls = []
        tree = build(tunnel, delButtons={"root_Networks": lambda items, index: calls.append((items, index))})

        tree.find("root_Networks_1").delete_handler()

        assert calls == [(tunnel["Networks"], 1)]
        assert len(tunnel["Networks"]) == 2

    def test_element_delete_handler_receives_parent_array(self, tunnel):
        """Test that a one-argument delButtons handler receives only the parent array."""
        calls = []
        tree = build(tunnel, delButtons={"root_Networks": lambda items: calls.append(items)})

        tree.find("root_Networks_0").delete_handler()

        assert calls == [tunnel["Networks"]]
        assert len(tunnel["Networks"]) == 2

    def test_object_member_delete_requires_handler(self, tunnel):
        """Test that keyed objects are deletable only through configuration."""
        assert build(tunnel).find("root_DNS").delete_handler is None

        calls = []
        tree = build(tunnel, delButtons={"root_DNS": lambda parent, key: calls.append((parent, key))})
        tree.find("root_DNS").delete_handler()
        assert calls == [(tunnel, "DNS")]

    def test_keyed_array_delete_uses_configured_handler(self, tunnel):
        """Test that a keyed array gets a delete when a handler is configured."""
        assert build(tunnel).find("root_DNSServers").delete_handler is None

        tree = build(tunnel, delButtons={"root_DNSServers": lambda parent, key: parent.pop(key)})
        tree.find("root_DNSServers").delete_handler()
        assert "DNSServers" not in tunnel

    def test_keyed_container_handler_with_parent_only(self, tunnel):
        """Test that a one-argument handler for a keyed container gets the parent."""
        calls = []
        tree = build(tunnel, delButtons={"root_DNS": calls.append})
        tree.find("root_DNS").delete_handler()
        assert calls == [tunnel]

    def test_keyed_leaves_are_not_deletable(self, tunnel):
        """Test that scalar members have no delete."""
        assert build(tunnel).find("root_Tag").delete_handler is None

    def test_factory_add(self, tunnel):
        """Test that a newButtons factory receives the live array."""
        tree = build(tunnel, newButtons={"root_Networks_Routes": lambda routes: routes.append({"Address": ""})})

        tree.find("root_Networks_1_Routes").add_handler()

        assert tunnel["Networks"][1]["Routes"] == [{"Address": ""}]
        assert tunnel["Networks"][0]["Routes"] == [{"Address": "0.0.0.0/0", "Metric": "0"}]

    def test_flat_array_add_copies_first_element(self, tunnel):
        """Test the automatic add of a scalar array."""
        build(tunnel).find("root_DNSServers").add_handler()
        assert tunnel["DNSServers"] == ["9.9.9.9", "1.1.1.1", "9.9.9.9"]

    def test_empty_flat_array_add(self):
        """Test the automatic add of an empty array."""
        obj = {"Blocklists": []}
        build(obj).find("root_Blocklists").add_handler()
        assert obj["Blocklists"] == [""]

    def test_nested_array_without_factory_has_no_add(self, tunnel):
        """Test that arrays of objects need a factory to grow."""
        assert build(tunnel).find("root_Networks").add_handler is None

    def test_objects_have_no_add(self, tunnel):
        """Test that only arrays can be added to."""
        assert build(tunnel).find("root_DNS").add_handler is None
