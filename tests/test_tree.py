"""Tests for Tree, TreeNode and IdentityRegistry."""

import pytest

from narytree import (
    AlreadyInitializedError,
    IllegalOperationError,
    IncompatibleValueTypeError,
    InvalidValueError,
    NoSuchNodeError,
    StoryNode,
    Tree,
    TreeError,
)
from narytree.node import TreeNode
from narytree.registry import IdentityRegistry


def build_sample():
    """Build the R(A(C), B) tree and return it with its identities."""
    tree = Tree(str)
    r = tree.set_root('R')
    a = tree.append_child(r, 'A')
    b = tree.append_child(r, 'B')
    c = tree.append_child(a, 'C')
    return tree, r, a, b, c


def assert_registry_consistent(tree):
    """Registry entries must be exactly the nodes reachable from the root."""
    reachable = list(tree)
    assert len(reachable) == len(set(reachable))
    assert sorted(reachable) == sorted(tree._registry)
    for identity in reachable:
        assert tree._registry.resolve(identity).identity == identity


class TestTreeNode:
    """Tests for TreeNode."""

    def test_create_root_node(self):
        """Test a node without parent."""
        node = TreeNode('R')
        assert node.value == 'R'
        assert node.identity == -1
        assert node.children == []
        assert node.parent is None
        assert node.is_leaf is True

    def test_add_child_links_parent(self):
        """Test add_child appends and links back to the parent."""
        root = TreeNode('R')
        first = root.add_child('A')
        second = root.add_child('B')
        assert root.children == [first, second]
        assert first.parent is root
        assert root.is_leaf is False

    def test_detach_child(self):
        """Test detach_child removes the child and clears its parent."""
        root = TreeNode('R')
        first = root.add_child('A')
        second = root.add_child('B')
        assert root.detach_child(first) == 0
        assert root.children == [second]
        assert first.parent is None

    def test_detach_foreign_child_raises(self):
        """Test detaching a node of another parent raises."""
        root = TreeNode('R')
        with pytest.raises(ValueError, match="not a child"):
            root.detach_child(TreeNode('X'))

    def test_preorder_and_postorder(self):
        """Test traversal orders."""
        root = TreeNode(1)
        two = root.add_child(2)
        root.add_child(3).add_child(7)
        two.add_child(5)
        two.add_child(6)
        assert [n.value for n in root.iter_preorder()] == [1, 2, 5, 6, 3, 7]
        assert [n.value for n in root.iter_postorder()] == [5, 6, 2, 7, 3, 1]

    def test_repr(self):
        """Test string representation."""
        assert "'R'" in repr(TreeNode('R'))


class TestIdentityRegistry:
    """Tests for IdentityRegistry."""

    def test_assign_preorder(self):
        """Test identities follow pre-order of the subtree."""
        root = TreeNode('R')
        a = root.add_child('A')
        c = a.add_child('C')
        b = root.add_child('B')
        registry = IdentityRegistry()
        assert registry.assign(root) == 0
        assert (a.identity, c.identity, b.identity) == (1, 2, 3)
        assert registry.next_identity == 4
        assert len(registry) == 4

    def test_release_removes_subtree(self):
        """Test release deregisters every node of the subtree."""
        root = TreeNode('R')
        a = root.add_child('A')
        a.add_child('C')
        registry = IdentityRegistry()
        registry.assign(root)
        registry.release(a)
        assert list(registry) == [0]
        assert registry.next_identity == 3

    def test_resolve_missing_raises(self):
        """Test resolving an unknown identity raises NoSuchNodeError."""
        registry = IdentityRegistry()
        with pytest.raises(NoSuchNodeError, match="does not exist"):
            registry.resolve(5)

    def test_contains_tolerates_unhashable(self):
        """Test membership with unhashable keys is False."""
        registry = IdentityRegistry()
        assert [] not in registry


class TestTreeBasic:
    """Basic tests for Tree."""

    def test_create_empty_tree(self):
        """Test creating an empty tree."""
        tree = Tree()
        assert len(tree) == 0
        assert tree.is_empty
        assert tree.get_root_identity() is None
        assert tree.root_identity is None
        assert list(tree) == []

    def test_create_with_root(self):
        """Test the root value constructor."""
        tree = Tree(int, root=7)
        assert tree.root_identity == 0
        assert tree[0] == 7

    def test_set_root(self):
        """Test set_root returns the root identity."""
        tree = Tree()
        assert tree.set_root('R') == 0
        assert tree.get_value(0) == 'R'
        assert tree.get_parent(0) is None

    def test_set_root_twice_raises(self):
        """Test a second set_root raises AlreadyInitializedError."""
        tree = Tree(root='R')
        with pytest.raises(AlreadyInitializedError, match="already been set"):
            tree.set_root('S')
        assert tree[0] == 'R'
        assert len(tree) == 1

    def test_append_child_order(self):
        """Test children keep append order."""
        tree, r, a, b, c = build_sample()
        assert tree.get_children(r) == [a, b]
        assert tree.get_children(a) == [c]
        assert tree.get_children(b) == []

    def test_append_child_missing_parent_raises(self):
        """Test appending under an unknown identity raises and changes nothing."""
        tree, *_ = build_sample()
        with pytest.raises(NoSuchNodeError):
            tree.append_child(99, 'X')
        assert len(tree) == 4
        assert tree._registry.next_identity == 4

    def test_append_to_empty_tree_raises(self):
        """Test appending to an empty tree raises NoSuchNodeError."""
        with pytest.raises(NoSuchNodeError):
            Tree().append_child(0, 'X')

    def test_identities_in_append_order(self):
        """Test identities are assigned in creation order."""
        tree, r, a, b, c = build_sample()
        assert (r, a, b, c) == (0, 1, 2, 3)

    def test_getitem_and_get_value(self):
        """Test indexed access and get_value agree."""
        tree, r, a, b, c = build_sample()
        assert tree[c] == tree.get_value(c) == 'C'

    def test_get_value_missing_raises(self):
        """Test reading an unknown identity raises."""
        tree, *_ = build_sample()
        with pytest.raises(NoSuchNodeError):
            tree.get_value(42)
        with pytest.raises(KeyError):
            tree[42]

    def test_get_children_missing_raises(self):
        """Test get_children of an unknown identity raises."""
        tree = Tree()
        with pytest.raises(NoSuchNodeError):
            tree.get_children(0)

    def test_get_parent(self):
        """Test get_parent returns the parent identity."""
        tree, r, a, b, c = build_sample()
        assert tree.get_parent(c) == a
        assert tree.get_parent(a) == r

    def test_contains(self):
        """Test identity membership."""
        tree, r, a, b, c = build_sample()
        assert c in tree
        assert 17 not in tree

    def test_iter_preorder(self):
        """Test iteration yields identities in pre-order."""
        tree, r, a, b, c = build_sample()
        assert list(tree) == [r, a, c, b]

    def test_walk(self):
        """Test walk yields depth, identity and value."""
        tree, r, a, b, c = build_sample()
        assert list(tree.walk()) == [
            (0, r, 'R'),
            (1, a, 'A'),
            (2, c, 'C'),
            (1, b, 'B'),
        ]

    def test_walk_empty(self):
        """Test walking an empty tree yields nothing."""
        assert list(Tree().walk()) == []

    def test_repr(self):
        """Test string representation."""
        tree, *_ = build_sample()
        assert repr(tree) == "Tree(str, nodes=4)"

    def test_errors_share_base(self):
        """Test structural errors derive from TreeError."""
        for exc in (AlreadyInitializedError, NoSuchNodeError, IllegalOperationError):
            assert issubclass(exc, TreeError)


class TestTreeValues:
    """Tests for the checks applied to inserted values."""

    def test_child_with_newline_rejected(self):
        """Test a value holding serialized lines cannot add nodes."""
        tree = Tree(root='R')
        with pytest.raises(InvalidValueError, match="line break"):
            tree.append_child(0, 'a\n[X]\n[1]: injected')
        assert len(tree) == 1
        assert tree.get_children(0) == []
        assert tree.serialize() == "[0]: R\n[X]\n"

    def test_root_with_trailing_carriage_return_rejected(self):
        """Test a root ending in a carriage return is rejected."""
        with pytest.raises(InvalidValueError):
            Tree(root='R\r')
        tree = Tree()
        with pytest.raises(InvalidValueError):
            tree.set_root('R\r')
        assert tree.is_empty
        assert tree._registry.next_identity == 0

    @pytest.mark.parametrize('value', ['a\rb', '\n', 'line\r\n'])
    def test_line_breaks_rejected(self, value):
        """Test every carriage return or newline is rejected."""
        tree = Tree(root='R')
        with pytest.raises(ValueError):
            tree.append_child(0, value)
        assert len(tree) == 1

    def test_wrong_type_rejected(self):
        """Test a str child in an int tree raises and changes nothing."""
        tree = Tree(int, root=1)
        with pytest.raises(IncompatibleValueTypeError, match="Expected a value of type int"):
            tree.append_child(0, 'x')
        with pytest.raises(TypeError):
            tree.append_child(0, 2.5)
        assert len(tree) == 1
        assert tree._registry.next_identity == 1
        assert Tree.deserialize(tree.serialize(), int)[0] == 1

    def test_wrong_root_type_rejected(self):
        """Test a root of the wrong type is rejected."""
        with pytest.raises(IncompatibleValueTypeError):
            Tree(StoryNode, root='start')

    def test_bool_in_int_tree_rejected(self):
        """Test a bool does not pass as an int, since 'True' is not an int literal."""
        tree = Tree(int, root=1)
        with pytest.raises(InvalidValueError, match="cannot be stored"):
            tree.append_child(0, True)

    def test_nan_rejected(self):
        """Test a float that does not compare equal to itself is rejected."""
        tree = Tree(float, root=0.5)
        with pytest.raises(InvalidValueError, match="does not round trip"):
            tree.append_child(0, float('nan'))

    def test_story_node_with_quote_rejected(self):
        """Test a StoryNode whose text form cannot be parsed back is rejected."""
        tree = Tree(StoryNode, root=StoryNode('start', 'Dawn.'))
        with pytest.raises(InvalidValueError):
            tree.append_child(0, StoryNode('Say "hi"', 'Nobody answers.'))
        assert tree.get_children(0) == []

    def test_missing_parent_checked_first(self):
        """Test an unknown parent is reported before the value."""
        tree = Tree(int, root=1)
        with pytest.raises(NoSuchNodeError):
            tree.append_child(5, 'x')

    def test_value_errors_share_base(self):
        """Test value errors derive from TreeError."""
        assert issubclass(InvalidValueError, TreeError)
        assert issubclass(InvalidValueError, ValueError)


class TestTreeRemoval:
    """Tests for remove_subtree."""

    def test_remove_leaf(self):
        """Test removing a leaf."""
        tree, r, a, b, c = build_sample()
        tree.remove_subtree(c)
        assert tree.get_children(a) == []
        assert c not in tree
        assert_registry_consistent(tree)

    def test_remove_subtree_deregisters_descendants(self):
        """Test no identity of the removed subtree stays resolvable."""
        tree, r, a, b, c = build_sample()
        tree.remove_subtree(a)
        for identity in (a, c):
            assert identity not in tree
            with pytest.raises(NoSuchNodeError):
                tree.get_value(identity)
        assert tree.get_children(r) == [b]
        assert len(tree) == 2
        assert_registry_consistent(tree)

    def test_remove_keeps_sibling_order(self):
        """Test remaining siblings keep their relative order."""
        tree = Tree(int, root=0)
        kids = [tree.append_child(0, value) for value in range(1, 6)]
        tree.remove_subtree(kids[2])
        assert tree.get_children(0) == [kids[0], kids[1], kids[3], kids[4]]

    def test_remove_root_raises(self):
        """Test removing the root raises and leaves the tree intact."""
        tree, r, a, b, c = build_sample()
        before = tree.serialize()
        with pytest.raises(IllegalOperationError, match="root"):
            tree.remove_subtree(r)
        assert tree.serialize() == before
        assert len(tree) == 4

    def test_remove_missing_raises(self):
        """Test removing an unknown identity raises NoSuchNodeError."""
        tree, *_ = build_sample()
        with pytest.raises(NoSuchNodeError):
            tree.remove_subtree(99)
        assert len(tree) == 4

    def test_remove_twice_raises(self):
        """Test a removed identity cannot be removed again."""
        tree, r, a, b, c = build_sample()
        tree.remove_subtree(b)
        with pytest.raises(NoSuchNodeError):
            tree.remove_subtree(b)

    def test_identities_never_reused(self):
        """Test identities keep growing after removals."""
        tree, r, a, b, c = build_sample()
        tree.remove_subtree(a)
        d = tree.append_child(r, 'D')
        assert d == 4
        assert d not in (a, b, c)
        assert_registry_consistent(tree)

    def test_mixed_mutations_keep_registry_consistent(self):
        """Test registry invariants across a sequence of mutations."""
        tree = Tree(int, root=0)
        ids = [tree.root_identity]
        for value in range(1, 20):
            ids.append(tree.append_child(ids[value // 3], value))
        tree.remove_subtree(ids[2])
        tree.append_child(ids[1], 100)
        tree.remove_subtree(ids[4])
        assert_registry_consistent(tree)


class TestStoryTree:
    """Tests for trees holding StoryNode values."""

    def test_story_tree(self):
        """Test building a tree of StoryNode values."""
        tree = Tree(StoryNode, root=StoryNode('start', 'You wake up.'))
        door = tree.append_child(tree.root_identity, StoryNode('Open the door', 'A dark hall.'))
        assert tree[door].action == 'Open the door'
        assert tree[tree.root_identity].outcome == 'You wake up.'
