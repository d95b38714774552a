import unittest

from stylewalker.syntax import Location, NodeKind, SyntaxNode, function_body, parameters

from tree_builders import block, function, if_stmt, node, program


class SyntaxNodeTests(unittest.TestCase):
    def test_add_child_sets_parent_and_role(self):
        root = node(NodeKind.PROGRAM)
        child = node(NodeKind.BLOCK, 2)
        root.add_child(child, role="body")

        self.assertIs(child.parent, root)
        self.assertEqual(child.role, "body")
        self.assertEqual(root.children, (child,))
        self.assertIsNone(root.parent)

    def test_node_cannot_get_a_second_parent(self):
        first = node(NodeKind.BLOCK)
        second = node(NodeKind.BLOCK)
        child = node(NodeKind.RETURN_STATEMENT)
        first.add_child(child)

        with self.assertRaises(ValueError):
            second.add_child(child)

    def test_location_accepts_tuple_and_orders(self):
        item = SyntaxNode(NodeKind.OTHER, (3, 7))
        self.assertEqual(item.location, Location(3, 7))
        self.assertLess(Location(3, 7), Location(3, 8))
        self.assertLess(Location(2, 90), Location(3, 1))
        self.assertEqual(str(item.location), "3:7")

    def test_attributes_are_read_only(self):
        item = node(NodeKind.VARIABLE_DECLARATION, binding="var")
        with self.assertRaises(TypeError):
            item.attributes["binding"] = "let"

    def test_preorder_visits_parent_before_children_in_source_order(self):
        fn = function("load", 1, body=[if_stmt(2), node(NodeKind.RETURN_STATEMENT, 3)])
        root = program(fn)

        kinds = [item.kind for item, _ in root.iter_preorder()]
        self.assertEqual(
            kinds,
            [
                NodeKind.PROGRAM,
                NodeKind.FUNCTION_DECLARATION,
                NodeKind.BLOCK,
                NodeKind.IF_STATEMENT,
                NodeKind.OTHER,
                NodeKind.BLOCK,
                NodeKind.RETURN_STATEMENT,
            ],
        )

    def test_preorder_ancestors_are_innermost_first(self):
        fn = function("load", 1, body=[node(NodeKind.RETURN_STATEMENT, 2)])
        root = program(fn)

        pairs = list(root.iter_preorder())
        ret, ancestors = pairs[-1]
        self.assertEqual(ret.kind, NodeKind.RETURN_STATEMENT)
        self.assertEqual([a.kind for a in ancestors], [NodeKind.BLOCK, NodeKind.FUNCTION_DECLARATION, NodeKind.PROGRAM])
        self.assertEqual(ancestors, ret.ancestors())

    def test_preorder_handles_very_deep_trees(self):
        root = node(NodeKind.PROGRAM)
        cur = root
        for line in range(2, 5002):
            cur = cur.add_child(node(NodeKind.BLOCK, line))

        visited = sum(1 for _ in root.iter_preorder())
        self.assertEqual(visited, 5001)

    def test_function_helpers(self):
        fn = function("save", params=["a", "b"], body=[node(NodeKind.RETURN_STATEMENT, 2)])
        self.assertEqual([p.name for p in parameters(fn)], ["a", "b"])
        self.assertEqual(function_body(fn).kind, NodeKind.BLOCK)
        self.assertIsNone(function_body(block(1)))


if __name__ == "__main__":
    unittest.main()
