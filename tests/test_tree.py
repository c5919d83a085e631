"""Tests for the tree renderer, styling and size formatting."""

import io

import pytest

from graph_report.report import Style, TreeNode, human_size, render_tree


def _render(node, style=None):
    output = io.StringIO()
    if style is None:
        render_tree(node, output)
    else:
        render_tree(node, output, style)
    return output.getvalue()


class TestRenderTree:
    def test_single_node(self):
        assert _render(TreeNode("root")) == "root\n"

    def test_nested(self):
        tree = TreeNode("root", [
            TreeNode("a", [TreeNode("a1"), TreeNode("a2", [TreeNode("a2x")])]),
            TreeNode("b"),
            TreeNode("c", [TreeNode("c1")]),
        ])
        assert _render(tree) == (
            "root\n"
            "├─┬ a\n"
            "│ ├── a1\n"
            "│ └─┬ a2\n"
            "│   └── a2x\n"
            "├── b\n"
            "└─┬ c\n"
            "  └── c1\n"
        )

    def test_deep_tree_does_not_recurse(self):
        root = TreeNode("0")
        node = root
        for i in range(1, 5000):
            child = TreeNode(str(i))
            node.children.append(child)
            node = child
        lines = _render(root).splitlines()
        assert len(lines) == 5000
        assert lines[-1].endswith("└── 4999")

    def test_connectors_are_styled(self):
        output = _render(TreeNode("root", [TreeNode("leaf")]), Style(use_color=True))
        assert output.startswith("root\n")
        assert "\x1b[" in output
        assert output.rstrip("\n").endswith(" leaf")


class TestStyle:
    def test_plain_passthrough(self):
        style = Style(use_color=False)
        assert style.red_bold("(missing)") == "(missing)"
        assert style.italic_gray("x") == "x"

    def test_colored(self):
        style = Style(use_color=True)
        assert style.bold("size:") != "size:"
        assert "size:" in style.bold("size:")


class TestHumanSize:
    @pytest.mark.parametrize("size, expected", [
        (0, "0B"),
        (16, "16B"),
        (1023, "1023B"),
        (1024, "1KB"),
        (1536, "1.5KB"),
        (4864, "4.75KB"),
        (1024 * 1024, "1MB"),
        (int(1024 * 1024 * 1.25), "1.25MB"),
        (-1024, "-1KB"),
        (1024 ** 3 * 3, "3GB"),
    ])
    def test_format(self, size, expected):
        assert human_size(size) == expected
