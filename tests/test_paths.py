"""Tests for the dot-path codec."""
import pytest

from hydraconf import MalformedPathError, enumerate_leaf_paths, join_path, split_path
from hydraconf.schema import build_schema


class TestSplitPath:
    """Test split_path()."""

    def test_multi_segment(self):
        assert split_path('a.b.c') == ('a', 'b.c')

    def test_single_segment(self):
        """Last segment leaves an empty rest."""
        assert split_path('a') == ('a', '')

    def test_numeric_segment(self):
        assert split_path('0.port') == ('0', 'port')

    @pytest.mark.parametrize('path', ['', '.a', '..'])
    def test_empty_head_is_malformed(self, path):
        with pytest.raises(MalformedPathError):
            split_path(path)

    def test_non_string_is_malformed(self):
        with pytest.raises(MalformedPathError):
            split_path(None)


def test_join_path():
    """Empty prefix is the root; indices are stringified."""
    assert join_path('', 'ui') == 'ui'
    assert join_path('ui', 'theme') == 'ui.theme'
    assert join_path('servers', 1) == 'servers.1'


class TestEnumerateLeafPaths:
    """Test enumerate_leaf_paths()."""

    def test_map_insertion_order(self):
        tree = {'b': 1, 'a': {'z': True, 'y': 'x'}}
        assert enumerate_leaf_paths(tree) == ['b', 'a.z', 'a.y']

    def test_arrays_by_index(self, nested_defaults):
        assert enumerate_leaf_paths(nested_defaults) == [
            'name',
            'debug',
            'ratio',
            'window.width',
            'window.height',
            'window.maximized',
            'recent.0',
            'recent.1',
            'servers.0.host',
            'servers.0.port',
            'servers.1.host',
            'servers.1.port',
        ]

    def test_empty_containers_have_no_leaves(self):
        assert enumerate_leaf_paths({'a': {}, 'b': [], 'c': 1}) == ['c']

    def test_accepts_schema_node(self, ui_defaults):
        schema = build_schema(ui_defaults)
        assert enumerate_leaf_paths(schema) == ['ui.theme', 'ui.fontSize']
