"""Tests for the marker assignment in ``conftest.py``."""

import pytest


class TestMarkers:
    def test_unmarked_tests_are_unit(self, request):
        assert request.node.get_closest_marker("unit") is not None

    @pytest.mark.integration
    def test_integration_tests_are_not_unit(self, request):
        assert request.node.get_closest_marker("unit") is None
