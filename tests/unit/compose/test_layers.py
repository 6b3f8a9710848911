"""Tests for the layer catalog."""
from __future__ import annotations

import pytest

from plasma.core.compose.layers import LAYER_NAMES, is_layer, iter_layers, sort_layers


class TestLayerCatalog:
    def test_catalog_contains_the_seven_layers_in_declared_order(self) -> None:
        assert LAYER_NAMES == (
            "platform",
            "interaction",
            "integration",
            "cognition",
            "conversation",
            "stabilization",
            "foundation",
        )
        assert list(iter_layers()) == list(LAYER_NAMES)

    @pytest.mark.parametrize("name", LAYER_NAMES)
    def test_known_names_are_layers(self, name: str) -> None:
        assert is_layer(name)

    @pytest.mark.parametrize("name", ["src", "docs", "Platform", "platform/", "", "foundations"])
    def test_other_names_are_not_layers(self, name: str) -> None:
        """Membership is an exact, case-sensitive match."""
        assert not is_layer(name)

    def test_sort_layers_filters_and_orders_by_catalog(self) -> None:
        assert sort_layers(["foundation", "docs", "platform", "cognition"]) == [
            "platform",
            "cognition",
            "foundation",
        ]
