"""
Tests for multiple flow direction routing.
"""

import numpy as np
import pytest

from lakeparam.core.fill import fill_sinks_and_flats
from lakeparam.core.ranking import rank_cells
from lakeparam.core.routing import outflow_fractions, route_mfd_flow
from lakeparam.core.topology import NeighborTopology, neighbor_distances

NODATA = -9999.0


def _route(filled: np.ndarray, cell_area: float = 100.0, dx: float = 10.0, dy: float = 10.0, order=None):
    active = filled != NODATA
    topology = NeighborTopology.build(*filled.shape)
    if order is None:
        order = rank_cells(filled, active)
    return route_mfd_flow(filled, active, topology, neighbor_distances(dx, dy), cell_area, order)


class TestOutflowFractions:
    """Tests for outflow_fractions."""

    def test_split_by_slope(self) -> None:
        """Flow splits in proportion to (drop / distance) ** 1.1."""
        z = np.full((3, 3), 11.0)
        z[1, 1] = 10.0
        z[1, 2] = 9.0  # east, drop 1
        z[1, 0] = 8.0  # west, drop 2
        topology = NeighborTopology.build(3, 3)
        center = topology.flat_index(1, 1)

        fractions = outflow_fractions(
            center,
            z.ravel().tolist(),
            [True] * 9,
            topology.table[center].tolist(),
            neighbor_distances(1.0, 1.0),
        )

        total = 1.0 + 2.0**1.1
        assert fractions[3] == pytest.approx(1.0 / total)
        assert fractions[7] == pytest.approx(2.0**1.1 / total)
        assert sum(fractions) == pytest.approx(1.0)
        assert [f for d, f in enumerate(fractions) if d not in (3, 7)] == [0.0] * 6

    def test_no_lower_neighbor(self) -> None:
        """A local minimum passes nothing on."""
        z = np.full((3, 3), 11.0)
        z[1, 1] = 1.0
        topology = NeighborTopology.build(3, 3)
        center = topology.flat_index(1, 1)

        fractions = outflow_fractions(
            center, z.ravel().tolist(), [True] * 9, topology.table[center].tolist(), neighbor_distances(1.0, 1.0)
        )

        assert fractions == [0.0] * 8

    def test_inactive_neighbors_ignored(self) -> None:
        """Nodata neighbors never receive flow."""
        z = np.full((3, 3), 11.0)
        z[1, 1] = 10.0
        z[1, 2] = 9.0
        z[1, 0] = 8.0
        valid = [True] * 9
        valid[3] = False  # west neighbor at (1, 0)
        topology = NeighborTopology.build(3, 3)

        fractions = outflow_fractions(4, z.ravel().tolist(), valid, topology.table[4].tolist(), (1.0,) * 8)

        assert fractions[3] == pytest.approx(1.0)
        assert fractions[7] == 0.0


class TestRouteMfdFlow:
    """Tests for route_mfd_flow."""

    def test_ramp_accumulates(self) -> None:
        """Flow on a one-row ramp accumulates downhill."""
        filled = np.array([[3.0, 2.0, 1.0]])

        flow = _route(filled)

        np.testing.assert_allclose(flow, [[100.0, 200.0, 300.0]])

    def test_inactive_cells_have_no_flow(self) -> None:
        """Nodata cells neither hold nor receive flow."""
        filled = np.array([[3.0, NODATA, 1.0], [3.0, 2.0, 1.0]])

        flow = _route(filled)

        assert flow[0, 1] == 0.0

    def test_flow_is_conserved(self) -> None:
        """All contributed area ends up in cells without a lower neighbor."""
        rng = np.random.default_rng(3)
        values = rng.uniform(0.0, 20.0, size=(10, 10))
        values[rng.random((10, 10)) < 0.05] = NODATA
        active = values != NODATA
        topology = NeighborTopology.build(10, 10)
        filled = fill_sinks_and_flats(values, active, topology)

        flow = _route(filled, cell_area=25.0)

        z = filled.ravel()
        valid = active.ravel()
        terminal = [
            cell
            for cell in range(topology.size)
            if valid[cell] and not any(valid[n] and z[n] < z[cell] for n in topology.table[cell])
        ]
        assert flow.ravel()[terminal].sum() == pytest.approx(25.0 * active.sum())

    def test_tie_order_does_not_matter(self) -> None:
        """Cells of equal elevation give the same result in any visiting order."""
        filled = np.array(
            [
                [5.0, 5.0, 5.0, 5.0],
                [4.0, 4.0, 4.0, 4.0],
                [3.0, 2.5, 3.0, 3.0],
            ]
        )
        active = filled != NODATA
        order = rank_cells(filled, active)
        shuffled = sorted(order, key=lambda item: (item.rank, -item.row, -item.col))

        np.testing.assert_allclose(_route(filled, order=order), _route(filled, order=shuffled))
