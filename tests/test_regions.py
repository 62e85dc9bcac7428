from starbattle.regions import (
    build_rows, build_columns, build_groups, walls_from_region_grid, region_grid_from_groups,
    horizontal_wall_exists, vertical_wall_exists
)


def test_rows_and_columns():
    assert build_rows(3) == [[0, 1, 2], [3, 4, 5], [6, 7, 8]]
    assert build_columns(3) == [[0, 3, 6], [1, 4, 7], [2, 5, 8]]


def test_walls_from_region_grid_layout(unique_regions):
    horizontal, vertical = walls_from_region_grid(unique_regions)
    assert len(horizontal) == 20 and len(vertical) == 20
    # (0, 0) is walled off on the right and below.
    assert vertical_wall_exists(vertical, 0, 0, 5)
    assert horizontal_wall_exists(horizontal, 0, 0, 5)
    # (2, 1) and (2, 2) share a region.
    assert not horizontal_wall_exists(horizontal, 2, 1, 5)
    # Outside the grid there is never a wall.
    assert not vertical_wall_exists(vertical, 4, 0, 5)
    assert not horizontal_wall_exists(horizontal, 0, 4, 5)


def test_build_groups_order_and_members(unique_regions):
    horizontal, vertical = walls_from_region_grid(unique_regions)
    groups, cell_to_group = build_groups(5, horizontal, vertical)

    large = sorted(set(range(25)) - {0, 7, 12, 14, 19, 16, 21})
    assert groups == [[0], large, [7, 12], [14, 19], [16, 21]]
    for group_index, group in enumerate(groups):
        for i in group:
            assert cell_to_group[i] == group_index


def test_build_groups_merges_into_earliest_group():
    # A U shape: both arms start separate groups that meet on the bottom row.
    grid = [
        [1, 2, 1],
        [1, 2, 1],
        [1, 1, 1],
    ]
    horizontal, vertical = walls_from_region_grid(grid)
    groups, _ = build_groups(3, horizontal, vertical)
    assert groups == [[0, 2, 3, 5, 6, 7, 8], [1, 4]]


def test_build_groups_without_walls_and_with_all_walls():
    groups, cell_to_group = build_groups(4, [False] * 12, [False] * 12)
    assert groups == [list(range(16))]
    assert set(cell_to_group) == {0}

    groups, _ = build_groups(4, [True] * 12, [True] * 12)
    assert groups == [[i] for i in range(16)]


def test_region_grid_round_trip(unique_regions):
    horizontal, vertical = walls_from_region_grid(unique_regions)
    groups, _ = build_groups(5, horizontal, vertical)
    assert walls_from_region_grid(region_grid_from_groups(5, groups)) == (horizontal, vertical)
