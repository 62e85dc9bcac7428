"""**********************************************************************************
 * Title: partitioner.py
 *
 * @version 1.0.0
 * -------------------------------------------------------------------------------
 * Description:
 * Splits a set of cells into clusters that each fit inside a 2x2 square. Any
 * 2x2 square can hold at most one star, so the number of clusters is an upper
 * bound on the number of stars the cells can still take.
 *
 * The clustering is greedy: each cell joins the first cluster it fits into.
 * This does not always find the smallest number of clusters, which can only
 * make the deduction rules miss a step, never assert a false one.
 **********************************************************************************"""

from starbattle.geometry import coords


def within_square(size, i, cluster):
    """
    Checks whether cell `i` is within one step (in both axes) of every member of `cluster`.

    :param int size: The side length of the grid.
    :param int i: The candidate cell index.
    :param list[int] cluster: The cells already in the cluster.
    :rtype: bool
    """
    x, y = coords(i, size)
    for other in cluster:
        other_x, other_y = coords(other, size)
        if abs(x - other_x) > 1 or abs(y - other_y) > 1:
            return False
    return True


def partition_cells(size, indices):
    """
    Greedily partitions `indices` into clusters of mutually adjacent cells.

    :param int size: The side length of the grid.
    :param list[int] indices: The cells to partition, processed in the given order.
    :returns: The clusters, each a list of cell indices.
    :rtype: list[list[int]]
    """
    clusters = []
    for i in indices:
        for cluster in clusters:
            if within_square(size, i, cluster):
                cluster.append(i)
                break
        else:
            clusters.append([i])
    return clusters
