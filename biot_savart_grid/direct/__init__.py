"""Direct summation of the Biot-Savart law over a rectilinear current grid.

Every grid node is both a source and an evaluation point, so the cost is
quadratic in the number of nodes. The inner sum for each evaluation point
runs in a fixed order, making the result independent of how the points are
distributed among threads.
"""
