#
# This example solves the nonconvex quadratically
# constrained quadratic program
#
#   min  x1^2 - 4*x1*x2 + x2^2
#   s.t. x1^2 + x2^2 <= 8
#        -3 <= x1, x2 <= 3
#
# Nodes are lower bounded by minimizing the alpha-shifted
# convex underestimator of the objective subject to the
# alpha-shifted constraints, and upper bounded with a local
# solve of the original problem. The optimal value is -8,
# attained at (2, 2) and (-2, -2).
#
# Recommended usage:
#
# $ python qcqp_alpha_bb.py --absolute-tolerance=1e-4
#

import spatialbnb

def create_problem():
    objective = spatialbnb.QuadraticForm([[1.0, -2.0],
                                          [-2.0, 1.0]])
    disk = spatialbnb.QuadraticForm([[1.0, 0.0],
                                     [0.0, 1.0]],
                                    d=-8.0)
    return spatialbnb.QCQPProblem(objective,
                                  constraints=[disk])

if __name__ == "__main__":
    import spatialbnb.misc

    root_box = spatialbnb.Box([-3.0, -3.0],
                              [3.0, 3.0])
    extensions = spatialbnb.AlphaBBExtensions(create_problem())
    spatialbnb.misc.create_command_line_solver(extensions, root_box)
