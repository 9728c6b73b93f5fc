#
# This example minimizes the quasiconvex ratio
#
#   f(x) = (x1^2 + 1) / x2
#
# over [-1,1]x[1,3] by bisection on a threshold t. The
# sublevel set {x : f(x) <= t} is described by the convex
# function g(x, t) = x1^2 + 1 - t*x2 (x2 > 0), and the search
# box carries t as a trailing auxiliary coordinate whose
# initial interval [0, 2] brackets the optimal value. The
# optimal value is 1/3, attained at (0, 3).
#
# Recommended usage:
#
# $ python quasiconvex_bisection.py
#

import argparse

import spatialbnb

class Ratio(spatialbnb.Problem):

    def sense(self):
        return spatialbnb.minimize

    def objective(self, x):
        return (x[0]**2 + 1.0)/x[1]

    def sublevel_function(self, x, t):
        return x[0]**2 + 1.0 - t*x[1]

if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Quasiconvex minimization by bisection")
    parser.add_argument(
        "--threshold-tolerance", type=float, default=1e-6,
        help="The threshold interval width at which bisection stops.")
    parser.add_argument(
        "--results-filename", type=str, default=None,
        help=("When set, saves the solver results into a "
              "YAML-formatted file with the given name."))
    args = parser.parse_args()

    # the last coordinate is the threshold
    root_box = spatialbnb.Box([-1.0, 1.0, 0.0],
                              [1.0, 3.0, 2.0])
    extensions = spatialbnb.QuasiconvexBisection(
        Ratio(),
        threshold_tolerance=args.threshold_tolerance)
    results = spatialbnb.solve(root_box,
                               extensions,
                               absolute_tolerance=1e-5,
                               relative_tolerance=None,
                               results_filename=args.results_filename)
