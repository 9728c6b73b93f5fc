#
# This example minimizes the nonconvex function
#
#   f(x) = sin(x1)*x2^2 - cos(x3)/x4
#
# over the box [-10,10]x[-1,1]x[-10,10]x[2,20]. Nodes are
# lower bounded with the natural interval extension of the
# objective and upper bounded by evaluating the objective at
# the box midpoint (the default extension points). The
# optimal value is -1.5.
#
# Recommended usage:
#
# $ python trig_interval.py --relative-tolerance=none
#

import spatialbnb
from spatialbnb.interval import (sin,
                                 cos)

class TrigProblem(spatialbnb.Problem):

    #
    # Implement Problem abstract methods
    #

    def sense(self):
        return spatialbnb.minimize

    def objective(self, x):
        # x is either a point or a list of intervals
        return sin(x[0])*x[1]**2 - cos(x[2])/x[3]

if __name__ == "__main__":
    import spatialbnb.misc

    root_box = spatialbnb.Box([-10.0, -1.0, -10.0, 2.0],
                              [10.0, 1.0, 10.0, 20.0])
    extensions = spatialbnb.ExtensionPoints(TrigProblem())
    spatialbnb.misc.create_command_line_solver(extensions, root_box)
