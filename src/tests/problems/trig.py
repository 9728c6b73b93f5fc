import spatialbnb
from spatialbnb.interval import (sin,
                                 cos)

class Trig(spatialbnb.Problem):
    """sin(x1)*x2^2 - cos(x3)/x4, which attains -1.5 over
    [-10,10]x[-1,1]x[-10,10]x[2,20]"""

    root_box = spatialbnb.Box([-10.0, -1.0, -10.0, 2.0],
                              [10.0, 1.0, 10.0, 20.0])

    def sense(self):
        return spatialbnb.minimize

    def objective(self, x):
        return sin(x[0])*x[1]**2 - cos(x[2])/x[3]
