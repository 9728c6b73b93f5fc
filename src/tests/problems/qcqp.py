import spatialbnb

qcqp_optimal_points = ((2.0, 2.0), (-2.0, -2.0))

def create_qcqp(sense=spatialbnb.minimize):
    """x1^2 - 4*x1*x2 + x2^2 subject to x1^2 + x2^2 <= 8.
    Its minimum (-8) is attained at (2, 2) and (-2, -2)."""
    objective = spatialbnb.QuadraticForm([[1.0, -2.0],
                                          [-2.0, 1.0]])
    disk = spatialbnb.QuadraticForm([[1.0, 0.0],
                                     [0.0, 1.0]],
                                    d=-8.0)
    return spatialbnb.QCQPProblem(objective,
                                  constraints=[disk],
                                  sense=sense)
