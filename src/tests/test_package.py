import spatialbnb

class Test(object):

    def test_version(self):
        assert isinstance(spatialbnb.__version__, str)
        assert spatialbnb.__version__.count(".") == 2

    def test_exports(self):
        for name in ("Box",
                     "Node",
                     "Configuration",
                     "ConfigurationError",
                     "ExtensionPoints",
                     "LocalSearchExtensions",
                     "AlphaBBExtensions",
                     "QuasiconvexBisection",
                     "BoundResult",
                     "QuadraticForm",
                     "Problem",
                     "QCQPProblem",
                     "SearchState",
                     "IncumbentTracker",
                     "SolverResults",
                     "GlobalOptimizer",
                     "solve"):
            assert hasattr(spatialbnb, name)
        assert spatialbnb.minimize == 1
        assert spatialbnb.maximize == -1
