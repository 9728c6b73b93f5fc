"""
Branch-and-bound solver results object.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
import sys
import io

import numpy

from spatialbnb.common import (SolutionStatus,
                               EndState)
from spatialbnb.misc import (time_format,
                             as_stream)

def _yaml_repr(val):
    if isinstance(val, (float, numpy.floating)):
        val_ = "%r" % (float(val))
        if val_ == 'inf':
            val_ = '.inf'
        elif val_ == '-inf':
            val_ = "-.inf"
        elif val_ == 'nan':
            val_ = ".nan"
        elif ('e' in val_) and ('.' not in val_):
            # YAML 1.1 floats require a decimal point
            mantissa, exponent = val_.split('e')
            val_ = mantissa + ".0e" + exponent
        return val_
    elif isinstance(val, (list, tuple, numpy.ndarray)):
        return "[" + ", ".join(_yaml_repr(v) for v in val) + "]"
    return "%r" % (val)

class SolverResults(object):
    """Stores the results of a branch-and-bound search.

    Attributes
    ----------
    end_state : string
        The end state of the search, set to one of the
        strings documented by the :class:`EndState
        <spatialbnb.common.EndState>` enum.
    solution_status : string
        The solution status, set to one of the strings
        documented by the :class:`SolutionStatus
        <spatialbnb.common.SolutionStatus>` enum.
    objective : float
        The best objective found, in the problem's own
        sense.
    bound : float
        The global optimality bound, in the problem's own
        sense.
    absolute_gap : float or None
        The absolute gap between the objective and
        bound. This will only be set when the solution
        status is "optimal" or "feasible"; otherwise, it
        will be None.
    relative_gap : float or None
        The relative gap between the objective and
        bound. This will only be set when the solution
        status is "optimal" or "feasible"; otherwise, it
        will be None.
    solution : list of float or None
        The user coordinates of the incumbent point.
    iterations : int
        The number of nodes popped from the node store.
    nodes : int
        The number of nodes created.
    wall_time : float
        The wall time of the search (seconds).
    """

    def __init__(self):
        self.end_state = None
        self.solution_status = None
        self.objective = None
        self.bound = None
        self.absolute_gap = None
        self.relative_gap = None
        self.solution = None
        self.iterations = None
        self.nodes = None
        self.wall_time = None

    def pprint(self, stream=sys.stdout):
        """Prints a nicely formatted representation of the
        results.

        Parameters
        ----------
        stream : file-like object or string, optional
            A file-like object or a filename where results
            should be written to. (default: ``sys.stdout``)
        """
        with as_stream(stream) as stream:
            stream.write("solver results:\n")
            self.write(stream, prefix=" - ", pretty=True)

    def write(self, stream, prefix="", pretty=False):
        """Writes results in YAML format to a stream or
        file. Changing the parameter values from their
        defaults may result in the output becoming
        non-compatible with the YAML format.

        Parameters
        ----------
        stream : file-like object or string
            A file-like object or a filename where results
            should be written to.
        prefix : string, optional
            A string to use as a prefix for each line that
            is written. (default: '')
        pretty : bool, optional
            Indicates whether or not certain recognized
            attributes should be formatted for more
            human-readable output. (default: False)

        Example
        -------

        >>> import io
        >>> import yaml
        >>> import spatialbnb
        >>> results = spatialbnb.SolverResults()
        >>> results.objective = 123.0
        >>> results.solution = [1.0, 2.0]
        >>> out = io.StringIO()
        >>> results.write(out)
        >>> results_dict = yaml.safe_load(out.getvalue())
        >>> assert results_dict['objective'] == 123
        >>> assert results_dict['solution'] == [1.0, 2.0]

        """
        with as_stream(stream) as stream:
            attrs = vars(self)
            names = sorted(list(attrs.keys()))
            first = ('end_state', 'solution_status',
                     'objective', 'bound',
                     'absolute_gap', 'relative_gap',
                     'solution', 'iterations',
                     'nodes', 'wall_time')
            for name in first:
                if not hasattr(self, name):
                    continue
                names.remove(name)
                val = getattr(self, name)
                if val is not None:
                    if name in ("end_state",
                                "solution_status"):
                        if type(val) in (SolutionStatus,
                                         EndState):
                            val = val.value
                    elif pretty:
                        if name == 'wall_time':
                            val = time_format(val,
                                              digits=2)
                        elif name in ('objective',
                                      'bound',
                                      'absolute_gap',
                                      'relative_gap'):
                            val = "%.7g" % (val)
                        elif name == 'solution':
                            val = "[" + ", ".join("%.7g" % (v)
                                                  for v in val) + "]"
                    else:
                        val = _yaml_repr(val)
                if pretty or (val is not None):
                    stream.write(prefix+'%s: %s\n'
                                 % (name, val))
                else:
                    assert val is None
                    stream.write(prefix+'%s: null\n'
                                 % (name))
            for name in names:
                val = getattr(self, name)
                if pretty:
                    stream.write(prefix+'%s: %r\n'
                                 % (name, val))
                else:
                    if val is None:
                        stream.write(prefix+'%s: null\n'
                                     % (name))
                    else:
                        stream.write(prefix+'%s: %s\n'
                                     % (name, _yaml_repr(val)))

    def __str__(self):
        """Represents the results as a string."""
        tmp = io.StringIO()
        self.pprint(stream=tmp)
        return tmp.getvalue()
