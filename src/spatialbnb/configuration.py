"""
Configuration settings for a branch-and-bound search.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
import os
import math
import numbers
import platform

import yaml

from spatialbnb import __version__
from spatialbnb.common import QueueStrategy
from spatialbnb.misc import as_stream

class ConfigurationError(ValueError):
    """Raised when a search is configured with invalid
    options. Always raised before the search loop
    starts."""

_false_strings = ("0",
                  "off","Off","OFF",
                  "no","No","NO",
                  "false","False","FALSE")
_true_strings = ("1",
                 "on","On","ON",
                 "yes","Yes","YES",
                 "true","True","TRUE")
_none_strings = ("none","None","NONE","null")

class Configuration(object):
    """The options that control a search.

    Attributes
    ----------
    absolute_tolerance : float
        The search terminates with an optimal end state once
        the difference between the incumbent and the global
        lower bound is at most this value. Also used as the
        margin when pruning nodes by bound.
        (default: 1e-3)
    relative_tolerance : float or None
        The search terminates with an optimal end state once
        the absolute gap divided by
        `max{|incumbent|, eps}` is at most this value. None
        disables the check. (default: 1e-3)
    iteration_limit : int or None
        The maximum number of nodes popped from the node
        store. (default: None)
    node_limit : int or None
        The maximum number of nodes created (root included).
        (default: None)
    time_limit : float or None
        The wall-clock limit (seconds). Checked once per
        iteration. (default: None)
    branch_variable : sequence of bool or None
        An explicit branch-eligibility mask overriding the
        default mask. (default: None)
    minimum_box_width : float
        Coordinates narrower than this are not split. A node
        with no splittable coordinate is accepted as a leaf.
        (default: 1e-9)
    branch_fraction : float
        The fraction of the selected coordinate's width at
        which the default branching rule splits.
        (default: 0.5)
    feasibility_tolerance : float
        The absolute violation allowed when checking point
        constraints. (default: 1e-6)
    queue_strategy : str
        The node store ordering. See :class:`QueueStrategy
        <spatialbnb.common.QueueStrategy>`. (default: "bound")
    verbosity : int
        0 disables output, 1 prints the progress table and
        summary, 2 adds per-node debug messages.
        (default: 1)
    output_iterations : int
        The number of iterations between progress table
        lines. (default: 1000)
    local_solver_maxiter : int
        The iteration limit passed to the local solver used
        by the bounding procedures. (default: 200)
    """
    __slots__ = ("absolute_tolerance",
                 "relative_tolerance",
                 "iteration_limit",
                 "node_limit",
                 "time_limit",
                 "branch_variable",
                 "minimum_box_width",
                 "branch_fraction",
                 "feasibility_tolerance",
                 "queue_strategy",
                 "verbosity",
                 "output_iterations",
                 "local_solver_maxiter")

    _types = {"absolute_tolerance": float,
              "relative_tolerance": float,
              "iteration_limit": int,
              "node_limit": int,
              "time_limit": float,
              "branch_variable": None,
              "minimum_box_width": float,
              "branch_fraction": float,
              "feasibility_tolerance": float,
              "queue_strategy": str,
              "verbosity": int,
              "output_iterations": int,
              "local_solver_maxiter": int}

    def __init__(self, use_environment=True, **kwds):
        self.reset(use_environment=use_environment)
        self.update(**kwds)

    def reset(self, use_environment=True):
        """Reset the configuration to default settings.

        Parameters
        ----------
        use_environment : bool, optional
            Controls whether or not to check for environment
            variables to overwrite the default
            settings. (default: True)
        """
        self.absolute_tolerance = 1e-3
        self.relative_tolerance = 1e-3
        self.iteration_limit = None
        self.node_limit = None
        self.time_limit = None
        self.branch_variable = None
        self.minimum_box_width = 1e-9
        self.branch_fraction = 0.5
        self.feasibility_tolerance = 1e-6
        self.queue_strategy = QueueStrategy.bound.value
        self.verbosity = 1
        self.output_iterations = 1000
        self.local_solver_maxiter = 200
        if use_environment:
            # process environment variables
            prefix = "SPATIALBNB_"
            for symbol in self.__slots__:
                if prefix+symbol.upper() in os.environ:
                    value = os.environ[prefix+symbol.upper()]
                    setattr(self, symbol,
                            self._from_string(symbol, value))

    def _from_string(self, symbol, value):
        if value in _none_strings:
            return None
        if symbol == "branch_variable":
            items = [v.strip() for v in value.split(",")
                     if v.strip()]
            mask = []
            for v in items:
                if v in _true_strings:
                    mask.append(True)
                elif v in _false_strings:
                    mask.append(False)
                else:
                    raise ConfigurationError(
                        "invalid boolean value in branch "
                        "mask: %s" % (v))
            return tuple(mask)
        try:
            return self._types[symbol](value)
        except ValueError:
            raise ConfigurationError(
                "invalid value for option '%s': %s"
                % (symbol, value))

    def update(self, **kwds):
        """Assign options from keywords. Unknown option
        names raise a :class:`ConfigurationError`."""
        for key, val in kwds.items():
            if key not in self.__slots__:
                raise ConfigurationError(
                    "Unrecognized configuration option: %s"
                    % (key))
            if isinstance(val, QueueStrategy):
                val = val.value
            setattr(self, key, val)
        return self

    def copy(self):
        """Returns a copy of this configuration."""
        other = Configuration(use_environment=False)
        for key in self.__slots__:
            setattr(other, key, getattr(self, key))
        return other

    def to_dict(self):
        """Returns the options as a dictionary."""
        out = {}
        for key in self.__slots__:
            val = getattr(self, key)
            if key == "branch_variable" and (val is not None):
                val = list(val)
            out[key] = val
        return out

    @classmethod
    def load(cls, stream, use_environment=False):
        """Creates a configuration from a YAML mapping of
        option names to values.

        Parameters
        ----------
        stream : file-like object or string
            A file-like object or the name of a YAML file.
        use_environment : bool, optional
            Controls whether environment variables are
            applied before the file contents.
            (default: False)
        """
        with as_stream(stream, mode="r") as f:
            data = yaml.safe_load(f)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                "The configuration file must contain a "
                "mapping of option names to values.")
        return cls(use_environment=use_environment, **data)

    def validate(self, dimension=None):
        """Checks all options and raises a
        :class:`ConfigurationError` describing the first
        problem found.

        Parameters
        ----------
        dimension : int, optional
            When provided, the length of the
            `branch_variable` mask is checked against
            it. (default: None)
        """
        def _check_tolerance(name, allow_none):
            val = getattr(self, name)
            if val is None:
                if not allow_none:
                    raise ConfigurationError(
                        "The '%s' option can not be None."
                        % (name))
                return
            if (not isinstance(val, numbers.Real)) or \
               math.isnan(val) or math.isinf(val) or \
               (val < 0):
                raise ConfigurationError(
                    "The '%s' option must be a finite, "
                    "non-negative number (got %r)."
                    % (name, val))
        _check_tolerance("absolute_tolerance", False)
        _check_tolerance("relative_tolerance", True)
        _check_tolerance("minimum_box_width", False)
        _check_tolerance("feasibility_tolerance", False)
        for name in ("iteration_limit",
                     "node_limit",
                     "output_iterations",
                     "local_solver_maxiter"):
            val = getattr(self, name)
            if (val is None) and \
               (name in ("iteration_limit", "node_limit")):
                continue
            if isinstance(val, bool) or \
               (not isinstance(val, numbers.Integral)) or \
               (val <= 0):
                raise ConfigurationError(
                    "The '%s' option must be a positive "
                    "integer (got %r)." % (name, val))
        if self.time_limit is not None:
            if (not isinstance(self.time_limit, numbers.Real)) or \
               math.isnan(self.time_limit) or \
               (self.time_limit < 0):
                raise ConfigurationError(
                    "The 'time_limit' option must be a "
                    "non-negative number (got %r)."
                    % (self.time_limit))
        if (not isinstance(self.branch_fraction, numbers.Real)) or \
           (not (0.0 < self.branch_fraction < 1.0)):
            raise ConfigurationError(
                "The 'branch_fraction' option must lie in the "
                "open interval (0, 1) (got %r)."
                % (self.branch_fraction))
        if self.queue_strategy not in \
           [v.value for v in QueueStrategy]:
            raise ConfigurationError(
                "Invalid queue strategy: %s. Valid choices "
                "are: %s" % (self.queue_strategy,
                             [v.value for v in QueueStrategy]))
        if self.verbosity not in (0, 1, 2):
            raise ConfigurationError(
                "The 'verbosity' option must be 0, 1, or 2 "
                "(got %r)." % (self.verbosity))
        if self.branch_variable is not None:
            mask = tuple(self.branch_variable)
            if not all(isinstance(v, (bool, numbers.Integral))
                       for v in mask):
                raise ConfigurationError(
                    "The 'branch_variable' mask must contain "
                    "boolean values.")
            if (dimension is not None) and \
               (len(mask) != dimension):
                raise ConfigurationError(
                    "The 'branch_variable' mask has length %d "
                    "but the root box has dimension %d."
                    % (len(mask), dimension))

    def __str__(self):
        out =  "spatialbnb version: %s\n" % __version__
        out += ("loaded from: %s\n"
                % (os.path.dirname(__file__)))
        out += ("python version: %s %s (%s, %s)\n"
                % (platform.python_implementation(),
                   platform.python_version(),
                   platform.system(),
                   os.name))
        out += "configuration:"
        for key in self.__slots__:
            out += ("\n - %s: %s" % (key,
                                     getattr(self, key)))
        return out

if __name__ == "__main__":                        #pragma:nocover
    print(Configuration())
