"""
Spatial branch-and-bound driver implementation.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""

import sys
import io
import time
import numbers
import logging

from spatialbnb.common import (minimize,
                               maximize,
                               inf,
                               Feasibility,
                               EndState,
                               SolutionStatus)
from spatialbnb.misc import (InterruptHandler,
                             time_format,
                             as_stream,
                             get_simple_logger)
from spatialbnb.box import (Box,
                            default_branch_mask)
from spatialbnb.node import Node
from spatialbnb.priority_queue import NodeStoreFactory
from spatialbnb.configuration import (Configuration,
                                      ConfigurationError)
from spatialbnb.relaxations import BoundResult
from spatialbnb.state import SearchState
from spatialbnb.status_printer import StatusPrinter
from spatialbnb.solver_results import SolverResults

logger = logging.getLogger("spatialbnb")

class _notset(object):
    pass

_verbosity_levels = {0: logging.WARNING,
                     1: logging.INFO,
                     2: logging.DEBUG}

def _default_log(verbosity, filename=None):
    return get_simple_logger(filename=filename,
                             console=(verbosity > 0),
                             level=_verbosity_levels[verbosity])

class _SolveInfo(object):
    """Per-phase timing and call counts collected during a
    search."""
    _phases = ("preprocess",
               "lower_bound",
               "upper_bound",
               "postprocess",
               "branch")
    __slots__ = ("explored_nodes_count",
                 "_time",
                 "_count")

    def __init__(self):
        self.reset()

    def reset(self):
        """Resets all statistics to zero."""
        self.explored_nodes_count = 0
        self._time = dict((phase, 0.0) for phase in self._phases)
        self._count = dict((phase, 0) for phase in self._phases)

    def increment(self, phase, time_, count=1):
        self._time[phase] += time_
        self._count[phase] += count

    def total_time(self, phase):
        return self._time[phase]

    def call_count(self, phase):
        return self._count[phase]

class GlobalOptimizer(object):
    """A spatial branch-and-bound optimizer.

    A single node is processed end-to-end per iteration:
    it is pruned by bound, filtered by `preprocess`,
    bounded from below and above, post-processed, and then
    converged, repeated, split into two children, or
    accepted as a leaf. The optimizer is the only writer of
    the node store and the :class:`SearchState
    <spatialbnb.state.SearchState>`.

    Parameters
    ----------
    clock : function, optional
        The function used to read wall-clock
        time. (default: ``time.time``)
    """

    def __init__(self, clock=time.time):
        self._clock = clock
        self._solve_info = _SolveInfo()
        self._wall_time = 0.0
        self._state = None
        self._log = None

    @property
    def state(self):
        """The :class:`SearchState
        <spatialbnb.state.SearchState>` of the most recent
        search (None before the first search)."""
        return self._state

    def _timed(self, phase, func, *args):
        start = self._clock()
        try:
            return func(*args)
        finally:
            self._solve_info.increment(phase, self._clock()-start)

    def _record_terminal_bound(self, state, node):
        if node.lower_objective < state.worst_terminal_bound:
            state.worst_terminal_bound = node.lower_objective

    def _check_update_incumbent(self,
                                extensions,
                                printer,
                                store,
                                state,
                                node,
                                result):
        objective = result.objective
        if objective is None:
            raise ValueError("A feasible upper bound result "
                             "must include an objective")
        if objective < node.upper_objective:
            node.upper_objective = objective
            node.upper_solution = result.solution
        if node.lower_objective > node.upper_objective:
            printer.log_debug("Node %s: the upper bound (%.7g) is "
                              "below the lower bound (%.7g)"
                              % (node.id,
                                 node.upper_objective,
                                 node.lower_objective))
            node.lower_objective = node.upper_objective
        if not state.incumbent.update(objective,
                                      result.solution,
                                      node_id=node.id):
            return False
        printer.new_objective()
        extensions.notify_new_incumbent(node, state)
        if objective == -inf:
            return True
        # discard stored nodes that can no longer improve
        # on the new incumbent
        checker = state.convergence_checker
        removed = store.filter(
            lambda n: not checker.can_prune(n.lower_objective,
                                            objective))
        for n in removed:
            self._record_terminal_bound(state, n)
        state.store_size = store.size()
        return True

    def _update_global_bound(self, state, store):
        bound = store.bound()
        if bound is None:
            bound = inf
        bound = min(bound,
                    state.worst_terminal_bound,
                    state.incumbent.value)
        if state.convergence_checker.bound_worsened(
                bound, state.global_lower_bound):
            logger.debug("Global bound worsened from %r to %r. "
                         "Keeping the previous value."
                         % (state.global_lower_bound, bound))
        else:
            state.global_lower_bound = max(bound,
                                           state.global_lower_bound)

    def _branch(self, extensions, store, state, node):
        index = extensions.branch_select(node, state)
        if index is None:
            return False
        if isinstance(index, bool) or \
           (not isinstance(index, numbers.Integral)) or \
           (not (0 <= index < len(node.box))):
            raise ValueError("branch_select returned an invalid "
                             "coordinate index: %r" % (index,))
        index = int(index)
        fraction = extensions.branch_fraction(node, index, state)
        for box in node.box.split(index, fraction):
            child = node.new_child(box)
            child.id = state.node_count
            state.node_count += 1
            store.put(child)
        return True

    def _process_node(self, extensions, printer, store, state, node):
        checker = state.convergence_checker
        # prune by bound
        if checker.can_prune(node.lower_objective,
                             state.incumbent.value):
            self._record_terminal_bound(state, node)
            return None

        if not self._timed("preprocess",
                           extensions.preprocess,
                           node, state):
            printer.log_debug("Node %s: discarded by preprocess"
                              % (node.id))
            return None

        result = self._timed("lower_bound",
                             extensions.lower_bound,
                             node, state)
        if not isinstance(result, BoundResult):
            raise TypeError("lower_bound must return a BoundResult "
                            "(got %s)" % (type(result).__name__))
        if result.feasibility == Feasibility.infeasible:
            printer.log_debug("Node %s: lower bound infeasible"
                              % (node.id))
            return None
        elif result.feasibility == Feasibility.solver_failure:
            logger.warning("Lower bound failed on node %s. Keeping "
                           "the inherited bound %r."
                           % (node.id, node.lower_objective))
        else:
            if result.objective is None:
                raise ValueError("A feasible lower bound result "
                                 "must include an objective")
            if result.objective > node.lower_objective:
                node.lower_objective = result.objective
            if result.solution is not None:
                node.lower_solution = result.solution
        if checker.can_prune(node.lower_objective,
                             state.incumbent.value):
            self._record_terminal_bound(state, node)
            return None

        result = self._timed("upper_bound",
                             extensions.upper_bound,
                             node, state)
        if not isinstance(result, BoundResult):
            raise TypeError("upper_bound must return a BoundResult "
                            "(got %s)" % (type(result).__name__))
        if result.is_feasible:
            self._check_update_incumbent(extensions,
                                         printer,
                                         store,
                                         state,
                                         node,
                                         result)
            if state.incumbent.value == -inf:
                return EndState.unbounded

        if not self._timed("postprocess",
                           extensions.postprocess,
                           node, state):
            printer.log_debug("Node %s: discarded by postprocess"
                              % (node.id))
            return None
        if checker.can_prune(node.lower_objective,
                             state.incumbent.value):
            self._record_terminal_bound(state, node)
            return None

        if extensions.convergence_check(node, state):
            printer.log_debug("Node %s: converged (lower=%.7g, "
                              "upper=%.7g)"
                              % (node.id,
                                 node.lower_objective,
                                 node.upper_objective))
            self._record_terminal_bound(state, node)
            return None

        if extensions.repeat_check(node, state):
            node.repeat_count += 1
            store.put(node)
            return None

        if not self._timed("branch",
                           self._branch,
                           extensions, store, state, node):
            printer.log_debug("Node %s: accepted as a leaf"
                              % (node.id))
            self._record_terminal_bound(state, node)
        return None

    def _search(self, extensions, printer, store, state):
        while (1):
            if store.size() == 0:
                self._update_global_bound(state, store)
                if state.incumbent.is_finite:
                    return EndState.optimal
                return EndState.infeasible
            node = store.get()
            state.store_size = store.size()
            state.iteration_count += 1
            self._solve_info.explored_nodes_count += 1
            end_state = self._process_node(extensions,
                                           printer,
                                           store,
                                           state,
                                           node)
            state.store_size = store.size()
            self._update_global_bound(state, store)
            extensions.notify_iteration_finished(state)
            printer.tic()
            if end_state is not None:
                return end_state
            end_state = extensions.termination_check(state)
            if (end_state is None) and state.interrupted:
                end_state = EndState.interrupted
            if end_state is not None:
                return EndState(end_state)

    def _fill_results(self, results, state):
        checker = state.convergence_checker
        results.end_state = state.end_state.value
        results.objective = state.to_user_objective(
            state.incumbent.value)
        results.bound = state.to_user_objective(
            state.global_lower_bound)
        solution = state.user_solution(state.incumbent.point)
        if solution is not None:
            solution = solution.tolist()
        results.solution = solution
        results.iterations = state.iteration_count
        results.nodes = state.node_count
        if state.incumbent.value == -inf:
            results.solution_status = SolutionStatus.unbounded
        elif state.incumbent.is_finite:
            if checker.objective_is_optimal(state.incumbent.value,
                                            state.global_lower_bound):
                results.solution_status = SolutionStatus.optimal
            else:
                results.solution_status = SolutionStatus.feasible
            results.absolute_gap = state.absolute_gap()
            results.relative_gap = state.relative_gap()
        elif state.global_lower_bound == inf:
            results.solution_status = SolutionStatus.infeasible
        else:
            results.solution_status = SolutionStatus.unknown
        results.solution_status = results.solution_status.value

    def _log_non_default_options(self, config, log):
        defaults = Configuration(use_environment=False).to_dict()
        changed = False
        for key, val in sorted(config.to_dict().items()):
            if val != defaults[key]:
                if not changed:
                    log.info("Using non-default solver options:")
                changed = True
                log.info(" - %s: %s (default: %s)"
                         % (key, val, defaults[key]))
        if changed:
            log.info("")

    def collect_solve_statistics(self):
        """Collect statistics about the most recent search.

        Returns
        -------
        dict
            A dictionary mapping statistic names to values.
        """
        info = self._solve_info
        stats = {}
        stats['wall_time'] = self._wall_time
        stats['explored_nodes_count'] = info.explored_nodes_count
        for phase in _SolveInfo._phases:
            stats[phase+'_time'] = info.total_time(phase)
            stats[phase+'_call_count'] = info.call_count(phase)
        return stats

    def solve(self,
              root_box,
              extensions,
              config=None,
              log=_notset,
              disable_signal_handlers=False,
              **options):
        """Search for a global minimizer over the root box.

        Parameters
        ----------
        root_box : :class:`Box <spatialbnb.box.Box>`
            The box of the root node. Its trailing
            `extensions.auxiliary_count` coordinates are
            auxiliary.
        extensions : :class:`ExtensionPoints <spatialbnb.extensions.ExtensionPoints>`
            The hooks called for each node.
        config : :class:`Configuration <spatialbnb.configuration.Configuration>`, optional
            The options for the search. A copy is made before
            keyword overrides are applied. (default: None)
        log : ``logging.Logger``, optional
            A log object where solver output should be
            sent. The default value causes all output to be
            streamed to the console at the level selected by
            the `verbosity` option. Setting to None disables
            all output.
        disable_signal_handlers : bool, optional
            Setting to true disables the SIGINT and SIGUSR1
            handlers that stop the search cooperatively.
            (default: False)
        **options
            Overrides for any :class:`Configuration
            <spatialbnb.configuration.Configuration>` option.

        Returns
        -------
        results : :class:`SolverResults <spatialbnb.solver_results.SolverResults>`
            An object storing information about the search.

        Raises
        ------
        ConfigurationError
            If the options are invalid. Raised before any
            hook is called.
        """
        if not isinstance(root_box, Box):
            raise ConfigurationError("The root box must be a Box "
                                     "(got %s)"
                                     % (type(root_box).__name__))
        if config is None:
            config = Configuration()
        else:
            config = config.copy()
        config.update(**options)
        config.validate(dimension=len(root_box))
        sense = extensions.sense()
        if sense not in (minimize, maximize):
            raise ConfigurationError("Invalid objective sense: %r"
                                     % (sense,))
        if config.branch_variable is not None:
            branch_mask = tuple(config.branch_variable)
        else:
            branch_mask = default_branch_mask(
                len(root_box),
                auxiliary_count=extensions.auxiliary_count)

        if log is _notset:
            log = _default_log(config.verbosity)
        elif log is None:
            log = get_simple_logger(console=False)
        self._log = log

        self._solve_info.reset()
        self._wall_time = 0.0
        state = SearchState(config,
                            root_box,
                            sense=sense,
                            auxiliary_count=extensions.auxiliary_count,
                            clock=self._clock)
        self._state = state
        store = NodeStoreFactory(config.queue_strategy)
        root = Node(root_box, branch_mask=branch_mask, id=0)
        state.node_count = 1
        store.put(root)
        state.store_size = store.size()
        printer = StatusPrinter(state,
                                log,
                                output_iterations=config.output_iterations)
        if not log.disabled:
            log.info("Starting branch & bound solve:")
            log.info(" - root box dimension: %d" % (len(root_box)))
            log.info(" - auxiliary variables: %d"
                     % (extensions.auxiliary_count))
            log.info(" - objective sense: %s"
                     % ("minimize" if (sense == minimize) else
                        "maximize"))
            log.info("")
            self._log_non_default_options(config, log)

        def handler(signum, frame):                   #pragma:nocover
            state.interrupted = True
            printer.log_warning(
                "Solve interrupted by user. Waiting for the "
                "current node to finish before terminating "
                "the search.")
        try:
            with InterruptHandler(handler,
                                  disable=disable_signal_handlers):
                extensions.notify_solve_begins(state)
                state.end_state = self._search(extensions,
                                               printer,
                                               store,
                                               state)
        finally:
            self._wall_time = self._clock() - state.start_time
        printer.tic(force=True)

        results = SolverResults()
        self._fill_results(results, state)
        results.wall_time = self._wall_time
        extensions.notify_solve_finished(state, results)

        if not log.disabled:
            log.info("")
            if results.solution_status in ("feasible", "optimal"):
                checker = state.convergence_checker
                if results.solution_status == "feasible":
                    log.info("Feasible solution found")
                else:
                    if results.absolute_gap <= \
                       checker.absolute_tolerance:
                        log.info("Absolute optimality tolerance met")
                    if (checker.relative_tolerance is not None) and \
                       (results.relative_gap <=
                        checker.relative_tolerance):
                        log.info("Relative optimality tolerance met")
                    log.info("Optimal solution found!")
            elif results.solution_status == "infeasible":
                log.info("Problem is infeasible")
            elif results.solution_status == "unbounded":
                log.info("Problem is unbounded")
            else:
                assert results.solution_status == "unknown"
                log.info("Status unknown")
            log.info("")
            log.info(str(results))

        return results

def _avg(total, count):
    if count == 0:
        return 0.0
    return total/float(count)

def summarize_solve_statistics(stats, stream=sys.stdout):
    """Writes a summary of search statistics to an output
    stream.

    Parameters
    ----------
    stats : dict
        A dictionary of statistics returned from a call to
        :func:`GlobalOptimizer.collect_solve_statistics`.
    stream : file-like object, or string, optional
        A file-like object or a filename where results
        should be written to. (default: ``sys.stdout``)
    """
    wall_time = stats['wall_time']
    phases = _SolveInfo._phases
    counts = [stats[phase+'_call_count'] for phase in phases]
    count_str_length = len("%d" % (max(counts)))
    tmp = "%"+str(count_str_length)+"d"
    with as_stream(stream) as stream:
        stream.write("Explored Nodes: %d\n"
                     % (stats['explored_nodes_count']))
        stream.write("Average Timing:\n")
        other_time = wall_time
        for phase in phases:
            phase_time = stats[phase+'_time']
            phase_count = stats[phase+'_call_count']
            other_time -= phase_time
            stream.write(" - %-12s%6.2f%% [avg time: %8s, count: %s]\n"
                         % (phase+":",
                            (phase_time/wall_time*100.0)
                            if wall_time else 0.0,
                            time_format(_avg(phase_time, phase_count),
                                        align_unit=True),
                            tmp % (phase_count)))
        stream.write(" - %-12s%6.2f%%\n"
                     % ("other:",
                        (max(other_time, 0.0)/wall_time*100.0)
                        if wall_time else 0.0))

def solve(root_box,
          extensions,
          config=None,
          log_filename=None,
          results_filename=None,
          **kwds):
    """Solves a spatial branch-and-bound problem and returns
    the results.

    Note
    ----
    This function also collects and summarizes per-phase
    timing statistics. This can be avoided by directly
    instantiating a :class:`GlobalOptimizer` object and
    calling the :func:`GlobalOptimizer.solve` method.

    Parameters
    ----------
    root_box : :class:`Box <spatialbnb.box.Box>`
        The box of the root node.
    extensions : :class:`ExtensionPoints <spatialbnb.extensions.ExtensionPoints>`
        The hooks called for each node.
    config : :class:`Configuration <spatialbnb.configuration.Configuration>`, optional
        The options for the search. (default: None)
    log_filename : string, optional
        A filename where solver output should be sent in
        addition to console. This keyword will be ignored if
        the `log` keyword is set. (default: None)
    results_filename : string, optional
        Saves the solver results into a YAML-formatted file
        with the given name. (default: None)
    **kwds
        Additional keywords to be passed to
        :func:`GlobalOptimizer.solve`. See that method for
        additional keyword documentation.

    Returns
    -------
    results : :class:`SolverResults <spatialbnb.solver_results.SolverResults>`
        An object storing information about the search.
    """
    opt = GlobalOptimizer()

    if ("log" not in kwds) and \
       (log_filename is not None):
        if "verbosity" in kwds:
            verbosity = kwds["verbosity"]
        elif config is not None:
            verbosity = config.verbosity
        else:
            verbosity = Configuration().verbosity
        if verbosity not in _verbosity_levels:
            raise ConfigurationError("The 'verbosity' option must be "
                                     "0, 1, or 2 (got %r)."
                                     % (verbosity,))
        kwds["log"] = _default_log(verbosity,
                                   filename=log_filename)

    results = opt.solve(root_box, extensions, config=config, **kwds)

    stats = opt.collect_solve_statistics()
    if not opt._log.disabled:
        tmp = io.StringIO()
        summarize_solve_statistics(stats, stream=tmp)
        opt._log.info(tmp.getvalue())

    if results_filename is not None:
        results.write(results_filename)

    return results
