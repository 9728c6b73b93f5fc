"""
Progress output for a branch-and-bound search.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
import logging

from spatialbnb.common import inf
from spatialbnb.misc import get_gap_labels

class StatusPrinter(object):
    """Logs status information about the search as a table
    with one line per report.

    Parameters
    ----------
    state : :class:`SearchState <spatialbnb.state.SearchState>`
        The search state that will be monitored.
    log : :class:`logging.Logger`
        A log object where solver output should be sent.
    output_iterations : int, optional
        The number of iterations between table
        lines. A line is also written whenever a new
        incumbent is found. (default: 1000)
    """

    def __init__(self,
                 state,
                 log,
                 output_iterations=1000):
        assert output_iterations > 0
        self._state = state
        self._log = log
        self._output_iterations = output_iterations

        percent_relative_gap_tol = 1e-6
        if (state.relative_tolerance is not None) and \
           state.relative_tolerance != 0:
            percent_relative_gap_tol = 100.0 * \
                state.relative_tolerance
        rgap_str_length, rgap_label_str, rgap_number_str = \
            get_gap_labels(percent_relative_gap_tol, key="rgap")

        absolute_gap_tol = 1e-8
        if state.absolute_tolerance != 0:
            absolute_gap_tol = state.absolute_tolerance
        agap_str_length, agap_label_str, agap_number_str = \
            get_gap_labels(absolute_gap_tol, key="agap", format='g')

        assert rgap_str_length >= 10
        assert agap_str_length >= 10
        extra_space = (rgap_str_length-10) + (agap_str_length-10)
        extra_space_left = extra_space // 2
        extra_space_right = (extra_space // 2) + (extra_space % 2)
        self._lines = ("--------------------"
                       "--------------------"
                       "--------------------"
                       "--------------------"
                       "--------------------"
                       "---")+("-"*extra_space)
        self._initial_header_line = \
            (self._lines + "\n"
             "         Nodes        |" + \
             (" "*extra_space_left) + \
             "                   Objective Bounds                    " + \
             (" "*extra_space_right) + \
             "|         Work         ")
        self._header_line = \
            (" {explored:>9} {open:>9}  |{objective:>15} "
             "{bound:>15} "+rgap_label_str+"  "+agap_label_str+" |{runtime:>9} {rate:>10}").\
             format(explored="Expl",
                    open="Open",
                    objective="Incumbent",
                    bound="Bound",
                    runtime="Time (s)",
                    rgap="Rel. Gap",
                    agap="Abs. Gap",
                    rate="Nodes/Sec")
        self._line_template = \
            ("{tag:>1}{explored:>9d} {open:>9d}  |{objective:>15.7g} "
             "{bound:>15.7g} "+rgap_number_str+"% "+agap_number_str+" |{runtime:>9.1f} {rate:>10.2f}")
        self._line_template_big_gap = \
            ("{tag:>1}{explored:>9d} {open:>9d}  |{objective:>15.7g} "
             "{bound:>15.7g} "+rgap_label_str+"% "+agap_number_str+" |{runtime:>9.1f} {rate:>10.2f}")

        self._last_print_time = None
        self._last_print_iteration = None
        self._last_explored_nodes_count = 0
        self._smoothing = 0.95
        self._avg_time_per_node = None
        self._print_count = 0
        self._new_objective = False

    def log_info(self, msg):
        """Pass a message to ``log.info``"""
        self._log.info(msg)

    def log_warning(self, msg):
        """Pass a message to ``log.warning``"""
        self._log.warning(msg)

    def log_debug(self, msg):
        """Pass a message to ``log.debug``"""
        self._log.debug(msg)

    def new_objective(self):
        """Indicate that a new incumbent has been found. The
        next call to `tic` will write a line."""
        self._new_objective = True

    def tic(self, force=False):
        """Provide an opportunity to log output if certain
        criteria are met.

        Parameters
        ----------
        force : bool, optional
            Indicate whether or not to force logging of
            output, even if logging criteria are not
            met. (default: False)
        """
        if not self._log.isEnabledFor(logging.INFO):
            return
        state = self._state
        iteration = state.iteration_count
        new_objective = self._new_objective
        if not force:
            if not new_objective:
                if (self._last_print_iteration is not None) and \
                   (iteration - self._last_print_iteration <
                    self._output_iterations):
                    return
        self._new_objective = False
        current_time = state.clock()
        explored_nodes_count = iteration
        if self._last_print_time is not None:
            delta_t = current_time - self._last_print_time
            delta_n = explored_nodes_count - \
                      self._last_explored_nodes_count
            if delta_t and delta_n:
                if self._avg_time_per_node is None:
                    self._avg_time_per_node = delta_t / float(delta_n)
                else:
                    self._avg_time_per_node = \
                        self._smoothing * delta_t / float(delta_n) + \
                        (1 - self._smoothing) * self._avg_time_per_node
        if self._avg_time_per_node:
            rate = 1.0/self._avg_time_per_node
        else:
            rate = 0.0

        tag = '' if (not new_objective) else '*'
        bound = state.to_user_objective(state.global_lower_bound)
        objective = state.to_user_objective(state.incumbent_value)
        agap = state.absolute_gap()
        rgap = state.relative_gap()
        rgap *= 100.0
        if (self._print_count % 5) == 0:
            if self._print_count == 0:
                self._log.info(self._initial_header_line)
            self._log.info(self._header_line)

        if (rgap == inf) or \
           (rgap > 9999.0):
            self._log.info(self._line_template_big_gap.format(
                tag=tag,
                explored=explored_nodes_count,
                open=state.store_size,
                objective=objective,
                bound=bound,
                rgap="9999+" if (rgap != inf) else "inf",
                agap=agap,
                runtime=current_time-state.start_time,
                rate=rate))
        else:
            self._log.info(self._line_template.format(
                tag=tag,
                explored=explored_nodes_count,
                open=state.store_size,
                objective=objective,
                bound=bound,
                rgap=rgap,
                agap=agap,
                runtime=current_time-state.start_time,
                rate=rate))
        self._last_explored_nodes_count = explored_nodes_count
        self._last_print_iteration = iteration
        self._print_count += 1
        self._last_print_time = current_time
