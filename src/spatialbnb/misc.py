"""
Miscellaneous utilities used for development.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
import sys
import logging
import signal
import re

class InterruptHandler(object):
    """A context manager for temporarily assigning a handler
    to SIGINT and SIGUSR1, depending on the availability of
    these signals in the current OS."""
    _sigs = [signal.SIGINT]
    if hasattr(signal, 'SIGUSR1'):
        # not available on windows
        _sigs.append(signal.SIGUSR1)
    __slots__ = ("_released",
                 "_original_handlers",
                 "_handler",
                 "_disable")
    def __init__(self, handler, disable=False):
        self._released = True
        self._original_handlers = None
        self._handler = handler
        self._disable = disable

    def __enter__(self):
        if self._disable:
            return self
        self._released = False
        self._original_handlers = \
            [(signum, signal.getsignal(signum))
             for signum in self._sigs]
        def handler(signum, frame):
            self._handler(signum, frame)
            self.release()
        for signum in self._sigs:
            signal.signal(signum, handler)
        return self

    def __exit__(self, type, value, tb):
        self.release()

    def release(self):
        if not self._released:
            for signum, handler in self._original_handlers:
                signal.signal(signum, handler)
            self._released = True

def time_format(num, digits=1, align_unit=False):
    """Format and scale output according to standard time
    units.

    Example
    -------

    >>> time_format(0)
    '0.0 s'
    >>> time_format(0, align_unit=True)
    '0.0 s '
    >>> time_format(0.002)
    '2.0 ms'
    >>> time_format(2001)
    '33.4 m'
    >>> time_format(2001, digits=3)
    '33.350 m'

    """
    if num is None:
        return "<unknown>"
    unit = "s"
    if (num >= 1.0) or (num == 0.0):
        if num >= 60.0:
            num /= 60.0
            unit = "m"
            if num >= 60.0:
                num /= 60.0
                unit = "h"
                if num >= 24.0:
                    num /= 24.0
                    unit = "d"
    else:
        num *= 1000.0
        for p in ['ms','us','ns','ps','fs']:
            unit = p
            if abs(num) > 1:
                break
            num *= 1000.0
    if (len(unit) == 1) and align_unit:
        return ("%."+str(digits)+"f %s ") % (num, unit)
    else:
        return ("%."+str(digits)+"f %s") % (num, unit)

def get_gap_labels(gap,
                   key="gap",
                   format="f"):
    """Get format strings with enough size and precision to print
    a given gap tolerance."""
    gap_length = 10
    gap_digits = 0
    while gap < (10**(-gap_digits+1)):
        gap_digits += 1
        if gap_length - gap_digits < 5:
            gap_length += 1
    gap_label_str = "{"+key+":>"+str(gap_length)+"}"
    gap_number_str = "{"+key+":>"+str(gap_length)+"." + \
                     str(gap_digits)+format+"}"
    return gap_length, gap_label_str, gap_number_str

class _NullCM(object):
    """A context manager that does nothing"""
    def __init__(self, obj):
        self.obj = obj
    def __enter__(self):
        return self.obj
    def __exit__(self, *args):
        pass

def as_stream(stream,
              mode="w",
              **kwds):
    """A utility for handling function arguments that can be
    a filename or a file object. This function is meant to be
    used in the context of a with statement.

    Parameters
    ----------
    stream : file-like object or string
        An existing file-like object or the name of a file
        to open.
    mode : string
        Assigned to the mode keyword of the built-in
        function ``open`` when the `stream` argument is a
        filename. (default: "w")
    **kwds
        Additional keywords passed to the built-in function
        ``open`` when the `stream` argument is a filename.

    Returns
    -------
    file-like object
        A file-like object. If the input argument was
        originally an open file, a dummy context will wrap
        the file object so that it will not be closed upon
        exit of the with block.

    Example
    -------

    >>> import tempfile
    >>> with tempfile.NamedTemporaryFile() as f:
    ...     # pass a file
    ...     with as_stream(f) as g:
    ...         assert g is f
    ...     assert not f.closed
    ...     f.close()
    ...     # pass a filename
    ...     with as_stream(f.name) as g:
    ...         assert not g.closed
    ...     assert g.closed

    """
    if isinstance(stream, str):
        return open(stream, mode=mode, **kwds)
    else:
        return _NullCM(stream)

def get_keyword_docs(doc, section="Parameters"):
    """Parses a numpy-style docstring to summarize
    information in the given section ('Parameters' or
    'Attributes') into a dictionary."""
    lines = doc.splitlines()
    for i_start, line in enumerate(lines):
        if (line.strip() == section) and \
           (lines[i_start+1].strip() == "-"*len(section)):
            i_start = i_start + 2
            break
    else:
        raise ValueError("The docstring does not have a "
                         "'%s' section" % (section))
    for i_stop, line in enumerate(lines[i_start:],i_start):
        if i_stop <= i_start+1:
            continue
        if line.strip() == "":
            break
    else:
        i_stop = len(lines)

    args = {}
    last = None
    i = i_start
    while i != i_stop:
        if re.match(r".+ : .+(, optional)?", lines[i]):
            if last is not None:
                args[last] = args[last].strip()
            last = lines[i].split(' : ')[0].strip()
            args[last] = ""
        else:
            assert last is not None
            args[last] += (lines[i].strip() + " ")
        i += 1
    if last is not None:
        args[last] = args[last].strip()
    data = {}
    for key, val in args.items():
        data[key] = {"doc": val}
        default_ = re.search(r"\(default: .*\)",val)
        if default_ is not None:
            default_ = default_.group(0)[1:-1].split(": ", 1)
            assert len(default_) == 2
            data[key]["default"] = default_[1]
            doc_ = re.split(r"\(default: .*\)",val)
            assert len(doc_) == 2
            assert doc_[1].strip() == ""
            data[key]["doc"] = doc_[0].strip()
    return data

class _simple_stdout_filter(object):
    def filter(self, record):
        # only show WARNING or below
        return record.levelno <= logging.WARNING

class _simple_stderr_filter(object):
    def filter(self, record):
        # only show ERROR or above
        return record.levelno >= logging.ERROR

def get_simple_logger(name="spatialbnb.solve",
                      filename=None,
                      stream=None,
                      console=True,
                      level=logging.INFO,
                      formatter=None):
    """Creates a logging object configured to write to any
    combination of a file, a stream, and the console, or
    hide all output.

    Parameters
    ----------
    name : string, optional
        The name assigned to the logger. The logger is not
        registered with the logging module, so the name is
        informational. (default: "spatialbnb.solve")
    filename : string, optional
        The name of a file to write to. (default: None)
    stream : file-like object, optional
        A file-like object to write to. (default: None)
    console : bool, optional
        If True, the logger will be configured to print
        output to the console through stdout and
        stderr. (default: True)
    level : int, optional
        The logging level to use. (default: ``logging.INFO``)
    formatter: ``logging.Formatter``, optional
        The logging formatter to use. (default: None)

    Returns
    -------
    ``logging.Logger``
        A logging object
    """
    log = logging.Logger(name, level=level)
    if filename is not None:
        fh = logging.FileHandler(filename)
        fh.setLevel(level)
        log.addHandler(fh)
    if stream is not None:
        ch = logging.StreamHandler(stream)
        ch.setLevel(level)
        log.addHandler(ch)
    if console:
        cout = logging.StreamHandler(sys.stdout)
        cout.setLevel(level)
        cout.addFilter(_simple_stdout_filter())
        log.addHandler(cout)
        cerr = logging.StreamHandler(sys.stderr)
        cerr.setLevel(level)
        cerr.addFilter(_simple_stderr_filter())
        log.addHandler(cerr)
    if formatter is not None:
        for h in log.handlers:
            h.setFormatter(formatter)
    if (filename is None) and \
       (stream is None) and \
       (not console):
        log.disabled = True
    return log

def _run_command_line_solver(extensions, root_box, args):
    import spatialbnb
    if args.config is not None:
        config = spatialbnb.Configuration.load(args.config,
                                               use_environment=True)
    else:
        config = spatialbnb.Configuration()
    # options not given on the command line are absent from args
    for key in config.__slots__:
        if hasattr(args, key):
            setattr(config, key, getattr(args, key))
    return spatialbnb.solve(
        root_box,
        extensions,
        config=config,
        log_filename=args.log_filename,
        results_filename=args.results_filename,
        disable_signal_handlers=args.disable_signal_handlers)

def create_command_line_solver(extensions, root_box, parser=None):
    """Convert a given set of extension points and root box
    to a command-line example by exposing the configuration
    options using argparse."""
    import os
    import tempfile
    import argparse
    import cProfile as profile
    import pstats
    import spatialbnb
    from spatialbnb.configuration import Configuration
    if parser is None:
        parser = argparse.ArgumentParser(
            description="Run spatial branch and bound",
            formatter_class=argparse.\
                ArgumentDefaultsHelpFormatter)

    config_docs = get_keyword_docs(Configuration.__doc__,
                                   section="Attributes")
    assert set(config_docs.keys()) == \
        set(Configuration.__slots__)
    def _or_None(type_):
        def _cast(val):
            if val in ("None", "none"):
                return None
            return type_(val)
        _cast.__name__ = type_.__name__
        return _cast
    for key in Configuration.__slots__:
        if key == "branch_variable":
            # only settable through a configuration file
            continue
        type_ = Configuration._types[key]
        kwds = {}
        if key == "queue_strategy":
            kwds["choices"] = [v.value
                               for v in spatialbnb.QueueStrategy]
        parser.add_argument(
            "--"+key.replace("_","-"),
            type=_or_None(type_),
            default=argparse.SUPPRESS,
            help=(config_docs[key]["doc"] +
                  " (default: %s)" % (config_docs[key]["default"])),
            **kwds)
    parser.add_argument(
        "--config", type=str, default=None,
        help=("A YAML file of configuration options. Options "
              "given on the command line take precedence."))
    parser.add_argument(
        "--disable-signal-handlers",
        action="store_true",
        default=False,
        help=("Disables the SIGINT/SIGUSR1 handlers that "
              "allow the search to be stopped cooperatively."))
    parser.add_argument(
        "--log-filename", type=str, default=None,
        help=("A filename to store solver output into."))
    parser.add_argument(
        "--results-filename", type=str, default=None,
        help=("When set, saves the solver results into a "
              "YAML-formatted file with the given name."))
    parser.add_argument(
        "--profile", dest="profile", type=int, default=0,
        help=("Enable profiling by setting this "
              "option to a positive integer (the "
              "maximum number of functions to "
              "profile)."))
    parser.add_argument('--version',
                        action='version',
                        version='spatialbnb '+str(spatialbnb.__version__))
    args = parser.parse_args()

    if args.profile:                                   #pragma:nocover
        #
        # Call the main routine with profiling.
        #
        handle, tfile = tempfile.mkstemp()
        os.close(handle)
        try:
            profile.runctx("_run_command_line_solver(extensions, root_box, args)",
                           globals(),
                           locals(),
                           tfile)
            p = pstats.Stats(tfile).strip_dirs()
            p.sort_stats("time", "cumulative")
            p = p.print_stats(args.profile)
            p.print_callers(args.profile)
            p.print_callees(args.profile)
            p = p.sort_stats("cumulative","calls")
            p.print_stats(args.profile)
            p.print_callers(args.profile)
            p.print_callees(args.profile)
        finally:
            os.remove(tfile)
        return None
    else:
        return _run_command_line_solver(extensions, root_box, args)
