"""
Interval arithmetic used to compute natural interval
extensions of objective and constraint expressions.

The functions in this module (:func:`sin`, :func:`cos`,
:func:`tan`, :func:`asin`, :func:`acos`, :func:`atan`,
:func:`exp`, :func:`log`, :func:`sqrt`, :func:`sqr`,
:func:`smooth_max`, :func:`smooth_min`) accept either :class:`Interval` objects or plain numbers
(or numpy arrays), so that a single expression can be
written once and evaluated both at points and over boxes.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
import math
import numbers

import numpy

_two_pi = 2.0 * math.pi
_pi_up = float(numpy.nextafter(math.pi, numpy.inf))
_half_pi_up = float(numpy.nextafter(0.5 * math.pi, numpy.inf))

def _down(x):
    return float(numpy.nextafter(x, -numpy.inf))

def _up(x):
    return float(numpy.nextafter(x, numpy.inf))

class Interval(object):
    """A closed interval [lo, hi] of the extended real line.

    Arithmetic results are rounded outward by one unit in
    the last place so that the exact result of an operation
    on points of the operands is always enclosed.

    Parameters
    ----------
    lo : float
        The lower endpoint.
    hi : float, optional
        The upper endpoint. Defaults to `lo` (a point
        interval).
    """
    __slots__ = ("lo", "hi")
    # numpy scalars defer to the reflected operators
    __array_ufunc__ = None

    def __init__(self, lo, hi=None):
        if hi is None:
            hi = lo
        lo = float(lo)
        hi = float(hi)
        if math.isnan(lo) or math.isnan(hi):
            raise ValueError("Interval endpoints can not be nan")
        if lo > hi:
            raise ValueError("Invalid interval: [%r, %r]"
                             % (lo, hi))
        self.lo = lo
        self.hi = hi

    @classmethod
    def entire(cls):
        """Returns the interval (-inf, inf)."""
        return cls(-numpy.inf, numpy.inf)

    @property
    def width(self):
        return self.hi - self.lo

    @property
    def midpoint(self):
        return 0.5*(self.lo + self.hi)

    def contains(self, x):
        """Indicates if the number lies in the interval."""
        return self.lo <= x <= self.hi

    def contains_zero(self):
        return self.lo <= 0.0 <= self.hi

    def hull(self, other):
        """Returns the smallest interval containing this
        interval and the other."""
        other = _as_interval(other)
        return Interval(min(self.lo, other.lo),
                        max(self.hi, other.hi))

    def __eq__(self, other):
        if not isinstance(other, Interval):
            return NotImplemented
        return (self.lo == other.lo) and \
            (self.hi == other.hi)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:              #pragma:nocover
            return result
        return not result

    __hash__ = None

    def __str__(self):
        return "[%.7g, %.7g]" % (self.lo, self.hi)

    def __repr__(self):
        return "Interval(%r, %r)" % (self.lo, self.hi)

    #
    # Arithmetic
    #

    def __pos__(self):
        return self

    def __neg__(self):
        return Interval(-self.hi, -self.lo)

    def __add__(self, other):
        if not isinstance(other, (Interval, numbers.Real)):
            return NotImplemented
        other = _as_interval(other)
        return Interval(_down(self.lo + other.lo),
                        _up(self.hi + other.hi))

    __radd__ = __add__

    def __sub__(self, other):
        if not isinstance(other, (Interval, numbers.Real)):
            return NotImplemented
        other = _as_interval(other)
        return Interval(_down(self.lo - other.hi),
                        _up(self.hi - other.lo))

    def __rsub__(self, other):
        if not isinstance(other, numbers.Real):
            return NotImplemented
        return _as_interval(other).__sub__(self)

    def __mul__(self, other):
        if not isinstance(other, (Interval, numbers.Real)):
            return NotImplemented
        other = _as_interval(other)
        products = [_mul(self.lo, other.lo),
                    _mul(self.lo, other.hi),
                    _mul(self.hi, other.lo),
                    _mul(self.hi, other.hi)]
        return Interval(_down(min(products)),
                        _up(max(products)))

    __rmul__ = __mul__

    def __truediv__(self, other):
        if not isinstance(other, (Interval, numbers.Real)):
            return NotImplemented
        other = _as_interval(other)
        if other.contains_zero():
            if (other.lo == 0) and (other.hi > 0):
                recip = Interval(_down(1.0/other.hi), numpy.inf)
            elif (other.hi == 0) and (other.lo < 0):
                recip = Interval(-numpy.inf, _up(1.0/other.lo))
            else:
                return Interval.entire()
        else:
            recip = Interval(_down(1.0/other.hi),
                             _up(1.0/other.lo))
        return self * recip

    def __rtruediv__(self, other):
        if not isinstance(other, numbers.Real):
            return NotImplemented
        return _as_interval(other).__truediv__(self)

    def __pow__(self, n):
        if isinstance(n, numbers.Integral):
            return self._pow_int(int(n))
        if isinstance(n, numbers.Real) and \
           float(n).is_integer():
            return self._pow_int(int(n))
        if not isinstance(n, (Interval, numbers.Real)):
            return NotImplemented
        # general powers are defined on the positive reals
        return exp(_as_interval(n) * log(self))

    def _pow_int(self, n):
        if n == 0:
            return Interval(1.0)
        elif n == 1:
            return self
        elif n < 0:
            return 1.0 / self._pow_int(-n)
        lo_n = _ipow(self.lo, n)
        hi_n = _ipow(self.hi, n)
        if n % 2 == 0:
            if self.lo >= 0:
                return Interval(_down(lo_n), _up(hi_n))
            elif self.hi <= 0:
                return Interval(_down(hi_n), _up(lo_n))
            else:
                return Interval(0.0, _up(max(lo_n, hi_n)))
        # odd powers are monotone
        return Interval(_down(lo_n), _up(hi_n))

    #
    # Elementary functions
    #

    def sqr(self):
        return self._pow_int(2)

    def sqrt(self):
        if self.hi < 0:
            raise ValueError("sqrt is undefined on %s" % (self))
        lo = max(self.lo, 0.0)
        return Interval(max(_down(math.sqrt(lo)), 0.0),
                        _up(math.sqrt(self.hi)))

    def exp(self):
        return Interval(max(_down(_exp(self.lo)), 0.0),
                        _up(_exp(self.hi)))

    def log(self):
        if self.hi <= 0:
            raise ValueError("log is undefined on %s" % (self))
        if self.lo <= 0:
            lo = -numpy.inf
        else:
            lo = _down(math.log(self.lo))
        return Interval(lo, _up(math.log(self.hi)))

    def sin(self):
        # maxima at pi/2 + 2k*pi, minima at 3pi/2 + 2k*pi
        return self._periodic(math.sin,
                              0.5*math.pi,
                              1.5*math.pi)

    def cos(self):
        # maxima at 2k*pi, minima at pi + 2k*pi
        return self._periodic(math.cos,
                              0.0,
                              math.pi)

    def tan(self):
        if math.isinf(self.lo) or math.isinf(self.hi) or \
           (self.width >= math.pi):
            return Interval.entire()
        # poles at pi/2 + k*pi
        k = math.ceil((self.lo - 0.5*math.pi) / math.pi)
        if (0.5*math.pi + k*math.pi) <= self.hi:
            return Interval.entire()
        lo = math.tan(self.lo)
        hi = math.tan(self.hi)
        if lo > hi:
            return Interval.entire()
        return Interval(_down(lo), _up(hi))

    def asin(self):
        if (self.hi < -1) or (self.lo > 1):
            raise ValueError("asin is undefined on %s" % (self))
        lo = max(self.lo, -1.0)
        hi = min(self.hi, 1.0)
        return Interval(max(_down(math.asin(lo)), -_half_pi_up),
                        min(_up(math.asin(hi)), _half_pi_up))

    def acos(self):
        if (self.hi < -1) or (self.lo > 1):
            raise ValueError("acos is undefined on %s" % (self))
        lo = max(self.lo, -1.0)
        hi = min(self.hi, 1.0)
        # decreasing on [-1, 1]
        return Interval(max(_down(math.acos(hi)), 0.0),
                        min(_up(math.acos(lo)), _pi_up))

    def atan(self):
        return Interval(max(_down(math.atan(self.lo)), -_half_pi_up),
                        min(_up(math.atan(self.hi)), _half_pi_up))

    def _periodic(self, func, peak, trough):
        if math.isinf(self.lo) or math.isinf(self.hi) or \
           (self.width >= _two_pi):
            return Interval(-1.0, 1.0)
        vals = [func(self.lo), func(self.hi)]
        if _contains_periodic(self.lo, self.hi, peak):
            vals.append(1.0)
        if _contains_periodic(self.lo, self.hi, trough):
            vals.append(-1.0)
        return Interval(max(_down(min(vals)), -1.0),
                        min(_up(max(vals)), 1.0))

    def __abs__(self):
        if self.lo >= 0:
            return self
        elif self.hi <= 0:
            return -self
        return Interval(0.0, max(-self.lo, self.hi))

def _mul(a, b):
    # 0*inf is taken as 0 for interval endpoints
    if (a == 0) or (b == 0):
        return 0.0
    return a * b

def _ipow(x, n):
    try:
        return x ** n
    except OverflowError:
        if (x < 0) and (n % 2 == 1):
            return -numpy.inf
        return numpy.inf

def _exp(x):
    try:
        return math.exp(x)
    except OverflowError:
        return numpy.inf

def _contains_periodic(lo, hi, offset):
    k = math.ceil((lo - offset) / _two_pi)
    return (offset + k*_two_pi) <= hi

def _as_interval(x):
    if isinstance(x, Interval):
        return x
    return Interval(x)

def box_intervals(box):
    """Returns the list of coordinate intervals of a
    :class:`Box <spatialbnb.box.Box>`."""
    return [Interval(l, u) for l, u in zip(box.lower, box.upper)]

def sin(x):
    """The sine of a number, array, or interval."""
    if isinstance(x, Interval):
        return x.sin()
    return numpy.sin(x)

def cos(x):
    """The cosine of a number, array, or interval."""
    if isinstance(x, Interval):
        return x.cos()
    return numpy.cos(x)

def exp(x):
    """The exponential of a number, array, or interval."""
    if isinstance(x, Interval):
        return x.exp()
    return numpy.exp(x)

def log(x):
    """The natural logarithm of a number, array, or
    interval."""
    if isinstance(x, Interval):
        return x.log()
    return numpy.log(x)

def sqrt(x):
    """The square root of a number, array, or interval."""
    if isinstance(x, Interval):
        return x.sqrt()
    return numpy.sqrt(x)

def sqr(x):
    """The square of a number, array, or interval. For
    intervals this is tighter than ``x*x`` when the
    interval contains zero.

    Example
    -------

    >>> sqr(Interval(-1, 2)).lo
    0.0

    """
    if isinstance(x, Interval):
        return x.sqr()
    return numpy.square(x)

def tan(x):
    """The tangent of a number, array, or interval."""
    if isinstance(x, Interval):
        return x.tan()
    return numpy.tan(x)

def asin(x):
    """The inverse sine of a number, array, or interval."""
    if isinstance(x, Interval):
        return x.asin()
    return numpy.arcsin(x)

def acos(x):
    """The inverse cosine of a number, array, or
    interval."""
    if isinstance(x, Interval):
        return x.acos()
    return numpy.arccos(x)

def atan(x):
    """The inverse tangent of a number, array, or
    interval."""
    if isinstance(x, Interval):
        return x.atan()
    return numpy.arctan(x)

def _smooth_max(x, y, epsilon):
    return 0.5*(x + y + sqrt(sqr(x - y) + epsilon*epsilon))

def smooth_max(x, y, epsilon=1e-4):
    """A continuously differentiable approximation of
    ``max(x, y)``, computed as

        0.5*(x + y + sqrt((x - y)^2 + epsilon^2))

    The result overestimates the maximum by at most
    ``epsilon/2`` and is nondecreasing in both arguments,
    so the interval version is obtained from the lower and
    upper corners of the operands.

    Parameters
    ----------
    x, y : float, array, or :class:`Interval`
        The operands.
    epsilon : float, optional
        The smoothing parameter. (default: 1e-4)

    Example
    -------

    >>> smooth_max(Interval(-1, 1), 0.0).lo >= 0
    True

    """
    if epsilon <= 0:
        raise ValueError("epsilon must be positive")
    if isinstance(x, Interval) or isinstance(y, Interval):
        X = _as_interval(x)
        Y = _as_interval(y)
        if X.lo == -numpy.inf:
            lo = Y.lo
        elif Y.lo == -numpy.inf:
            lo = X.lo
        else:
            lo = _smooth_max(Interval(X.lo),
                             Interval(Y.lo),
                             epsilon).lo
        if (X.hi == numpy.inf) or (Y.hi == numpy.inf):
            hi = numpy.inf
        else:
            hi = _smooth_max(Interval(X.hi),
                             Interval(Y.hi),
                             epsilon).hi
        return Interval(lo, hi)
    return _smooth_max(x, y, epsilon)

def smooth_min(x, y, epsilon=1e-4):
    """A continuously differentiable approximation of
    ``min(x, y)``, equal to ``-smooth_max(-x, -y)``. It
    underestimates the minimum by at most ``epsilon/2``."""
    return -smooth_max(-x, -y, epsilon=epsilon)
