"""
Axis-aligned box implementation.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
import numpy

def _as_readonly_array(values, name):
    arr = numpy.array(values, dtype=float)
    if arr.ndim != 1:
        raise ValueError("The '%s' vector must be one "
                         "dimensional." % (name))
    arr.setflags(write=False)
    return arr

def default_branch_mask(dimension, auxiliary_count=0):
    """Returns the default branch-eligibility mask for a
    box of the given dimension. The trailing
    `auxiliary_count` coordinates are reserved for
    auxiliary (e.g., epigraph) variables and are marked
    non-branchable.

    Example
    -------

    >>> default_branch_mask(3, auxiliary_count=1)
    (True, True, False)

    """
    if (auxiliary_count < 0) or \
       (auxiliary_count > dimension):
        raise ValueError("Invalid auxiliary variable count "
                         "(%s) for a box of dimension %s"
                         % (auxiliary_count, dimension))
    return tuple([True]*(dimension - auxiliary_count) +
                 [False]*auxiliary_count)

class Box(object):
    """An axis-aligned hyper-rectangle over the decision
    vector. Boxes are immutable; all operations that change
    bounds return a new box.

    Parameters
    ----------
    lower : sequence of floats
        The lower bound for each coordinate.
    upper : sequence of floats
        The upper bound for each coordinate.

    Raises
    ------
    ValueError
        If the vectors are empty, have different lengths,
        contain non-finite values, or if
        `lower[i] > upper[i]` for any coordinate.
    """
    __slots__ = ("_lower",
                 "_upper")

    def __init__(self, lower, upper):
        lower = _as_readonly_array(lower, "lower")
        upper = _as_readonly_array(upper, "upper")
        if len(lower) == 0:
            raise ValueError("A box must have at least "
                             "one coordinate.")
        if len(lower) != len(upper):
            raise ValueError("The lower and upper bound "
                             "vectors have different lengths "
                             "(%d != %d)."
                             % (len(lower), len(upper)))
        if not (numpy.all(numpy.isfinite(lower)) and \
                numpy.all(numpy.isfinite(upper))):
            raise ValueError("Box bounds must be finite.")
        bad = numpy.nonzero(lower > upper)[0]
        if len(bad) > 0:
            i = int(bad[0])
            raise ValueError("Box lower bound exceeds upper "
                             "bound for coordinate %d "
                             "(%r > %r)."
                             % (i, lower[i], upper[i]))
        self._lower = lower
        self._upper = upper

    @property
    def lower(self):
        """The (read-only) lower bound vector."""
        return self._lower

    @property
    def upper(self):
        """The (read-only) upper bound vector."""
        return self._upper

    def __len__(self):
        return len(self._lower)

    def __eq__(self, other):
        if not isinstance(other, Box):
            return NotImplemented
        return (len(self) == len(other)) and \
            bool(numpy.all(self._lower == other._lower)) and \
            bool(numpy.all(self._upper == other._upper))

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:              #pragma:nocover
            return result
        return not result

    __hash__ = None

    def __str__(self):
        return ("Box(%s)"
                % (", ".join("[%.7g, %.7g]" % (l, u)
                             for l, u in zip(self._lower,
                                             self._upper))))

    __repr__ = __str__

    def width(self, i=None):
        """Returns the width of coordinate `i`, or the
        vector of all widths when `i` is None."""
        if i is None:
            return self._upper - self._lower
        return float(self._upper[i] - self._lower[i])

    def midpoint(self):
        """Returns the center point of the box."""
        mid = 0.5*(self._lower + self._upper)
        # guard against rounding outside of the box
        return numpy.minimum(numpy.maximum(mid, self._lower),
                             self._upper)

    def is_degenerate(self, tolerance=0.0):
        """Indicates if all widths are less than or equal to
        the given tolerance (i.e., the box is a point)."""
        return bool(numpy.all(self.width() <= tolerance))

    def contains(self, point, tolerance=0.0):
        """Indicates if the point lies in the box (expanded
        by the given absolute tolerance)."""
        point = numpy.asarray(point, dtype=float)
        if len(point) != len(self):
            return False
        return bool(numpy.all(point >= self._lower - tolerance) and \
                    numpy.all(point <= self._upper + tolerance))

    def contains_box(self, other):
        """Indicates if the other box is a subset of this
        box."""
        return (len(other) == len(self)) and \
            bool(numpy.all(other.lower >= self._lower)) and \
            bool(numpy.all(other.upper <= self._upper))

    def project(self, point):
        """Returns the point clipped to the box."""
        point = numpy.asarray(point, dtype=float)
        return numpy.minimum(numpy.maximum(point, self._lower),
                             self._upper)

    def with_bounds(self, i, lower=None, upper=None):
        """Returns a copy of this box with the bounds of
        coordinate `i` replaced. Bounds left as None are
        unchanged."""
        new_lower = numpy.array(self._lower)
        new_upper = numpy.array(self._upper)
        if lower is not None:
            new_lower[i] = lower
        if upper is not None:
            new_upper[i] = upper
        return Box(new_lower, new_upper)

    def split(self, i, fraction=0.5):
        """Splits the box into two boxes along coordinate
        `i` at the given fraction of its width.

        Parameters
        ----------
        i : int
            The coordinate to split.
        fraction : float, optional
            The fraction of the width, measured from the
            lower bound, where the split occurs. Must lie in
            the open interval (0, 1). (default: 0.5)

        Returns
        -------
        tuple
            The (left, right) pair of boxes.
        """
        if not (0.0 < fraction < 1.0):
            raise ValueError("The split fraction must lie in "
                             "the open interval (0, 1). "
                             "(fraction=%r)" % (fraction))
        L = float(self._lower[i])
        U = float(self._upper[i])
        point = L + fraction*(U - L)
        # keep the split point inside the interval
        point = min(max(point, L), U)
        return (self.with_bounds(i, upper=point),
                self.with_bounds(i, lower=point))

    def scaled_width(self, scale):
        """Returns the vector of widths divided by the given
        (typical range) scale vector. Coordinates with a
        zero scale are not rescaled."""
        scale = numpy.asarray(scale, dtype=float)
        scale = numpy.where(scale > 0, scale, 1.0)
        return self.width() / scale

    def to_list(self):
        """Returns the box as a list of (lower, upper)
        tuples."""
        return [(float(l), float(u))
                for l, u in zip(self._lower, self._upper)]

    @classmethod
    def from_bounds(cls, bounds):
        """Creates a box from a sequence of (lower, upper)
        pairs.

        Example
        -------

        >>> Box.from_bounds([(0, 1), (-2, 2)]).width(1)
        4.0

        """
        bounds = list(bounds)
        return cls([b[0] for b in bounds],
                   [b[1] for b in bounds])
