#
# This example maximizes the lifecycle savings of retrofitting
# a natural-gas fired industrial process heat (IPH) plant with
# a parabolic-trough solar field and thermal storage
#
#   max  A*SF(h, a) - B*C(h, a)
#   s.t. SF(h, a) >= 0.5
#        0.5 <= h <= 12   (storage, hours of peak demand)
#        1 <= a <= 60     (aperture area, 1000 m^2)
#
# SF is the solar fraction of a representative clear day,
# computed from an hourly storage energy balance written with
# smooth min/max. A is the discounted natural-gas cost avoided
# per unit of solar fraction over the project lifetime, B
# discounts the loan payments, and C is the capital cost of
# the field and the storage. The nonconvex capital model uses
# power laws (a^0.92 and (h*q)^0.91); the convex model replaces
# them with their secants over the root box. The solar heat
# available each hour is a clear-sky direct irradiance scaled
# by the incidence angle on a single-axis tracking collector.
# Savings are reported in millions of dollars.
#
# Nodes are lower bounded with the natural interval extension
# of the model and upper bounded with a local solve. The
# interval bounds are loose for the hourly recursion, so a
# node or time limit is recommended.
#
# Recommended usage:
#
# $ python solar_hybridization.py --relative-tolerance=1e-2 --node-limit=2000
#

import math

import numpy

import spatialbnb
from spatialbnb.interval import (sin,
                                 cos,
                                 asin,
                                 acos,
                                 sqrt,
                                 smooth_max,
                                 smooth_min)

def _clip(x):
    return min(1.0, max(-1.0, float(x)))

def solar_angles(hour, day, latitude, longitude, timezone):
    """Returns the solar elevation angle and the incidence
    angle (degrees) of direct rays on a collector that
    tracks the sun about a horizontal north-south axis.
    Longitudes are positive west and time zones are hours
    behind UTC."""
    b = math.radians(360.0/365.0*(day - 81))
    # equation of time (minutes)
    et = 9.87*math.sin(2*b) - 7.53*math.cos(b) - 1.5*math.sin(b)
    solar_time = hour + (4.0*(15.0*timezone - longitude) + et)/60.0
    ha = math.radians(15.0*(solar_time - 12.0))
    da = math.radians(23.45*math.sin(b))
    lat = math.radians(latitude)
    zenith = acos(_clip(sin(lat)*sin(da) +
                        cos(lat)*cos(da)*cos(ha)))
    elevation = asin(_clip(cos(zenith)))
    incidence = acos(_clip(sqrt(cos(zenith)**2 +
                                cos(da)**2 * sin(ha)**2)))
    return math.degrees(elevation), math.degrees(incidence)

def heat_profile(day=172,
                 latitude=32.2,
                 longitude=110.9,
                 timezone=7,
                 irradiance=900.0,
                 efficiency=0.7):
    """Returns the heat collected (W per m^2 of aperture) in
    each hour of the day."""
    heat = []
    for hour in range(24):
        elevation, incidence = solar_angles(hour + 0.5,
                                            day,
                                            latitude,
                                            longitude,
                                            timezone)
        if elevation > 0:
            heat.append(efficiency*irradiance*
                        math.cos(math.radians(incidence)))
        else:
            heat.append(0.0)
    return heat

class SolarHybridization(spatialbnb.Problem):
    """Lifecycle savings of a solar IPH retrofit over the
    variables (storage hours, aperture area in 1000 m^2).

    Parameters
    ----------
    root_box : :class:`Box <spatialbnb.box.Box>`
        The variable bounds. The convex capital model uses
        the secants over these bounds.
    capital_model : {"nonconvex", "convex"}, optional
        The capital cost model. (default: "nonconvex")
    min_solar_fraction : float, optional
        The smallest acceptable solar fraction.
        (default: 0.5)
    heat : list of float, optional
        The hourly heat collected per m^2 of aperture
        (W/m^2). (default: :func:`heat_profile`)
    epsilon : float, optional
        The smoothing parameter (kWh) of the storage
        balance. (default: 1.0)
    """

    # economic parameters
    fuel_inflation = 0.01
    discount_rate = 0.10
    capital_rate = 0.065
    loan_term = 10
    lifetime = 30
    fuel_cost = 7.50/293.1/1.037   # $/kWh
    storage_cost = 45.14
    area_cost = 425.0
    peak_demand = 10000.0          # kW

    def __init__(self,
                 root_box,
                 capital_model="nonconvex",
                 min_solar_fraction=0.5,
                 heat=None,
                 epsilon=1.0):
        if capital_model not in ("nonconvex", "convex"):
            raise ValueError("Invalid capital model: %r"
                             % (capital_model,))
        if heat is None:
            heat = heat_profile()
        self.root_box = root_box
        self.capital_model = capital_model
        self.min_solar_fraction = min_solar_fraction
        self.heat = [float(q) for q in heat]
        self.epsilon = epsilon
        self.demand = [self.peak_demand]*len(self.heat)
        self.total_demand = sum(self.demand)
        annual_fuel = self.fuel_cost * 365.0 * self.total_demand
        self.avoided_cost = sum(
            annual_fuel *
            (1.0 + self.fuel_inflation)**(i - 1) *
            (1.0 + self.discount_rate)**(-i)
            for i in range(1, self.lifetime + 1))
        growth = (1.0 + self.capital_rate/12.0)**(12*self.loan_term)
        payment = self.capital_rate*growth/(growth - 1.0)
        self.loan_factor = sum(
            payment*(1.0 + self.discount_rate)**(-i)
            for i in range(1, self.loan_term + 1))
        # secants of the capital power laws over the root box
        (hL, aL), (hU, aU) = root_box.lower, root_box.upper
        sL, sU = self._storage_capital(hL), self._storage_capital(hU)
        fL, fU = self._area_capital(aL), self._area_capital(aU)
        self._secant = (hL, sL, (sU - sL)/(hU - hL),
                        aL, fL, (fU - fL)/(aU - aL))

    def _storage_capital(self, h):
        return self.storage_cost*(h*self.peak_demand)**0.91

    def _area_capital(self, a):
        return self.area_cost*(1000.0*a)**0.92

    def solar_fraction(self, x):
        """Returns the fraction of the daily process heat
        demand supplied by the solar field at `x` (a point or
        a list of intervals)."""
        h, a = x[0], x[1]
        eps = self.epsilon
        capacity = self.peak_demand*h
        stored = 0.0
        delivered = 0.0
        # one hour time steps
        for q, demand in zip(self.heat, self.demand):
            solar = q*a
            level = stored + (solar - demand)
            stored = smooth_min(capacity,
                                smooth_max(level, 0.0, eps),
                                eps)
            spilled = smooth_max(0.0, level - capacity, eps)
            delivered = delivered + (solar - spilled)
        return delivered/self.total_demand

    def capital_cost(self, x):
        """Returns the capital cost ($) at `x`."""
        h, a = x[0], x[1]
        if self.capital_model == "nonconvex":
            return self._area_capital(a) + self._storage_capital(h)
        hL, sL, s_slope, aL, fL, f_slope = self._secant
        return (fL + f_slope*(a - aL)) + (sL + s_slope*(h - hL))

    #
    # Implement Problem abstract methods
    #

    def sense(self):
        return spatialbnb.maximize

    def objective(self, x):
        savings = self.avoided_cost*self.solar_fraction(x) - \
                  self.loan_factor*self.capital_cost(x)
        return savings/1.0e6

    def constraint_count(self):
        return 1

    def constraints(self, x):
        return numpy.array([self.min_solar_fraction -
                            self.solar_fraction(x)])

    def interval_constraints(self, X):
        return [self.min_solar_fraction - self.solar_fraction(X)]

if __name__ == "__main__":
    import spatialbnb.misc

    root_box = spatialbnb.Box([0.5, 1.0],
                              [12.0, 60.0])
    problem = SolarHybridization(root_box)
    extensions = spatialbnb.LocalSearchExtensions(problem)
    spatialbnb.misc.create_command_line_solver(extensions, root_box)
