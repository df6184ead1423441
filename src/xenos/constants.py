"""
Physical constants used throughout Xenos.
Values are IAU 2015 nominal where applicable.
"""

# Unit conversions
AU_KM = 149_597_870.7                   # km per AU (IAU 2012 exact)
DAY_S = 86_400.0                        # s per day
AU_PER_DAY_TO_KM_PER_S = AU_KM / DAY_S  # ~1731.457

# Heliocentric gravitational parameter
GM_SUN_KM3_S2 = 1.32712440018e11        # km^3/s^2
GM_SUN_AU3_DAY2 = GM_SUN_KM3_S2 * DAY_S**2 / AU_KM**3  # ~2.9591220828559e-04 AU^3/day^2

# Earth
EARTH_MEAN_ORBITAL_SPEED = 29.78        # km/s
OBLIQUITY_J2000_DEG = 23.4392811        # mean obliquity of the ecliptic at J2000

ARCSEC_PER_RAD = 206_264.806247
