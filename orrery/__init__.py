"""
Orrery

Heliocentric and geocentric positions of the eight planets for a calendar
date, from a JPL ephemeris when one is available and from mean Keplerian
elements otherwise.
"""

from orrery.version import VERSION as __version__

__all__ = ["__version__"]
