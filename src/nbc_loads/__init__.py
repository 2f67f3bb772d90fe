"""Canadian building code structural design loads: snow, wind, seismic, dead and live."""

__version__ = "0.1.0"
