"""Remote data fetchers: CanSHM hazard service and location geocoding."""
