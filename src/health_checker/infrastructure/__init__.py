"""External clients for the dependencies the health checker probes."""
