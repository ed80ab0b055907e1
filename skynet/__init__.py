"""SKYNET threat monitor — feed aggregation, threat reports, and chat routing."""
