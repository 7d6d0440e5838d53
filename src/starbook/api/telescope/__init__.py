"""Mount session, HTTP transport, status polling, simulation and screen decoding."""
