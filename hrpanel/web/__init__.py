"""Request-level helpers shared by the routers."""
