from .openbeta import OpenBetaClient, OpenBetaArea, OpenBetaClimb, parse_area, parse_climb

__all__ = ["OpenBetaClient", "OpenBetaArea", "OpenBetaClimb", "parse_area", "parse_climb"]
