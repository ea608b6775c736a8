"""
Bootstrap detection for the Tor process.

Tor reports no structured readiness signal, so its human-readable log is
scanned for the line it prints once bootstrapping has finished.
"""

# Message printed on the Tor console when completely bootstrapped
BOOTSTRAPPED_MARKER = "Bootstrapped 100% (done): Done"


def is_ready_line(line: str) -> bool:
    """
    Check whether a log line announces that Tor finished bootstrapping.

    Example:
        >>> is_ready_line("Nov 01 12:00:00.000 [notice] Bootstrapped 100% (done): Done")
        True
        >>> is_ready_line("Nov 01 12:00:00.000 [notice] Bootstrapped 90% (ap_handshake_done)")
        False
    """
    return BOOTSTRAPPED_MARKER in line


__all__ = ["BOOTSTRAPPED_MARKER", "is_ready_line"]
