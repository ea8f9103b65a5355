"""TCP port reachability prober."""

from portprobe.models import ProbeOutcome, Protocol, ScanResult
from portprobe.prober import probe_tcp
from portprobe.scanner import iter_scan, run_scan, scan
from portprobe.schemas import ScanRequest

__version__ = "0.1.0"

__all__ = [
    "ProbeOutcome",
    "Protocol",
    "ScanRequest",
    "ScanResult",
    "iter_scan",
    "probe_tcp",
    "run_scan",
    "scan",
]
