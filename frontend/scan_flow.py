# frontend/scan_flow.py
"""
State of a scan, kept per user in the Flask session.

Idle -> Scanning -> Decoded -> Existing | New
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional
from urllib.parse import quote

from frontend.utils import api_request, api_error_message


class ScanState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    DECODED = "decoded"
    EXISTING = "existing"
    NEW = "new"


class InvalidTransition(Exception):
    pass


class LookupFailed(Exception):
    pass


@dataclass
class ScanSession:
    state: ScanState = ScanState.IDLE
    barcode: Optional[str] = None

    def _require(self, *states):
        if self.state not in states:
            raise InvalidTransition(f"Cannot go from {self.state.value} here")

    def start(self):
        # a finished scan can start a new one straight away
        self._require(ScanState.IDLE, ScanState.EXISTING, ScanState.NEW)
        self.state = ScanState.SCANNING
        self.barcode = None
        return self

    def cancel(self):
        self.state = ScanState.IDLE
        self.barcode = None
        return self

    def decoded(self, barcode):
        self._require(ScanState.SCANNING)
        self.state = ScanState.DECODED
        self.barcode = barcode
        return self

    def resolve(self, exists):
        self._require(ScanState.DECODED)
        self.state = ScanState.EXISTING if exists else ScanState.NEW
        return self

    def to_dict(self):
        data = asdict(self)
        data["state"] = self.state.value
        return data

    @classmethod
    def from_dict(cls, data):
        if not data:
            return cls()
        return cls(state=ScanState(data.get("state", "idle")), barcode=data.get("barcode"))


def lookup_scanned(scan, barcode):
    """
    Records the decoded barcode and asks the API whether it is known.

    Returns the product dict, or None for an unknown barcode.
    :raises LookupFailed: if the API call failed.
    """
    scan.decoded(barcode)
    response = api_request(f"/products/barcode/{quote(barcode, safe='')}")
    if response is None or response.status_code != 200:
        scan.cancel()
        raise LookupFailed(api_error_message(response, "Error looking up barcode."))

    data = response.json()
    scan.resolve(data.get("exists", False))
    return data.get("product") if data.get("exists") else None
