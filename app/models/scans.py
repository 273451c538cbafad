"""Scan log documents (``scannedCodes`` and ``rfid`` collections).

Both logs are written by the gate devices and only read here.
"""

from enum import Enum


class ScanSource(str, Enum):
    """Scan log a report is built from."""

    QRCODE = "qrcode"
    RFID = "rfid"


SCAN_COLLECTIONS: dict[ScanSource, str] = {
    ScanSource.QRCODE: "scannedCodes",
    ScanSource.RFID: "rfid",
}

# QR scans carry a Firestore timestamp, RFID scans a "YYYY-MM-DD HH:MM:SS" string
SCAN_TIMESTAMP_FIELDS: dict[ScanSource, str] = {
    ScanSource.QRCODE: "scannedAt",
    ScanSource.RFID: "timestamp",
}
