"""Statutory deduction tables (monthly gross pay, KES).

Bracket edges live here as data so they can be audited against the
regulator's published schedules and tested without running a payroll.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ...common.numbers import round_half_up


@dataclass(frozen=True)
class TaxBand:
    """PAYE band: tax = base + (gross - floor) * rate, for gross <= upper."""

    upper: Optional[float]
    base: float
    rate: float
    floor: float

    def contains(self, gross: float) -> bool:
        return self.upper is None or gross <= self.upper

    def tax(self, gross: float) -> float:
        return self.base + (gross - self.floor) * self.rate


# Base amounts are the accumulated tax of all lower bands.
PAYE_BANDS: Sequence[TaxBand] = (
    TaxBand(upper=24_000, base=0, rate=0.10, floor=0),
    TaxBand(upper=32_333, base=2_400, rate=0.25, floor=24_000),
    TaxBand(upper=500_000, base=2_400 + 2_083.25, rate=0.30, floor=32_333),
    TaxBand(upper=800_000, base=2_400 + 2_083.25 + 140_300.10, rate=0.325, floor=500_000),
    TaxBand(upper=None, base=2_400 + 2_083.25 + 140_300.10 + 97_500, rate=0.35, floor=800_000),
)

# (gross strictly below, fee)
NHIF_TIERS: Sequence[Tuple[float, float]] = (
    (6_000, 150),
    (8_000, 300),
    (12_000, 400),
    (15_000, 500),
    (20_000, 600),
    (25_000, 750),
    (30_000, 850),
    (35_000, 900),
    (40_000, 950),
    (45_000, 1_000),
    (50_000, 1_100),
    (60_000, 1_200),
    (70_000, 1_300),
    (80_000, 1_400),
    (90_000, 1_500),
    (100_000, 1_600),
)
NHIF_MAX_FEE = 1_700

NSSF_RATE = 0.06
NSSF_CAP = 1_080


def calculate_paye(gross: float, bands: Sequence[TaxBand] = PAYE_BANDS) -> float:
    """Progressive income tax, rounded to a whole unit."""
    band = next(b for b in bands if b.contains(gross))
    return round_half_up(band.tax(gross))


def calculate_nhif(gross: float, tiers: Sequence[Tuple[float, float]] = NHIF_TIERS) -> float:
    for upper, fee in tiers:
        if gross < upper:
            return float(fee)
    return float(NHIF_MAX_FEE)


def calculate_nssf(gross: float) -> float:
    return min(gross * NSSF_RATE, float(NSSF_CAP))
