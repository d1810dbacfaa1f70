"""Employee time clock engine: punch recording, hours and vacation accrual."""

__version__ = "0.1.0"
