from manvsgod.core.time.clock import (
    utc_now,
    utc_now_ms,
    utc_now_iso,
    iso_z,
    from_epoch_ms,
    to_epoch_ms,
)

__all__ = [
    "utc_now",
    "utc_now_ms",
    "utc_now_iso",
    "iso_z",
    "from_epoch_ms",
    "to_epoch_ms",
]
