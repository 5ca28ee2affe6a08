"""Exception hierarchy for daytrace.

The analysis passes never raise for data-quality problems; these errors
come from the edges (reading day files, validating input records and
configuration values).
"""


class DaytraceError(Exception):
    """Base error for daytrace."""


class InputError(DaytraceError):
    """A day file could not be read or does not match the record schema."""


class ConfigError(DaytraceError):
    """Configuration values from TOML, env vars or CLI flags are out of range."""
