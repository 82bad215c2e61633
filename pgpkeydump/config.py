"""
pgpkeydump configuration.
"""

from dataclasses import dataclass

USERID_ERROR_POLICIES = frozenset({"replace", "strict", "backslashreplace", "surrogateescape"})
LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass(frozen=True, kw_only=True)
class DumpConfig:
    """
    Attributes:
        include_signatures: Add creation times, signature summaries and identities to the output.
        userid_errors: Codec error handler used when decoding user IDs as UTF-8.
        indent: JSON indentation, None for compact output.
        max_input_size: Maximum number of input bytes accepted by the CLI.
        log_level: Minimum level for log events written to stderr.
        json_logs: Render log events as JSON instead of console lines.
    """

    include_signatures: bool = False
    userid_errors: str = "replace"
    indent: int | None = 2
    max_input_size: int = 16 * 1024 * 1024
    log_level: str = "WARNING"
    json_logs: bool = False

    def __post_init__(self) -> None:
        if self.userid_errors not in USERID_ERROR_POLICIES:
            msg = f"userid_errors must be one of {sorted(USERID_ERROR_POLICIES)}"
            raise ValueError(msg)
        if self.indent is not None and self.indent < 0:
            msg = "indent must be non-negative"
            raise ValueError(msg)
        if self.max_input_size <= 0:
            msg = "max_input_size must be positive"
            raise ValueError(msg)
        if self.log_level.upper() not in LOG_LEVELS:
            msg = f"log_level must be one of {sorted(LOG_LEVELS)}"
            raise ValueError(msg)
