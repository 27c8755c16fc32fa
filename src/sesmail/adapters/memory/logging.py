"""In-memory logging adapter for testing.

Records the configuration each ``init_logging`` call receives instead of
starting the lib_log_rich runtime.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lib_layered_config import Config


def _empty_config_list() -> list[Config]:
    return []


@dataclass
class LoggingInitSpy:
    """Satisfies the InitLogging protocol and keeps every Config it was given.

    Example:
        >>> spy = LoggingInitSpy()
        >>> spy(Config({"lib_log_rich": {"console_level": "DEBUG"}}, {}))
        >>> spy.last["lib_log_rich"]["console_level"]
        'DEBUG'
    """

    configs: list[Config] = field(default_factory=_empty_config_list)

    def __call__(self, config: Config) -> None:
        self.configs.append(config)

    @property
    def last(self) -> Config:
        """Most recent configuration; raises IndexError before the first call."""
        return self.configs[-1]


__all__ = ["LoggingInitSpy"]
