from __future__ import annotations

from typing import Any, Generic

from integration.common.config import TConf


class ComponentFactory(Generic[TConf]):
    """Pipeline stage built from one validated config section."""

    # pydantic model the raw section is validated against
    _config_type: type[TConf]
    _instance_config: TConf

    def __init__(self, config: TConf) -> None:
        self._instance_config = config

    @classmethod
    def from_config(cls, config: dict[str, Any], **kwargs: Any) -> ComponentFactory:
        """Validate a raw section and build the stage.

        Keyword arguments go straight to the constructor; the fetcher takes
        its transport, logger and sleep this way.
        """
        return cls(cls._config_type(**config), **kwargs)

    @property
    def config(self) -> TConf:
        """Validated settings of this stage."""
        return self._instance_config
