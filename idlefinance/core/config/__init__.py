"""
Configuration subsystem for Idle Finance.

- **config.py**: static runtime settings from environment variables
- **balance.py**: YAML balance files -> ``EngineConfig``
- **errors.py**: configuration exception hierarchy

``balance`` is imported explicitly (``idlefinance.core.config.balance``)
because it depends on the logging subsystem, which itself reads ``Config``.

Usage Examples
--------------
```python
from idlefinance.core.config import Config
from idlefinance.core.config.balance import load_engine_config_or_default

if Config.is_production():
    logger.info("Running in production mode")

engine_config = load_engine_config_or_default(Config.BALANCE_CONFIG_PATH)
```
"""

from idlefinance.core.config.config import Config, Environment
from idlefinance.core.config.errors import ConfigError, ConfigValidationError

__all__ = [
    "Config",
    "Environment",
    "ConfigError",
    "ConfigValidationError",
]
