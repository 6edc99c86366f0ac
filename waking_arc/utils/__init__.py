# Utilities package
# Import directly where needed:
#   - from waking_arc.utils.config import ConfigManager
