"""Loading plugin options from configuration files."""

from .loader import ConfigLoader, import_callable, load_config_from_file

__all__ = ["ConfigLoader", "import_callable", "load_config_from_file"]
