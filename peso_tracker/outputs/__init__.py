# peso_tracker/outputs/__init__.py
from importlib import import_module


def get_output(name, config):
    """Instantiate the exporter registered under ``name`` in ``output_modules``."""
    modules = config.get('output_modules') or {}
    if name not in modules:
        raise ValueError(f"No output module configured for {name!r} (known: {', '.join(sorted(modules))})")
    module_name, cls_name = modules[name].rsplit('.', 1)
    return getattr(import_module(module_name), cls_name)(config)
