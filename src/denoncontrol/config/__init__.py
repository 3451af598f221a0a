"""
Configuration of module settings from .cfg files. See config.configure_module().
"""
