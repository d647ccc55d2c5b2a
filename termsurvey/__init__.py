"""Interactive terminal prompts: a filterable select list, validators and transformers."""

__version__ = "0.1.0"