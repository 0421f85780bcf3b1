"""CLI sub-commands registered by ``ghworkflow.main``."""
