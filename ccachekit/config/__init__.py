"""Option loading for ccachekit."""

from .inputs import ActionInputs, load_inputs, parse_bool, parse_inputs

__all__ = ["ActionInputs", "load_inputs", "parse_bool", "parse_inputs"]
