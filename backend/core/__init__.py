"""Application settings, constants, logging and error mapping."""
