"""Reporters and the on-disk change writer."""
