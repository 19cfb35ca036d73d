"""Test doubles for gitflowplus."""
