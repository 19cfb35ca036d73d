"""gitflowplus test suite."""
