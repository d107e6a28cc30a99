"""Application services: the publish sequence and the tools it drives."""
