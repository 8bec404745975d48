"""Runtime layer — external process execution."""
