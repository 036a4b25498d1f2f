"""Core buffering engine, settings, entries and diagnostics for batchlog."""
