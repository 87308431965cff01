"""LOTMAP server — hosts lot map sessions over HTTP."""
