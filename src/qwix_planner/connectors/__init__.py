"""User-facing front-ends (console REPL)."""
