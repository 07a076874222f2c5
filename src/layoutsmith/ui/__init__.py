"""User-facing front-ends for layoutsmith."""
