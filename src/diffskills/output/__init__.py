"""Reporters for skill results — JSON, Rich terminal, prompt markdown."""
