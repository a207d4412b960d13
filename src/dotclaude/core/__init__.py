"""Core logic for dotclaude (no CLI dependencies)."""
