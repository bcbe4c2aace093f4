"""Shared configuration, paths and logging helpers for zipadeedoodah."""
