"""Shared configuration and logging helpers for lackeys."""
