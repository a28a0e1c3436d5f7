"""Pomodoro work/break countdown with a local web UI."""
