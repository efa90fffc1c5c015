"""Scoreboard watcher: polls a feed, detects status changes, notifies chat."""
