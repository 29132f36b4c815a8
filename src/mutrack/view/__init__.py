"""Tracked views: transparent proxies that record writes to their targets."""
