"""Adapters that connect the core to inboxes, storage, and the console."""
