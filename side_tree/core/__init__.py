"""Core (UI-free) layer of the side tree: document model, records, services."""
