"""HSE approval flow resolver service."""
