"""Value models: transform Options and API payloads."""
