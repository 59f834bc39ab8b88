"""Read-only HTTP API for live generator statistics"""
