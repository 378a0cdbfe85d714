"""Core domain package for smsledger.

Core contains extraction, classification, filtering, and scan orchestration
without any device, file, or storage-specific code, keeping the business logic
portable.
"""
