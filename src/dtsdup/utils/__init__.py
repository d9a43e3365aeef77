"""Filesystem worker pool and concurrency utilities."""
