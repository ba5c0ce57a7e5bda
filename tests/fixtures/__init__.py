"""Shared test fixtures for wdkconfig."""
