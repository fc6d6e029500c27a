"""Test suite for the media search gateway."""
