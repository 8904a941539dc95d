"""Tests for the fixture harness and sandbox environment."""
