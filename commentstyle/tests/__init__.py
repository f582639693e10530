"""Tests for commentstyle."""
