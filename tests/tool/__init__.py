"""Tests for the es-keystore command line tool."""
