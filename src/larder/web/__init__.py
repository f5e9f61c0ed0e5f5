"""Larder Web API."""
