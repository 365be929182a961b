"""Measure how downscaling affects pairwise image similarity scores."""
