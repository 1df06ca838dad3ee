"""Barcode food scanner: nutrient grading and ingredient classification."""
