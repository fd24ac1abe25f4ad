"""Routine Genius: conflict-free weekly class routines from a section feed."""
