"""
Podscribe - chunked audio transcription and summarization.

Takes a remote or local audio source and produces a speaker- and
tone-annotated transcript through a pipeline: acquisition → chunking →
per-chunk transcription → merge → speaker normalization → highlights
and summary → output files.
"""

__version__ = "0.1.0"
