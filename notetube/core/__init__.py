"""
Core functionality for the NoteTube application.

This package contains modules for fetching video metadata and transcripts,
downloading and transcribing audio, generating study notes and the study
tools built on top of them.
"""
