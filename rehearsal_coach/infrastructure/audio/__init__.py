"""
Audio infrastructure for the rehearsal coach.

- processing: level sampling, the live recorder and its events
- speech: the speech-to-text boundary
"""
