"""Infrastructure for the rehearsal coach.

Low-level components around the scoring core: live level metering and the
recording state machine, the speech-to-text boundary, and session history.
Submodules are imported directly.
"""
