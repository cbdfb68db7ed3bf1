"""
Transcript calculation: evaluates a student's graded tests against the
criteria of their tests, subjects and blocks, and stores one overall verdict.

Stages live in their own modules (`test`, `subject`, `block`, `compose`) and
are pure; `pipeline` runs them against storage and `runner` runs pipelines in
the background.
"""
